"""jsan: load dotted modules from repositories and export their symbols."""

from importlib import metadata


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("jsan")
    except metadata.PackageNotFoundError:  # pragma: no cover - occurs in editable installs
        return "0.0.0"


__version__ = _discover_version()

from .diagnostics import Diagnostics, JsanError  # noqa: E402
from .fetch import Fetcher, FetchError, UrlFetcher  # noqa: E402
from .loader import (  # noqa: E402
    Loader,
    add_repository,
    default_loader,
    exporter,
    require,
    use,
)
from .namespace import ExecModuleFactory, ModuleFactory, NamespaceError, Package, declare  # noqa: E402
from .types import ErrorLevel, ExportDeclaration  # noqa: E402

__all__ = [
    "Diagnostics",
    "ErrorLevel",
    "ExecModuleFactory",
    "ExportDeclaration",
    "FetchError",
    "Fetcher",
    "JsanError",
    "Loader",
    "ModuleFactory",
    "NamespaceError",
    "Package",
    "UrlFetcher",
    "__version__",
    "add_repository",
    "declare",
    "default_loader",
    "exporter",
    "require",
    "use",
]
