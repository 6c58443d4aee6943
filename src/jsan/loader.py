"""Load-once module resolution, materialization and export."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .diagnostics import Diagnostics
from .exporter import apply_exports, resolve_exports
from .fetch import Fetcher, FetchError, UrlFetcher
from .namespace import ExecModuleFactory, ModuleFactory, bind_namespace, lookup, unbind
from .paths import DEFAULT_EXTENSION, package_to_path, path_to_url
from .repositories import DEFAULT_REPOSITORIES, RepositoryList
from .types import ErrorLevel

if TYPE_CHECKING:
    from .config import Config

LOGGER = logging.getLogger(__name__)
SCOPE_BINDING = "JSAN"


def _host_scope() -> dict[str, Any]:
    main = sys.modules.get("__main__")
    return vars(main) if main is not None else {}


class Loader:
    """Resolve dotted identifiers against repositories and load them once."""

    def __init__(
        self,
        *repositories: Any,
        global_scope: dict[str, Any] | None = None,
        fetcher: Fetcher | None = None,
        factory: ModuleFactory | None = None,
        diagnostics: Diagnostics | None = None,
        extension: str = DEFAULT_EXTENSION,
        defaults: Iterable[str] = DEFAULT_REPOSITORIES,
    ) -> None:
        self.global_scope = _host_scope() if global_scope is None else global_scope
        self.fetcher = fetcher or UrlFetcher()
        self.factory = factory or ExecModuleFactory()
        self.diagnostics = diagnostics or Diagnostics()
        self.extension = extension
        self.repositories = RepositoryList(defaults)
        self.loaded: dict[str, Any] = {}
        self.origins: dict[str, str] = {}
        self._in_progress: set[str] = set()
        self._committed: set[str] = set()
        self.repositories.add(*repositories)

    @classmethod
    def from_config(cls, config: Config, global_scope: dict[str, Any] | None = None) -> Loader:
        """Build a loader from parsed configuration."""

        return cls(
            list(config.repositories),
            global_scope=global_scope,
            fetcher=UrlFetcher(base_dir=config.base_dir),
            diagnostics=Diagnostics(config.error_level),
            extension=config.extension,
        )

    @property
    def error_level(self) -> ErrorLevel:
        return self.diagnostics.level

    @error_level.setter
    def error_level(self, value: ErrorLevel | str) -> None:
        self.diagnostics.level = value

    @property
    def error_message(self) -> str:
        return self.diagnostics.error_message

    def add_repository(self, *entries: Any) -> Loader:
        """Search ``entries`` before every repository already configured."""

        self.repositories.add(*entries)
        return self

    def resolve(self, identifier: str) -> str:
        return package_to_path(identifier, self.extension)

    def candidate_urls(self, identifier: str) -> list[str]:
        """Return the locations ``require`` would try, in order."""

        path = self.resolve(identifier)
        return [path_to_url(path, repository) for repository in self.repositories]

    def use(self, identifier: str, *requested: Any) -> Any | None:
        """Load ``identifier`` and export symbols from it into the global scope.

        With no ``requested`` names the module's ``EXPORT`` list is exported.
        Names may be symbols from ``EXPORT``/``EXPORT_OK``, tags from
        ``EXPORT_TAGS``, or nested lists of either. Returns the module, or
        None when it could not be loaded.
        """

        handle = self.require(identifier)
        if handle is None:
            return None
        self.exporter(handle, *requested)
        return handle

    def require(self, identifier: str) -> Any | None:
        """Load ``identifier`` without exporting anything."""

        path = self.resolve(identifier)
        if path in self.loaded:
            return self.loaded[path]

        inline = self._lookup_inline(identifier)
        if inline is not None:
            LOGGER.debug("'%s' is already defined in the global scope", identifier)
            return inline

        if identifier in self._in_progress:
            self.diagnostics.report_error(f"Circular require of {identifier}")
            return None

        repositories = list(self.repositories)
        if not repositories:
            self.diagnostics.report_error(f"No repositories to search for {path}")
            return None

        last = len(repositories) - 1
        for index, repository in enumerate(repositories):
            url = path_to_url(path, repository)
            try:
                source = self.fetcher.fetch_text(url)
            except FetchError as exc:
                LOGGER.debug("%s", exc)
                source = None
            if source is not None:
                return self._load(source, identifier, path, url)
            if index == last:
                self.diagnostics.report_error(f"File not found: {url}")
        return None

    def exporter(self, handle: Any, *requested: Any) -> list[str]:
        """Export symbols from an already loaded ``handle`` into the global scope."""

        names = resolve_exports(handle, requested)
        copied = apply_exports(handle, names, self.global_scope)
        self._committed.update(copied)
        return copied

    def materialize(self, source: str, identifier: str, origin: str = "<string>") -> Any | None:
        """Evaluate ``source`` and bind the definition it creates at ``identifier``.

        On failure every global the evaluation added is removed again, except
        those committed by nested loads that succeeded, and nothing is left
        bound at ``identifier``.
        """

        self.global_scope.setdefault(SCOPE_BINDING, self)
        before = set(self.global_scope)
        was_bound = self._lookup_inline(identifier) is not None
        self._in_progress.add(identifier)
        try:
            definition = self.factory.create(source, identifier, self.global_scope, origin)
            bind_namespace(self.global_scope, identifier, definition)
        except Exception as exc:
            self._rollback(identifier, before, was_bound)
            self.diagnostics.report_error(f"Could not create namespace[{identifier}]: {exc}")
            return None
        finally:
            self._in_progress.discard(identifier)
        return definition

    def _load(self, source: str, identifier: str, path: str, url: str) -> Any | None:
        definition = self.materialize(source, identifier, url)
        if definition is None:
            return None
        self.loaded[path] = definition
        self._committed.add(identifier.split(".")[0])
        self.origins[path] = url
        LOGGER.info("Loaded %s from %s", identifier, url)
        return definition

    def _rollback(self, identifier: str, before: set[str], was_bound: bool) -> None:
        if not was_bound:
            unbind(self.global_scope, identifier)
        added = set(self.global_scope) - before - self._committed
        for name in added:
            self.global_scope.pop(name, None)
        if added:
            LOGGER.debug("Removed %s after failing to load %s", sorted(added), identifier)

    def _lookup_inline(self, identifier: str) -> Any | None:
        try:
            return lookup(self.global_scope, identifier)
        except (AttributeError, LookupError):
            LOGGER.debug("Inline lookup of '%s' failed", identifier, exc_info=True)
            return None


_default_loader: Loader | None = None


def default_loader() -> Loader:
    """Return the process-wide loader, creating it on first use."""

    global _default_loader
    if _default_loader is None:
        _default_loader = Loader()
    return _default_loader


def use(identifier: str, *requested: Any) -> Any | None:
    return default_loader().use(identifier, *requested)


def require(identifier: str) -> Any | None:
    return default_loader().require(identifier)


def exporter(handle: Any, *requested: Any) -> list[str]:
    return default_loader().exporter(handle, *requested)


def add_repository(*entries: Any) -> Loader:
    return default_loader().add_repository(*entries)


__all__ = [
    "Loader",
    "SCOPE_BINDING",
    "add_repository",
    "default_loader",
    "exporter",
    "require",
    "use",
]
