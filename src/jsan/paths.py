"""Mapping between package identifiers, resource paths and URLs."""

from __future__ import annotations

DEFAULT_EXTENSION = ".py"


def package_to_path(identifier: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Return the resource path for ``identifier``.

    ``Foo.Bar.Baz`` becomes ``Foo/Bar/Baz.py``.
    """

    return "/".join(identifier.split(".")) + extension


def path_to_url(path: str, repository: str) -> str:
    """Return the candidate location of ``path`` inside ``repository``."""

    return f"{repository}/{path}"


__all__ = ["DEFAULT_EXTENSION", "package_to_path", "path_to_url"]
