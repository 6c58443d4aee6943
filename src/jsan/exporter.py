"""Exporter-style symbol import from loaded modules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from typing import Any

from ._helpers import flatten
from .types import ExportDeclaration

LOGGER = logging.getLogger(__name__)
_MISSING = object()


def export_declaration(handle: Any) -> ExportDeclaration:
    """Read ``EXPORT``, ``EXPORT_OK`` and ``EXPORT_TAGS`` from ``handle``."""

    tags = _member(handle, "EXPORT_TAGS") or {}
    return ExportDeclaration(
        default=_names(_member(handle, "EXPORT")),
        ok=_names(_member(handle, "EXPORT_OK")),
        tags={str(tag): _names(names) for tag, names in dict(tags).items()},
    )


def resolve_exports(handle: Any, requested: Sequence[Any] = ()) -> list[str]:
    """Return the symbol names a request selects from ``handle``.

    With no request the module's default list is used. Otherwise each
    (flattened) request names either an exported symbol or a tag; anything
    else contributes nothing.
    """

    declaration = export_declaration(handle)
    if not requested:
        return list(dict.fromkeys(declaration.default))

    selected: list[str] = []
    for request in flatten(requested):
        if declaration.offers(request):
            selected.append(request)
        elif request in declaration.tags:
            selected.extend(declaration.tags[request])
        else:
            LOGGER.debug("Ignoring unknown export request %r", request)
    return list(dict.fromkeys(selected))


def apply_exports(
    handle: Any,
    names: Iterable[str],
    target: MutableMapping[str, Any],
) -> list[str]:
    """Copy ``names`` from ``handle`` into ``target`` without overwriting.

    Returns the names that were copied.
    """

    copied: list[str] = []
    for name in names:
        if name in target:
            LOGGER.debug("Not exporting '%s': already bound in target scope", name)
            continue
        value = _member(handle, name, _MISSING)
        if value is _MISSING:
            LOGGER.debug("Not exporting '%s': module does not define it", name)
            continue
        target[name] = value
        copied.append(name)
    return copied


def _member(handle: Any, name: str, default: Any = None) -> Any:
    if isinstance(handle, Mapping):
        return handle.get(name, default)
    return getattr(handle, name, default)


def _names(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(name) for name in flatten(value))


__all__ = ["apply_exports", "export_declaration", "resolve_exports"]
