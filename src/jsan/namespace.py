"""Evaluation of module source and construction of the namespace tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from types import SimpleNamespace
from typing import Any, Protocol

LOGGER = logging.getLogger(__name__)
_MISSING = object()


class NamespaceError(LookupError):
    """Raised when evaluated source does not define its own identifier."""


class Package(SimpleNamespace):
    """Container node for one segment of a dotted identifier."""


class ModuleFactory(Protocol):
    """Turns fetched source into the definition bound at ``identifier``."""

    def create(
        self,
        source: str,
        identifier: str,
        scope: dict[str, Any],
        origin: str,
    ) -> Any: ...


class ExecModuleFactory:
    """Execute Python source with the shared scope as its globals."""

    def create(self, source: str, identifier: str, scope: dict[str, Any], origin: str) -> Any:
        code = compile(source, origin, "exec")
        exec(code, scope)
        definition = lookup(scope, identifier)
        if definition is None:
            raise NamespaceError(f"{origin} did not define '{identifier}'")
        return definition


def lookup(scope: Mapping[str, Any], identifier: str) -> Any | None:
    """Return whatever is bound at the dotted ``identifier``, or None."""

    node: Any = scope
    for name in identifier.split("."):
        node = _child(node, name)
        if node is _MISSING or node is None:
            return None
    return node


def declare(scope: MutableMapping[str, Any], identifier: str) -> Any:
    """Return the container at ``identifier``, creating packages where missing.

    Module source uses this to reach its own parent before binding itself::

        Foo = declare(globals(), "Foo")
        Foo.Bar = Package(EXPORT=["hi"], hi=lambda: "hi")
    """

    node: Any = scope
    for name in identifier.split("."):
        child = _child(node, name)
        if child is _MISSING or child is None:
            child = Package()
            _assign(node, name, child)
        node = child
    return node


def bind_namespace(scope: MutableMapping[str, Any], identifier: str, definition: Any) -> bool:
    """Bind ``definition`` at ``identifier`` unless something is already there.

    Missing intermediate segments become :class:`Package` nodes. Existing
    bindings are never replaced. Returns True when the final segment was bound.
    The definition is bound by reference, so class attributes and any instance
    template it carries are shared with the cached handle.
    """

    segments = identifier.split(".")
    node: Any = scope
    for depth, name in enumerate(segments[:-1]):
        child = _child(node, name)
        if child is _MISSING or child is None:
            # Build the missing branch off-tree and attach it in one assignment.
            branch: Any = definition
            for inner in reversed(segments[depth + 1 :]):
                branch = Package(**{inner: branch})
            _assign(node, name, branch)
            return True
        node = child

    if _child(node, segments[-1]) is not _MISSING:
        LOGGER.debug("'%s' is already bound; leaving the existing binding in place", identifier)
        return False
    _assign(node, segments[-1], definition)
    return True


def unbind(scope: MutableMapping[str, Any], identifier: str) -> None:
    """Remove the final segment of ``identifier`` if it is bound."""

    *parents, leaf = identifier.split(".")
    node: Any = scope
    for name in parents:
        node = _child(node, name)
        if node is _MISSING or node is None:
            return
    if _child(node, leaf) is _MISSING:
        return
    if isinstance(node, MutableMapping):
        del node[leaf]
    else:
        delattr(node, leaf)


def _child(node: Any, name: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(name, _MISSING)
    return getattr(node, name, _MISSING)


def _assign(node: Any, name: str, value: Any) -> None:
    if isinstance(node, MutableMapping):
        node[name] = value
    else:
        setattr(node, name, value)


__all__ = [
    "ExecModuleFactory",
    "ModuleFactory",
    "NamespaceError",
    "Package",
    "bind_namespace",
    "declare",
    "lookup",
    "unbind",
]
