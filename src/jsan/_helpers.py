"""Small helpers shared across jsan modules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def flatten(items: Iterable[Any]) -> list[Any]:
    """Flatten arbitrarily nested lists and tuples into a single list.

    Strings are treated as atoms, so ``flatten(["a", ["b", ("c",)]])`` gives
    ``["a", "b", "c"]``.
    """

    flat: list[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(flatten(item))
        else:
            flat.append(item)
    return flat


__all__ = ["flatten"]
