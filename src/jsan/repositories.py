"""Ordered list of repositories searched for modules."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from typing import Any

from ._helpers import flatten

LOGGER = logging.getLogger(__name__)
DEFAULT_REPOSITORIES = (".", "lib")


class RepositoryList:
    """Search path where the most recently added repositories win."""

    def __init__(self, entries: Iterable[str] = DEFAULT_REPOSITORIES) -> None:
        self._entries: list[str] = [_as_entry(entry) for entry in flatten(list(entries))]

    def add(self, *entries: Any) -> None:
        """Prepend ``entries`` to the search order.

        Accepts any mix of strings, path objects and nested lists of them.
        The first given entry ends up first in the list.
        """

        added = [_as_entry(entry) for entry in flatten(entries)]
        self._entries[:0] = added
        if added:
            LOGGER.debug("Added repositories %s; search order is now %s", added, self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __repr__(self) -> str:
        return f"RepositoryList({self._entries!r})"


def _as_entry(entry: Any) -> str:
    if isinstance(entry, (str, os.PathLike)):
        return os.fspath(entry)
    raise TypeError(f"Repository entries must be strings or paths, got {type(entry).__name__}.")


__all__ = ["DEFAULT_REPOSITORIES", "RepositoryList"]
