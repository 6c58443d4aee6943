"""Core immutable data structures used throughout jsan."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class ErrorLevel(str, Enum):
    """How load failures are surfaced to the caller."""

    SILENT = "silent"
    WARN = "warn"
    FATAL = "fatal"

    @classmethod
    def parse(cls, value: ErrorLevel | str) -> ErrorLevel:
        """Return the level named by ``value``.

        Accepts the historical spellings ``none`` and ``die`` as well.
        """

        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        normalized = _LEVEL_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as exc:
            choices = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown error level '{value}' (expected one of: {choices}).") from exc


_LEVEL_ALIASES = {"none": "silent", "die": "fatal"}


@dataclass(frozen=True)
class ExportDeclaration:
    """Symbols a module offers to its callers."""

    default: tuple[str, ...] = ()
    ok: tuple[str, ...] = ()
    tags: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def offers(self, name: str) -> bool:
        return name in self.default or name in self.ok


__all__ = ["ErrorLevel", "ExportDeclaration"]
