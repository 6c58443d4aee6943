"""Error reporting shared by every stage of a load."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .types import ErrorLevel

LOGGER = logging.getLogger(__name__)


class JsanError(RuntimeError):
    """Raised for load failures when the error level is ``fatal``."""


def _log_warning(message: str) -> None:
    LOGGER.warning("%s", message)


class Diagnostics:
    """Track the configured error level and the most recent failure."""

    def __init__(
        self,
        level: ErrorLevel | str = ErrorLevel.SILENT,
        *,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._level = ErrorLevel.parse(level)
        self.notify = notify or _log_warning
        self.error_message = ""

    @property
    def level(self) -> ErrorLevel:
        return self._level

    @level.setter
    def level(self, value: ErrorLevel | str) -> None:
        self._level = ErrorLevel.parse(value)

    def report_error(self, message: str, level: ErrorLevel | str | None = None) -> None:
        """Record ``message`` and surface it according to the effective level.

        The message is stored whatever the level. ``warn`` hands it to the
        notification channel, ``fatal`` raises :class:`JsanError`.
        """

        effective = self._level if level is None else ErrorLevel.parse(level)
        self.error_message = message
        LOGGER.debug("Load error (%s): %s", effective.value, message)
        if effective is ErrorLevel.SILENT:
            return
        if effective is ErrorLevel.WARN:
            self.notify(message)
            return
        raise JsanError(message)


__all__ = ["Diagnostics", "JsanError"]
