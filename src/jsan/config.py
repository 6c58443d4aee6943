"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .paths import DEFAULT_EXTENSION
from .types import ErrorLevel

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/jsan/config.yaml")
DEFAULT_LOG_LEVEL = "info"
CONFIG_ENV_VAR = "JSAN_CONFIG"


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    file: Path | None = None


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    repositories: list[str] = field(default_factory=list)
    error_level: ErrorLevel = ErrorLevel.SILENT
    extension: str = DEFAULT_EXTENSION
    base_dir: Path | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicit path or ``$JSAN_CONFIG`` must point at an existing file. When
    neither is given and the default file is absent, defaults are used.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s; using defaults", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    return Config(
        repositories=_parse_repositories(raw.get("repositories")),
        error_level=_parse_error_level(raw.get("error_level")),
        extension=_parse_extension(raw.get("extension")),
        base_dir=_parse_base_dir(raw.get("base_dir")),
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_repositories(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError("repositories must be a list.")

    repositories: list[str] = []
    for idx, entry in enumerate(value, start=1):
        if not isinstance(entry, str) or not entry.strip():
            raise ConfigError(f"repositories[{idx}] must be a non-empty string.")
        repositories.append(entry)
    return repositories


def _parse_error_level(value: Any) -> ErrorLevel:
    if value is None:
        return ErrorLevel.SILENT
    try:
        return ErrorLevel.parse(value)
    except ValueError as exc:
        raise ConfigError(f"error_level: {exc}") from exc


def _parse_extension(value: Any) -> str:
    if value is None:
        return DEFAULT_EXTENSION
    if not isinstance(value, str) or not value.startswith("."):
        raise ConfigError("extension must be a string starting with '.'.")
    return value


def _parse_base_dir(value: Any) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError("base_dir must be a string path.")
    return Path(value).expanduser()


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    file_value = value.get("file")
    if file_value is not None and not isinstance(file_value, str):
        raise ConfigError("logging.file must be a string path.")
    log_file = Path(file_value).expanduser() if file_value else None
    return LoggingConfig(level=level, file=log_file)


__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "load_config",
]
