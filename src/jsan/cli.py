"""jsan command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from . import __version__
from .config import Config, ConfigError, load_config
from .diagnostics import JsanError
from .exporter import export_declaration
from .loader import Loader
from .logging import configure_logging

app = typer.Typer(help="Load dotted modules from repositories and export their symbols.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    repositories: list[str] = field(default_factory=list)
    error_level: str | None = None


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"jsan {__version__}")
        raise typer.Exit()


@app.callback()
def _jsan(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to jsan config (env JSAN_CONFIG or ~/.config/jsan/config.yaml).",
        ),
    ] = None,
    repository: Annotated[
        list[str] | None,
        typer.Option(
            "-r",
            "--repository",
            help="Repository searched before configured ones (repeatable, first wins).",
        ),
    ] = None,
    error_level: Annotated[
        str | None,
        typer.Option(
            "--error-level",
            help="Override error level: silent, warn or fatal.",
        ),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(
        config_path=resolved,
        repositories=list(repository or []),
        error_level=error_level,
    )


@app.command()
def repositories(ctx: typer.Context) -> None:
    """List repositories in search order."""

    loader = _build_loader(_state(ctx))
    for index, entry in enumerate(loader.repositories, start=1):
        typer.echo(f"{index}. {entry}")


@app.command()
def resolve(
    ctx: typer.Context,
    identifier: Annotated[str, typer.Argument(..., help="Dotted package identifier.")],
) -> None:
    """Show the resource path and candidate URLs for an identifier."""

    loader = _build_loader(_state(ctx))
    typer.echo(f"Path: {loader.resolve(identifier)}")
    typer.echo("Candidates:")
    for url in loader.candidate_urls(identifier):
        typer.echo(f"  - {url}")


@app.command()
def require(
    ctx: typer.Context,
    identifier: Annotated[str, typer.Argument(..., help="Dotted package identifier.")],
) -> None:
    """Load a module and describe what it exports."""

    loader = _build_loader(_state(ctx))
    handle = _load(loader, identifier)
    declaration = export_declaration(handle)
    path = loader.resolve(identifier)
    typer.echo(f"Module: {identifier}")
    typer.echo(f"Origin: {loader.origins.get(path, 'global scope')}")
    typer.echo(f"EXPORT: {', '.join(declaration.default) or '-'}")
    typer.echo(f"EXPORT_OK: {', '.join(declaration.ok) or '-'}")
    if declaration.tags:
        typer.echo("EXPORT_TAGS:")
        for tag, names in declaration.tags.items():
            typer.echo(f"  {tag}: {', '.join(names) or '-'}")


@app.command()
def use(
    ctx: typer.Context,
    identifier: Annotated[str, typer.Argument(..., help="Dotted package identifier.")],
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Symbols or :tags to export (defaults to EXPORT)."),
    ] = None,
) -> None:
    """Load a module and show the symbols it exports."""

    loader = _build_loader(_state(ctx))
    handle = _load(loader, identifier)
    exported = loader.exporter(handle, *(names or []))
    typer.echo(f"Module: {identifier}")
    if not exported:
        typer.echo("Exported: (nothing)")
        return
    typer.echo("Exported:")
    for name in exported:
        typer.echo(f"  {name} = {_describe(loader.global_scope[name])}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _build_loader(state: CLIState) -> Loader:
    config = _load_config(state.config_path)
    try:
        configure_logging(config.logging)
    except ConfigError as exc:
        _config_failure(exc)
    loader = Loader.from_config(config, global_scope={})
    loader.add_repository(state.repositories)
    if state.error_level is not None:
        try:
            loader.error_level = state.error_level
        except ValueError as exc:
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            raise typer.Exit(2) from exc
    return loader


def _load(loader: Loader, identifier: str) -> Any:
    LOGGER.debug("Loading %s from %s", identifier, list(loader.repositories))
    try:
        handle = loader.require(identifier)
    except JsanError as exc:
        typer.secho(f"Load failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    if handle is None:
        message = loader.error_message or f"Could not load {identifier}"
        typer.secho(f"Load failed: {message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return handle


def _load_config(path: Path | None) -> Config:
    try:
        return load_config(path)
    except ConfigError as exc:
        _config_failure(exc)


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _describe(value: Any) -> str:
    name = getattr(value, "__qualname__", None)
    if callable(value) and name:
        return f"<{type(value).__name__} {name}>"
    return repr(value)


def main() -> None:  # pragma: no cover - delegated to Typer
    app()


__all__ = ["app", "main"]
