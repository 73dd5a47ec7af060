from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from leafrelay.config import (
    Settings,
    data_dir_from_settings,
    get_settings,
    resolve_config_path,
)
from leafrelay.core import ControlPanel
from leafrelay.models import Outcome
from leafrelay.services import build_panel
from leafrelay.storage import Database


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_database(settings: Settings, data_dir: Path | None = None) -> Database:
    path = data_dir or data_dir_from_settings(settings)
    return Database(path)


def build_panel_or_exit(settings: Settings | None = None) -> ControlPanel:
    settings = settings or load_settings_or_exit()
    try:
        return build_panel(settings, build_database(settings))
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def run(coro: Coroutine[Any, Any, Outcome]) -> Outcome:
    return asyncio.run(coro)


def report(outcome: Outcome, console: Console, message: str | None = None) -> None:
    """Print the outcome; any failure exits with status 1."""
    if outcome.ok:
        console.print(f"[green]✓[/green] {escape(message or 'Done')}")
        return
    console.print(f"[red]✗[/red] {outcome.kind}: {escape(outcome.reason)}")
    raise typer.Exit(1)
