from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from leafrelay.cli.common import build_panel_or_exit, report, run
from leafrelay.models import FullState, Success


def _display(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def state() -> None:
    """Show the device's current state."""
    console = Console()
    panel = build_panel_or_exit()
    outcome = run(panel.get_state())
    if not isinstance(outcome, Success):
        report(outcome, console)
        return

    current: FullState = outcome.value
    table = Table(title=current.name or "Device state")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    ct = _display(current.ct)
    if current.ct_min is not None and current.ct_max is not None:
        ct = f"{ct} ({current.ct_min}-{current.ct_max})"

    table.add_row("Power", _display(current.on))
    table.add_row("Brightness", _display(current.brightness))
    table.add_row("Colour temperature", ct)
    table.add_row("Hue", _display(current.hue))
    table.add_row("Saturation", _display(current.sat))
    table.add_row("Colour mode", _display(current.color_mode))
    table.add_row("Effect", _display(current.effect))
    console.print(table)


def effects() -> None:
    """List the effects stored on the device."""
    console = Console()
    panel = build_panel_or_exit()
    outcome = run(panel.get_effects_list())
    if not isinstance(outcome, Success):
        report(outcome, console)
        return

    for name in outcome.value:
        console.print(f"  • {name}")
    console.print(f"\n[green]{len(outcome.value)} effect(s)[/green]")


def register(app: typer.Typer) -> None:
    app.command()(state)
    app.command()(effects)
