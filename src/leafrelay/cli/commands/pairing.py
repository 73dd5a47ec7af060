from __future__ import annotations

import typer
from rich.console import Console

from leafrelay.cli.common import build_panel_or_exit, report, run


def pair() -> None:
    """Request a new auth token; the device's pairing window must be open."""
    console = Console()
    panel = build_panel_or_exit()

    console.print(
        "Hold the power button for 5-7 seconds until the lights flash, "
        "then pair within 30 seconds."
    )
    outcome = run(panel.pair())
    report(outcome, console, "Paired; auth token stored")


def forget() -> None:
    """Forget the stored auth token."""
    console = Console()
    panel = build_panel_or_exit()
    report(panel.forget(), console, "Auth token removed")


def register(app: typer.Typer) -> None:
    app.command()(pair)
    app.command()(forget)
