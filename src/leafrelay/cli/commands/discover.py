from __future__ import annotations

import typer
from rich.console import Console

from leafrelay.cli.common import build_panel_or_exit, load_settings_or_exit, report, run
from leafrelay.models import Success


def discover(
    timeout_ms: int | None = typer.Option(
        None, "--timeout-ms", "-t", min=1, help="Discovery timeout in milliseconds"
    ),
) -> None:
    """Find the device on the local network via mDNS and remember it."""
    console = Console()
    settings = load_settings_or_exit()
    panel = build_panel_or_exit(settings)

    effective = timeout_ms if timeout_ms is not None else settings.discovery.timeout_ms
    console.print(f"Discovering Nanoleaf devices via mDNS ({effective}ms)...")
    outcome = run(panel.discover(effective))
    address = outcome.value if isinstance(outcome, Success) else None
    report(outcome, console, f"Found device at {address}")


def set_address(
    address: str = typer.Argument(..., help="Device address as host:port"),
) -> None:
    """Set the device address manually."""
    console = Console()
    panel = build_panel_or_exit()
    outcome = panel.set_address(address)
    report(outcome, console, f"Device address set to {address.strip()}")


def register(app: typer.Typer) -> None:
    app.command()(discover)
    app.command("set-address")(set_address)
