from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from leafrelay.config import NANOLEAF_PORT
from leafrelay.core import run_mock_device


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        name: str = typer.Option(
            "Mock Light Panels", "--name", "-n", help="Device name"
        ),
        port: int = typer.Option(
            NANOLEAF_PORT, "--port", "-p", help="Port to listen on"
        ),
        token: str | None = typer.Option(
            None, "--token", help="Pre-authorised auth token"
        ),
        advertise: bool = typer.Option(
            False, "--advertise", help="Announce the device via mDNS"
        ),
        pairing_open: bool = typer.Option(
            False, "--pairing-open", help="Open the 30s pairing window on start"
        ),
    ) -> None:
        """Run a mock Nanoleaf device for development."""
        console = Console()
        console.print(f"Starting mock device '{name}' on port {port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(
                run_mock_device(
                    name=name,
                    port=port,
                    token=token,
                    advertise=advertise,
                    pairing_open=pairing_open,
                )
            )
        except KeyboardInterrupt:
            console.print("\n[green]Mock device stopped.[/green]")
