from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from leafrelay.cli.common import build_panel_or_exit, load_settings_or_exit
from leafrelay.server import RelayServer


def register(app: typer.Typer) -> None:
    @app.command()
    def serve(
        host: str | None = typer.Option(None, "--host", help="Interface to bind"),
        port: int | None = typer.Option(
            None, "--port", "-p", min=1, max=65535, help="Port to listen on"
        ),
    ) -> None:
        """Run the HTTP relay for the browser control panel."""
        console = Console()
        settings = load_settings_or_exit()
        panel = build_panel_or_exit(settings)
        server = RelayServer(
            panel,
            host=host or settings.server.host,
            port=port or settings.server.port,
        )

        console.print(f"Starting relay on http://{server.host}:{server.port} ...")
        console.print("Press Ctrl+C to stop.\n")
        try:
            asyncio.run(server.start())
        except KeyboardInterrupt:
            console.print("\n[green]Relay stopped.[/green]")
