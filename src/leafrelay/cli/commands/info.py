from __future__ import annotations

import typer
from rich.console import Console

from leafrelay.cli.common import (
    build_database,
    build_panel_or_exit,
    load_settings_or_exit,
    resolve_config_path_or_exit,
)
from leafrelay.utils.redaction import Redactor


def register(app: typer.Typer) -> None:
    @app.command()
    def info(
        redact: bool = typer.Option(
            False, "--redact", help="Redact host and token in output"
        ),
    ) -> None:
        """Show configuration sources and the current device session."""
        settings = load_settings_or_exit()
        db = build_database(settings)
        panel = build_panel_or_exit(settings)
        session = panel.session()
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)
        redactor = Redactor(enabled=redact)

        console = Console()

        console.print("[bold]leafrelay Info[/bold]\n")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")
        console.print(f"Data directory: {db.path}")
        console.print(f"Session file: {db.session_path}")

        console.print("\n[bold]Device session[/bold]")
        if session.address is not None:
            host = redactor.redact_host(session.address.host)
            console.print(f"Address: {host}:{session.address.port}")
        else:
            console.print(
                "Address: [yellow]not set[/yellow] (run 'leafrelay discover')"
            )
        if session.credential is not None:
            console.print(f"Auth token: {redactor.redact_token(session.credential)}")
        else:
            console.print(
                "Auth token: [yellow]not paired[/yellow] (run 'leafrelay pair')"
            )

        console.print("\n[bold]Configuration[/bold]")
        console.print(f"Discovery timeout: {settings.discovery.timeout_ms}ms")
        console.print(f"Default device port: {settings.discovery.default_port}")
        console.print(
            "Colour temperature range: "
            f"{settings.relay.ct_min}-{settings.relay.ct_max}K"
        )
        console.print(f"Relay server: {settings.server.host}:{settings.server.port}")
