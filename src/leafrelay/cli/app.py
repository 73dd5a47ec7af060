from __future__ import annotations

from typing import Annotated

import typer

from leafrelay.utils.logging import setup_logging

from .commands import config as config_cmd
from .commands.control import register as register_control
from .commands.discover import register as register_discover
from .commands.info import register as register_info
from .commands.mock import register as register_mock
from .commands.pairing import register as register_pairing
from .commands.serve import register as register_serve
from .commands.state import register as register_state

app = typer.Typer(
    help="leafrelay - local control relay for Nanoleaf lights", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_info(app)
register_discover(app)
register_pairing(app)
register_state(app)
register_control(app)
register_serve(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """leafrelay CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"leafrelay version {get_version('leafrelay')}")
        raise typer.Exit()
