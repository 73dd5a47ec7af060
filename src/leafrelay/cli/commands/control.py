from __future__ import annotations

from enum import Enum

import typer
from rich.console import Console

from leafrelay.cli.common import build_panel_or_exit, report, run


class PowerState(str, Enum):
    on = "on"
    off = "off"


def power(
    state: PowerState = typer.Argument(..., help="Turn the lights on or off"),
) -> None:
    """Switch the lights on or off."""
    panel = build_panel_or_exit()
    outcome = run(panel.set_power(state is PowerState.on))
    report(outcome, Console(), f"Power {state.value}")


def brightness(value: int = typer.Argument(..., help="Brightness, 0-100")) -> None:
    """Set the brightness."""
    panel = build_panel_or_exit()
    outcome = run(panel.set_brightness(value))
    report(outcome, Console(), f"Brightness set to {value}%")


def ct(value: int = typer.Argument(..., help="Colour temperature in Kelvin")) -> None:
    """Set the colour temperature."""
    panel = build_panel_or_exit()
    outcome = run(panel.set_color_temperature(value))
    report(outcome, Console(), f"Colour temperature set to {value}K")


def hue(value: int = typer.Argument(..., help="Hue, 0-360")) -> None:
    """Set the hue."""
    panel = build_panel_or_exit()
    outcome = run(panel.set_hue(value))
    report(outcome, Console(), f"Hue set to {value}°")


def sat(value: int = typer.Argument(..., help="Saturation, 0-100")) -> None:
    """Set the saturation."""
    panel = build_panel_or_exit()
    outcome = run(panel.set_saturation(value))
    report(outcome, Console(), f"Saturation set to {value}%")


def effect(name: str = typer.Argument(..., help="Effect name")) -> None:
    """Activate an effect stored on the device."""
    panel = build_panel_or_exit()
    outcome = run(panel.select_effect(name))
    report(outcome, Console(), f"Effect '{name.strip()}' activated")


def register(app: typer.Typer) -> None:
    app.command()(power)
    app.command()(brightness)
    app.command()(ct)
    app.command()(hue)
    app.command()(sat)
    app.command()(effect)
