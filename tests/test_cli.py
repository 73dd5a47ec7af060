from __future__ import annotations

import pytest
from conftest import DEVICE, TOKEN, FakeClient
from typer.testing import CliRunner

import leafrelay.cli.commands.control as control_cmd
import leafrelay.cli.commands.state as state_cmd
from leafrelay.api import DeviceResponse
from leafrelay.cli.app import app
from leafrelay.config import (
    DatabaseConfig,
    DeviceConfig,
    Settings,
    get_settings,
    write_settings,
)
from leafrelay.core import ControlPanel, DeviceSession, SessionRegistry
from leafrelay.storage import Database


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    config_path = tmp_path / "config.toml"
    write_settings(
        Settings(
            database=DatabaseConfig(path=str(data_dir)),
            device=DeviceConfig(token="secret-token-1234"),
        ),
        config_path,
    )
    monkeypatch.setenv("LEAFRELAY_CONFIG", str(config_path))
    get_settings.cache_clear()
    return data_dir


def _panel_with(*responses: DeviceResponse) -> tuple[ControlPanel, FakeClient]:
    client = FakeClient(list(responses))
    session = DeviceSession(address=DEVICE, credential=TOKEN)
    return ControlPanel(registry=SessionRegistry(session), client=client), client


def test_version():
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "leafrelay version" in result.stdout


def test_config_show_masks_token(config_env):
    result = CliRunner().invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "secret-token-1234" not in result.stdout
    assert "****1234" in result.stdout


def test_set_address_is_remembered(config_env):
    runner = CliRunner()

    result = runner.invoke(app, ["set-address", "192.168.1.50:16021"])
    assert result.exit_code == 0

    record = Database(config_env).load_session()
    assert str(record.address()) == "192.168.1.50:16021"

    result = runner.invoke(app, ["info", "--redact"])
    assert result.exit_code == 0
    assert "x.x.x.50:16021" in result.stdout


def test_set_address_rejects_garbage(config_env):
    result = CliRunner().invoke(app, ["set-address", "nanoleaf"])
    assert result.exit_code == 1
    assert "validation_error" in result.stdout


def test_brightness_out_of_range_exits_nonzero(monkeypatch):
    panel, client = _panel_with()
    monkeypatch.setattr(control_cmd, "build_panel_or_exit", lambda: panel)

    result = CliRunner().invoke(app, ["brightness", "150"])

    assert result.exit_code == 1
    assert "validation_error" in result.stdout
    assert client.calls == []


def test_power_on(monkeypatch):
    panel, client = _panel_with(DeviceResponse(status=204))
    monkeypatch.setattr(control_cmd, "build_panel_or_exit", lambda: panel)

    result = CliRunner().invoke(app, ["power", "on"])

    assert result.exit_code == 0
    assert "Power on" in result.stdout
    assert client.calls[0][2] == {"on": {"value": True}}


def test_state_table(monkeypatch):
    payload = {
        "name": "Shapes",
        "state": {"on": {"value": True}, "brightness": {"value": 70}},
        "effects": {"select": "Forest"},
    }
    panel, _ = _panel_with(DeviceResponse(status=200, payload=payload))
    monkeypatch.setattr(state_cmd, "build_panel_or_exit", lambda: panel)

    result = CliRunner().invoke(app, ["state"])

    assert result.exit_code == 0
    assert "Forest" in result.stdout
    assert "70" in result.stdout


def test_effects_when_token_rejected(monkeypatch):
    panel, _ = _panel_with(DeviceResponse(status=401))
    monkeypatch.setattr(state_cmd, "build_panel_or_exit", lambda: panel)

    result = CliRunner().invoke(app, ["effects"])

    assert result.exit_code == 1
    assert "unauthorized" in result.stdout
