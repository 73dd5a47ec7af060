from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "LEAFRELAY_CONFIG"
DEVICE_ENV_VAR = "LEAFRELAY_DEVICE"
TOKEN_ENV_VAR = "LEAFRELAY_TOKEN"

NANOLEAF_PORT = 16021
NANOLEAF_SERVICE_TYPE = "_nanoleafapi._tcp.local."


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str | None = None
    port: int = Field(default=NANOLEAF_PORT, ge=1, le=65535)
    token: str | None = None


class DiscoveryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    timeout_ms: int = Field(default=10_000, gt=0)
    default_port: int = Field(default=NANOLEAF_PORT, ge=1, le=65535)
    service_type: str = NANOLEAF_SERVICE_TYPE


class RelayConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    http_timeout: float = Field(default=5.0, gt=0)
    ct_min: int = Field(default=1200, ge=1)
    ct_max: int = Field(default=6500, ge=1)

    @model_validator(mode="after")
    def _check_ct_range(self) -> RelayConfig:
        if self.ct_min > self.ct_max:
            raise ValueError(
                f"ct_min ({self.ct_min}) must not exceed ct_max ({self.ct_max})"
            )
        return self


class ServerConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str = "127.0.0.1"
    port: int = Field(default=8778, ge=1, le=65535)
    max_contexts: int = Field(default=64, ge=1)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    relay: RelayConfig = Field(default_factory=RelayConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def env_device_address() -> str | None:
    """Return the ``host:port`` given through the environment, if any."""
    value = os.environ.get(DEVICE_ENV_VAR, "").strip()
    return value or None


def env_token() -> str | None:
    value = os.environ.get(TOKEN_ENV_VAR, "").strip()
    return value or None


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# leafrelay configuration",
        "",
        "[database]",
        f"path = {_toml_string(settings.database.path)}",
        "",
        "[device]",
    ]
    if settings.device.host:
        lines.append(f"host = {_toml_string(settings.device.host)}")
    lines.append(f"port = {settings.device.port}")
    if settings.device.token:
        lines.append(f"token = {_toml_string(settings.device.token)}")
    lines += [
        "",
        "[discovery]",
        f"timeout_ms = {settings.discovery.timeout_ms}",
        f"default_port = {settings.discovery.default_port}",
        f"service_type = {_toml_string(settings.discovery.service_type)}",
        "",
        "[relay]",
        f"http_timeout = {settings.relay.http_timeout}",
        f"ct_min = {settings.relay.ct_min}",
        f"ct_max = {settings.relay.ct_max}",
        "",
        "[server]",
        f"host = {_toml_string(settings.server.host)}",
        f"port = {settings.server.port}",
        f"max_contexts = {settings.server.max_contexts}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
