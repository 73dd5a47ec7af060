from __future__ import annotations

from .paths import (
    APP_NAME,
    CONFIG_FILENAME,
    default_config_path,
    default_data_dir,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    DEVICE_ENV_VAR,
    NANOLEAF_PORT,
    NANOLEAF_SERVICE_TYPE,
    TOKEN_ENV_VAR,
    DatabaseConfig,
    DeviceConfig,
    DiscoveryConfig,
    RelayConfig,
    ServerConfig,
    Settings,
    data_dir_from_settings,
    env_device_address,
    env_token,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEVICE_ENV_VAR",
    "NANOLEAF_PORT",
    "NANOLEAF_SERVICE_TYPE",
    "TOKEN_ENV_VAR",
    "DatabaseConfig",
    "DeviceConfig",
    "DiscoveryConfig",
    "RelayConfig",
    "ServerConfig",
    "Settings",
    "data_dir_from_settings",
    "default_config_path",
    "default_data_dir",
    "env_device_address",
    "env_token",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
