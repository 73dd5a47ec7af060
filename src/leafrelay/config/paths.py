"""Filesystem locations used by leafrelay (XDG base directories)."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "leafrelay"
CONFIG_FILENAME = "config.toml"


def _xdg_base(env_var: str, *fallback: str) -> Path:
    # An empty variable is treated as unset.
    value = os.environ.get(env_var)
    return Path(value) if value else Path.home().joinpath(*fallback)


def default_config_path() -> Path:
    return _xdg_base("XDG_CONFIG_HOME", ".config") / APP_NAME / CONFIG_FILENAME


def default_data_dir() -> Path:
    """Where the paired session is stored between runs."""
    return _xdg_base("XDG_DATA_HOME", ".local", "share") / APP_NAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(value)).expanduser()
