from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import Literal

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(name)s %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Per-packet mDNS chatter and one access line per relayed request.
QUIET_LOGGERS = ("zeroconf", "aiohttp.access")


def setup_logging(
    level: LogLevel | None = None, quiet: Iterable[str] = QUIET_LOGGERS
) -> None:
    """Install coloured console logging; ``LOGLEVEL`` picks the default level."""
    resolved = (level or os.environ.get("LOGLEVEL", "INFO")).upper()
    coloredlogs.install(level=resolved, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
