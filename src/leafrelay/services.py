"""Wiring of the control panel to configuration and storage."""

from __future__ import annotations

import logging

from leafrelay.config import Settings, env_device_address, env_token
from leafrelay.core import ControlPanel, DeviceSession
from leafrelay.models import DeviceAddress, Outcome, SessionRecord, Success
from leafrelay.storage import Database

logger = logging.getLogger(__name__)


def _configured_address(settings: Settings, record: SessionRecord | None) -> str | None:
    from_env = env_device_address()
    if from_env:
        logger.info("Using device address from environment")
        return from_env
    if settings.device.host:
        return str(DeviceAddress(host=settings.device.host, port=settings.device.port))
    address = record.address() if record else None
    return str(address) if address else None


def _configured_token(settings: Settings, record: SessionRecord | None) -> str | None:
    """Pick the token to restore: environment, then stored session, then settings.

    A token the device rejected in an earlier run is never restored, whichever
    source still carries it.
    """
    revoked = set(record.revoked_tokens) if record else set()
    candidates = (
        ("environment", env_token()),
        ("stored session", record.token if record else None),
        ("settings", settings.device.token),
    )
    for source, token in candidates:
        if not token:
            continue
        if token in revoked:
            logger.warning("Ignoring rejected auth token from %s", source)
            continue
        logger.debug("Using auth token from %s", source)
        return token
    return None


def _persist_to(database: Database):
    def _save(session: DeviceSession) -> None:
        try:
            database.save_session(
                session.address,
                session.credential,
                revoked=session.revoked_credentials,
            )
        except OSError as exc:
            # The in-memory session stays authoritative for this run.
            logger.error(
                "Could not save session to %s: %s", database.session_path, exc
            )

    return _save


def build_panel(settings: Settings, database: Database | None = None) -> ControlPanel:
    """Create a panel whose default session is seeded and persisted.

    Raises ValueError when a configured address or token is malformed.
    """
    panel = ControlPanel.from_settings(settings)
    record = database.load_session() if database else None

    address = _configured_address(settings, record)
    if address:
        outcome = panel.set_address(address)
        if not outcome.ok:
            raise ValueError(f"Invalid device address {address!r}: {outcome.reason}")

    token = _configured_token(settings, record)
    if token:
        outcome = panel.restore_token(token)
        if not outcome.ok:
            raise ValueError(f"Invalid auth token: {outcome.reason}")

    if record is not None:
        panel.registry.default.remember_revoked(record.revoked_tokens)

    if database is not None:
        panel.registry.default.subscribe(_persist_to(database))

    session = panel.registry.default
    if session.credential is None:
        logger.warning("No auth token configured; pair the device to continue")
    return panel


async def ensure_address(panel: ControlPanel, timeout_ms: int | None = None) -> Outcome:
    """Discover the device once if the default session has no address yet."""
    address = panel.session().address
    if address is not None:
        return Success(address)
    return await panel.discover(timeout_ms)
