from __future__ import annotations

import logging

from leafrelay.api import DeviceClient, DeviceConnectionError
from leafrelay.core.session import DeviceSession
from leafrelay.models import (
    DeviceAddress,
    DeviceUnreachable,
    PairingWindowClosed,
    Success,
    ValidationError,
)

logger = logging.getLogger(__name__)

PAIRING_PATH = "/api/v1/new"

# Some firmware answers 401 instead of 403 outside the pairing window.
_WINDOW_CLOSED_STATUSES = frozenset({401, 403})


class CredentialManager:
    """Owns the auth token of one device session."""

    def __init__(self, session: DeviceSession, client: DeviceClient) -> None:
        self._session = session
        self._client = client

    def current(self) -> str | None:
        return self._session.credential

    def invalidate(self, rejected: str | None = None) -> None:
        if self._session.clear_credential(expected=rejected):
            logger.warning(
                "[%s] Auth token invalidated; pair again to continue",
                self._session.context,
            )

    def restore(self, token: str) -> Success | ValidationError:
        cleaned = token.strip() if isinstance(token, str) else ""
        if not cleaned:
            return ValidationError("auth token must be a non-empty string")
        self._session.set_credential(cleaned)
        logger.info("[%s] Auth token restored", self._session.context)
        return Success(cleaned)

    async def pair(
        self, address: DeviceAddress
    ) -> Success | PairingWindowClosed | DeviceUnreachable:
        url = f"{address.base_url}{PAIRING_PATH}"
        logger.info("Requesting new auth token from %s", address)
        try:
            response = await self._client.post(url)
        except DeviceConnectionError as exc:
            logger.error("Pairing with %s failed: %s", address, exc)
            return DeviceUnreachable(str(exc))

        if response.status in _WINDOW_CLOSED_STATUSES:
            logger.warning("Pairing rejected by %s (%d)", address, response.status)
            return PairingWindowClosed()
        if not response.ok:
            logger.error(
                "Pairing with %s failed: %d %s", address, response.status, response.text
            )
            return DeviceUnreachable(f"{response.status}: {response.text}".strip())

        payload = response.payload if isinstance(response.payload, dict) else {}
        token = payload.get("auth_token")
        if not isinstance(token, str) or not token:
            logger.error("Pairing response from %s carried no auth_token", address)
            return DeviceUnreachable("pairing response did not contain an auth_token")

        self._session.set_credential(token)
        logger.info("[%s] Paired with %s", self._session.context, address)
        return Success(token, response.status)
