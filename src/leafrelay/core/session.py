"""Device session: the {address, credential} pair gating every device call."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from leafrelay.models import DeviceAddress, NotConfigured

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "default"
MAX_CONTEXTS = 64
MAX_REVOKED = 8

SessionListener = Callable[["DeviceSession"], None]


@dataclass(frozen=True)
class SessionReady:
    """Snapshot of a complete session, taken once per operation."""

    address: DeviceAddress
    credential: str

    def url(self, path: str = "") -> str:
        return f"{self.address.base_url}/api/v1/{self.credential}{path}"


class DeviceSession:
    """Holds the device address and auth token for one context.

    Only the device locator (address) and the credential manager
    (credential) write here; everything else reads a snapshot via
    ``require()``.
    """

    def __init__(
        self,
        context: str = DEFAULT_CONTEXT,
        address: DeviceAddress | None = None,
        credential: str | None = None,
    ) -> None:
        self._context = context
        self._address = address
        self._credential = credential
        self._revoked: list[str] = []
        self._listeners: list[SessionListener] = []

    def __repr__(self) -> str:
        return (
            f"DeviceSession(context={self._context!r}, address={self._address}, "
            f"paired={self._credential is not None})"
        )

    @property
    def context(self) -> str:
        return self._context

    @property
    def address(self) -> DeviceAddress | None:
        return self._address

    @property
    def credential(self) -> str | None:
        return self._credential

    @property
    def revoked_credentials(self) -> tuple[str, ...]:
        """Recently cleared credentials, oldest first; never restore these."""
        return tuple(self._revoked)

    def remember_revoked(self, credentials: Iterable[str]) -> None:
        """Seed the revoked credentials from a previous run."""
        for credential in credentials:
            if credential != self._credential:
                self._add_revoked(credential)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def require(self) -> SessionReady | NotConfigured:
        address, credential = self._address, self._credential
        if address is not None and credential is not None:
            return SessionReady(address=address, credential=credential)

        missing = []
        if address is None:
            missing.append("address")
        if credential is None:
            missing.append("credential")
        return NotConfigured(missing=tuple(missing))

    def set_address(self, address: DeviceAddress) -> None:
        if address == self._address:
            return
        logger.info("[%s] Device address set to %s", self._context, address)
        self._address = address
        self._notify()

    def clear_address(self) -> None:
        if self._address is None:
            return
        logger.info("[%s] Device address cleared", self._context)
        self._address = None
        self._notify()

    def set_credential(self, credential: str) -> None:
        if credential == self._credential:
            return
        self._credential = credential
        if credential in self._revoked:
            self._revoked.remove(credential)
        self._notify()

    def clear_credential(self, expected: str | None = None) -> bool:
        """Drop the credential; with ``expected``, only if it is still current."""
        if self._credential is None:
            return False
        if expected is not None and expected != self._credential:
            return False
        self._add_revoked(self._credential)
        self._credential = None
        self._notify()
        return True

    def _add_revoked(self, credential: str) -> None:
        if credential in self._revoked:
            self._revoked.remove(credential)
        self._revoked.append(credential)
        del self._revoked[:-MAX_REVOKED]

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)


class SessionRegistry:
    """Hands out one DeviceSession per caller-supplied context key.

    At most ``max_contexts`` private sessions are kept besides the default one.
    When full, the least recently used unpaired session is dropped first, then
    the least recently used paired one.
    """

    def __init__(
        self,
        default: DeviceSession | None = None,
        max_contexts: int = MAX_CONTEXTS,
    ) -> None:
        if max_contexts < 1:
            raise ValueError("max_contexts must be at least 1")
        self._default = default or DeviceSession()
        self._max_contexts = max_contexts
        self._sessions: OrderedDict[str, DeviceSession] = OrderedDict()

    @property
    def default(self) -> DeviceSession:
        return self._default

    def acquire(self, context: str | None = None) -> DeviceSession:
        if context is None or context == self._default.context:
            return self._default
        session = self._sessions.get(context)
        if session is not None:
            self._sessions.move_to_end(context)
            return session

        if len(self._sessions) >= self._max_contexts:
            self._evict()
        session = DeviceSession(context=context)
        self._sessions[context] = session
        logger.debug("Created session for context %r", context)
        return session

    def _evict(self) -> None:
        victim = next(
            (key for key, s in self._sessions.items() if s.credential is None),
            next(iter(self._sessions)),
        )
        del self._sessions[victim]
        logger.debug("Dropped session for context %r", victim)

    def contexts(self) -> list[str]:
        return sorted([self._default.context, *self._sessions])
