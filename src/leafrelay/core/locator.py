from __future__ import annotations

import asyncio
import logging

from zeroconf import ServiceBrowser, ServiceInfo, ServiceListener, Zeroconf

from leafrelay.config import DiscoveryConfig
from leafrelay.models import (
    DeviceAddress,
    DeviceUnreachable,
    DiscoveryTimeout,
    ValidationError,
    parse_address,
)

logger = logging.getLogger(__name__)

MAX_INFO_TIMEOUT_MS = 3000


def _pick_ip(info: ServiceInfo) -> str | None:
    addresses = info.parsed_addresses()
    if not addresses:
        return None
    for address in addresses:
        if ":" not in address:
            return address
    return addresses[0]


def address_from_service_info(
    info: ServiceInfo, default_port: int
) -> DeviceAddress | None:
    ip = _pick_ip(info)
    if ip is None:
        return None
    return DeviceAddress(host=ip, port=info.port or default_port)


class FirstAdvertisementListener(ServiceListener):
    """Hands the first usable advertisement over to the event loop.

    zeroconf calls this from its own thread.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        found: asyncio.Future[DeviceAddress],
        default_port: int,
        info_timeout_ms: int,
    ) -> None:
        self._loop = loop
        self._found = found
        self._default_port = default_port
        self._info_timeout_ms = info_timeout_ms

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        info = zc.get_service_info(type_, name, timeout=self._info_timeout_ms)
        if not info:
            return
        address = address_from_service_info(info, self._default_port)
        if address is None:
            logger.debug("Ignoring advertisement '%s' without an address", name)
            return
        logger.debug("Advertisement '%s' resolved to %s", name, address)
        self._loop.call_soon_threadsafe(self._deliver, address)

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, _zc: Zeroconf, _type_: str, _name: str) -> None:
        return None

    def _deliver(self, address: DeviceAddress) -> None:
        if not self._found.done():
            self._found.set_result(address)


class DiscoveryBrowser:
    """One zeroconf browse session; ``stop()`` may be called any number of times."""

    def __init__(self, service_type: str, default_port: int, info_timeout_ms: int):
        self._service_type = service_type
        self._default_port = default_port
        self._info_timeout_ms = info_timeout_ms
        self._zeroconf: Zeroconf | None = None
        self._browser: ServiceBrowser | None = None
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> asyncio.Future[DeviceAddress]:
        loop = asyncio.get_running_loop()
        found: asyncio.Future[DeviceAddress] = loop.create_future()
        listener = FirstAdvertisementListener(
            loop, found, self._default_port, self._info_timeout_ms
        )
        self._zeroconf = Zeroconf()
        self._browser = ServiceBrowser(self._zeroconf, self._service_type, listener)
        return found

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._zeroconf is None:
            return
        await asyncio.to_thread(self._close)

    def _close(self) -> None:
        if self._browser is not None:
            self._browser.cancel()
        if self._zeroconf is not None:
            self._zeroconf.close()


class DeviceLocator:
    def __init__(self, config: DiscoveryConfig | None = None) -> None:
        self._config = config or DiscoveryConfig()
        self._inflight: asyncio.Task[
            DeviceAddress | DiscoveryTimeout | DeviceUnreachable
        ] | None = None

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    async def locate(
        self, timeout_ms: int | None = None
    ) -> DeviceAddress | DiscoveryTimeout | DeviceUnreachable | ValidationError:
        """Resolve the device address via mDNS.

        Concurrent callers share the discovery already in flight.
        """
        if timeout_ms is not None and (
            isinstance(timeout_ms, bool)
            or not isinstance(timeout_ms, int)
            or timeout_ms <= 0
        ):
            return ValidationError("timeout_ms must be a positive integer")
        if self._inflight is None or self._inflight.done():
            effective = (
                timeout_ms if timeout_ms is not None else self._config.timeout_ms
            )
            self._inflight = asyncio.ensure_future(self._discover(effective))
        return await asyncio.shield(self._inflight)

    async def _discover(
        self, timeout_ms: int
    ) -> DeviceAddress | DiscoveryTimeout | DeviceUnreachable:
        logger.info(
            "Discovering %s devices via mDNS (timeout=%dms)",
            self._config.service_type,
            timeout_ms,
        )
        browser = DiscoveryBrowser(
            self._config.service_type,
            self._config.default_port,
            min(timeout_ms, MAX_INFO_TIMEOUT_MS),
        )
        try:
            found = browser.start()
            address = await asyncio.wait_for(found, timeout=timeout_ms / 1000)
        except (asyncio.TimeoutError, TimeoutError):
            logger.warning("Discovery timed out after %dms", timeout_ms)
            return DiscoveryTimeout(timeout_ms)
        except OSError as exc:
            logger.error("Discovery failed: %s", exc)
            return DeviceUnreachable(f"mDNS discovery failed: {exc}")
        finally:
            await browser.stop()

        logger.info("Discovered device at %s", address)
        return address

    def set_address(self, text: str) -> DeviceAddress | ValidationError:
        if not isinstance(text, str):
            return ValidationError("address must be a 'host:port' string")
        try:
            return parse_address(text)
        except ValueError as exc:
            return ValidationError(str(exc))
