from __future__ import annotations

import asyncio

import pytest

import leafrelay.core.locator as locator_module
from leafrelay.config import DiscoveryConfig
from leafrelay.core import DeviceLocator, DiscoveryBrowser
from leafrelay.models import (
    DeviceAddress,
    DeviceUnreachable,
    DiscoveryTimeout,
    ValidationError,
)

SERVICE_TYPE = "_nanoleafapi._tcp.local."


class FakeServiceInfo:
    def __init__(self, addresses: list[str], port: int | None) -> None:
        self._addresses = addresses
        self.port = port

    def parsed_addresses(self) -> list[str]:
        return self._addresses


class FakeNetwork:
    """Replaces zeroconf with a fixed set of advertisements."""

    def __init__(self, adverts: dict[str, FakeServiceInfo] | None = None) -> None:
        self.adverts = adverts or {}
        self.instances: list[FakeZeroconf] = []
        self.browsers: list[FakeBrowser] = []

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        network = self

        class _Zeroconf(FakeZeroconf):
            def __init__(self) -> None:
                super().__init__(network)
                network.instances.append(self)

        class _Browser(FakeBrowser):
            def __init__(self, zc, type_, listener) -> None:
                super().__init__(zc, type_, listener)
                network.browsers.append(self)

        monkeypatch.setattr(locator_module, "Zeroconf", _Zeroconf)
        monkeypatch.setattr(locator_module, "ServiceBrowser", _Browser)


class FakeZeroconf:
    def __init__(self, network: FakeNetwork) -> None:
        self.network = network
        self.closed = 0

    def get_service_info(self, type_: str, name: str, timeout: int = 3000):
        return self.network.adverts.get(name)

    def close(self) -> None:
        self.closed += 1


class FakeBrowser:
    def __init__(self, zc: FakeZeroconf, type_: str, listener) -> None:
        self.cancelled = 0
        for name in zc.network.adverts:
            listener.add_service(zc, type_, name)

    def cancel(self) -> None:
        self.cancelled += 1


def test_locate_resolves_first_advertisement(monkeypatch):
    network = FakeNetwork(
        {f"Shapes.{SERVICE_TYPE}": FakeServiceInfo(["192.168.1.50"], 16021)}
    )
    network.install(monkeypatch)

    result = asyncio.run(DeviceLocator().locate(10_000))

    assert result == DeviceAddress(host="192.168.1.50", port=16021)
    assert network.instances[0].closed == 1
    assert network.browsers[0].cancelled == 1


def test_locate_prefers_ipv4_and_falls_back_to_default_port(monkeypatch):
    network = FakeNetwork(
        {
            f"Empty.{SERVICE_TYPE}": FakeServiceInfo([], 16021),
            f"Canvas.{SERVICE_TYPE}": FakeServiceInfo(
                ["fe80::1", "192.168.1.51"], None
            ),
        }
    )
    network.install(monkeypatch)

    result = asyncio.run(DeviceLocator().locate(10_000))

    assert result == DeviceAddress(host="192.168.1.51", port=16021)


def test_locate_times_out_and_releases_browser(monkeypatch):
    network = FakeNetwork()
    network.install(monkeypatch)

    result = asyncio.run(DeviceLocator().locate(50))

    assert result == DiscoveryTimeout(50)
    assert network.instances[0].closed == 1


def test_locate_uses_configured_timeout(monkeypatch):
    network = FakeNetwork()
    network.install(monkeypatch)
    locator = DeviceLocator(DiscoveryConfig(timeout_ms=20))

    assert asyncio.run(locator.locate()) == DiscoveryTimeout(20)


def test_concurrent_locates_share_one_browse(monkeypatch):
    network = FakeNetwork(
        {f"Shapes.{SERVICE_TYPE}": FakeServiceInfo(["192.168.1.50"], 16021)}
    )
    network.install(monkeypatch)
    locator = DeviceLocator()

    async def _both():
        return await asyncio.gather(locator.locate(), locator.locate())

    first, second = asyncio.run(_both())

    assert first == second == DeviceAddress(host="192.168.1.50", port=16021)
    assert len(network.instances) == 1


def test_locate_reports_socket_errors(monkeypatch):
    def _broken():
        raise OSError("no multicast route")

    monkeypatch.setattr(locator_module, "Zeroconf", _broken)

    result = asyncio.run(DeviceLocator().locate(100))

    assert isinstance(result, DeviceUnreachable)
    assert "no multicast route" in result.reason


def test_browser_stop_is_idempotent(monkeypatch):
    network = FakeNetwork()
    network.install(monkeypatch)
    browser = DiscoveryBrowser(SERVICE_TYPE, 16021, 1000)

    async def _run():
        browser.start()
        await browser.stop()
        await browser.stop()

    asyncio.run(_run())

    assert browser.stopped
    assert network.instances[0].closed == 1
    assert network.browsers[0].cancelled == 1


def test_stop_before_start_does_nothing():
    browser = DiscoveryBrowser(SERVICE_TYPE, 16021, 1000)
    asyncio.run(browser.stop())
    assert browser.stopped


def test_set_address():
    locator = DeviceLocator()
    assert locator.set_address("10.0.0.7:16021") == DeviceAddress(
        host="10.0.0.7", port=16021
    )
    assert isinstance(locator.set_address("10.0.0.7"), ValidationError)
    assert isinstance(locator.set_address(16021), ValidationError)


@pytest.mark.parametrize("timeout_ms", [0, -1, True])
def test_locate_rejects_non_positive_timeout(monkeypatch, timeout_ms):
    network = FakeNetwork()
    network.install(monkeypatch)

    result = asyncio.run(DeviceLocator().locate(timeout_ms))

    assert isinstance(result, ValidationError)
    assert network.instances == []
