from __future__ import annotations

import pytest
from conftest import DEVICE

from leafrelay.core import DEFAULT_CONTEXT, DeviceSession, SessionReady, SessionRegistry
from leafrelay.core.session import MAX_REVOKED
from leafrelay.models import DeviceAddress, NotConfigured, parse_address


def test_empty_session_reports_everything_missing():
    assert DeviceSession().require() == NotConfigured(
        missing=("address", "credential")
    )


def test_ready_snapshot_builds_device_urls():
    ready = DeviceSession(address=DEVICE, credential="tok").require()

    assert isinstance(ready, SessionReady)
    assert ready.url("/state") == "http://192.168.1.50:16021/api/v1/tok/state"


def test_snapshot_is_unaffected_by_later_changes():
    session = DeviceSession(address=DEVICE, credential="tok")
    ready = session.require()

    session.clear_credential()

    assert ready.credential == "tok"
    assert session.require() == NotConfigured(missing=("credential",))


def test_address_change_keeps_credential():
    session = DeviceSession(address=DEVICE, credential="tok")
    session.set_address(DeviceAddress(host="10.0.0.7", port=16021))
    assert session.credential == "tok"


def test_listeners_only_see_real_changes():
    session = DeviceSession()
    seen = []
    session.subscribe(lambda s: seen.append((s.address, s.credential)))

    session.set_address(DEVICE)
    session.set_address(DEVICE)
    session.set_credential("tok")
    session.clear_credential(expected="other")
    session.clear_credential()
    session.clear_credential()

    assert seen == [(DEVICE, None), (DEVICE, "tok"), (DEVICE, None)]


def test_registry_keeps_contexts_apart():
    registry = SessionRegistry()

    office = registry.acquire("10.0.0.7:16021")
    office.set_credential("tok")

    assert registry.acquire() is registry.default
    assert registry.acquire("10.0.0.7:16021") is office
    assert registry.default.credential is None
    assert registry.contexts() == ["10.0.0.7:16021", DEFAULT_CONTEXT]


@pytest.mark.parametrize(
    ("text", "host", "port"),
    [
        ("192.168.1.50:16021", "192.168.1.50", 16021),
        (" nanoleaf.local:16021 ", "nanoleaf.local", 16021),
        ("[fe80::1]:16021", "fe80::1", 16021),
    ],
)
def test_parse_address(text, host, port):
    assert parse_address(text) == DeviceAddress(host=host, port=port)


@pytest.mark.parametrize(
    "text", ["192.168.1.50", ":16021", "host:", "host:abc", "host:0", "host:70000"]
)
def test_parse_address_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_address(text)


def test_ipv6_address_is_bracketed():
    address = DeviceAddress(host="fe80::1", port=16021)
    assert str(address) == "[fe80::1]:16021"
    assert address.base_url == "http://[fe80::1]:16021"


def test_registry_drops_unpaired_sessions_first():
    registry = SessionRegistry(max_contexts=2)
    paired = registry.acquire("10.0.0.7:16021")
    paired.set_credential("tok")
    registry.acquire("10.0.0.8:16021")

    registry.acquire("10.0.0.9:16021")

    assert registry.contexts() == ["10.0.0.7:16021", "10.0.0.9:16021", "default"]
    assert registry.acquire("10.0.0.7:16021") is paired


def test_registry_drops_least_recently_used_when_all_paired():
    registry = SessionRegistry(max_contexts=2)
    for context in ("a:1", "b:1"):
        registry.acquire(context).set_credential("tok")
    registry.acquire("a:1")

    registry.acquire("c:1")

    assert registry.contexts() == ["a:1", "c:1", "default"]


def test_registry_never_drops_default_session():
    registry = SessionRegistry(max_contexts=1)
    registry.default.set_credential("tok")

    for i in range(10):
        registry.acquire(f"h{i}:1")

    assert registry.acquire() is registry.default
    assert registry.acquire(DEFAULT_CONTEXT) is registry.default
    assert registry.contexts() == ["default", "h9:1"]


def test_cleared_credentials_are_remembered():
    session = DeviceSession(address=DEVICE, credential="old")

    session.clear_credential()
    session.set_credential("new")
    session.clear_credential()
    assert session.revoked_credentials == ("old", "new")

    session.set_credential("old")
    assert session.revoked_credentials == ("new",)


def test_revoked_credentials_are_bounded():
    session = DeviceSession()
    session.remember_revoked(f"tok{i}" for i in range(20))
    assert len(session.revoked_credentials) == MAX_REVOKED
    assert session.revoked_credentials[-1] == "tok19"
