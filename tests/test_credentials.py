from __future__ import annotations

import asyncio

from conftest import DEVICE

from leafrelay.api import DeviceConnectionError, DeviceResponse
from leafrelay.core import CredentialManager, DeviceSession
from leafrelay.models import (
    DeviceUnreachable,
    PairingWindowClosed,
    Success,
    ValidationError,
)

PAIR_URL = "http://192.168.1.50:16021/api/v1/new"


def test_pair_stores_issued_token(make_client):
    session = DeviceSession(address=DEVICE)
    client = make_client(DeviceResponse(status=200, payload={"auth_token": "abc123"}))
    manager = CredentialManager(session, client)

    outcome = asyncio.run(manager.pair(DEVICE))

    assert outcome == Success("abc123", 200)
    assert manager.current() == "abc123"
    assert client.calls == [("POST", PAIR_URL, None)]


def test_pair_outside_window(make_client):
    session = DeviceSession(address=DEVICE)
    manager = CredentialManager(session, make_client(DeviceResponse(status=403)))

    outcome = asyncio.run(manager.pair(DEVICE))

    assert isinstance(outcome, PairingWindowClosed)
    assert manager.current() is None


def test_pair_keeps_old_token_when_window_closed(make_client):
    session = DeviceSession(address=DEVICE, credential="old")
    manager = CredentialManager(session, make_client(DeviceResponse(status=401)))

    outcome = asyncio.run(manager.pair(DEVICE))

    assert isinstance(outcome, PairingWindowClosed)
    assert manager.current() == "old"


def test_pair_without_token_in_reply(make_client):
    session = DeviceSession(address=DEVICE)
    client = make_client(DeviceResponse(status=200, payload={"unexpected": True}))
    manager = CredentialManager(session, client)

    outcome = asyncio.run(manager.pair(DEVICE))

    assert isinstance(outcome, DeviceUnreachable)
    assert manager.current() is None


def test_pair_unreachable(make_client):
    session = DeviceSession(address=DEVICE)
    client = make_client(error=DeviceConnectionError("timed out after 5s"))
    manager = CredentialManager(session, client)

    outcome = asyncio.run(manager.pair(DEVICE))

    assert outcome == DeviceUnreachable("timed out after 5s")


def test_invalidate_twice_is_harmless(make_client):
    session = DeviceSession(address=DEVICE, credential="tok")
    manager = CredentialManager(session, make_client())

    manager.invalidate()
    manager.invalidate()

    assert manager.current() is None


def test_invalidate_only_clears_rejected_token(make_client):
    session = DeviceSession(address=DEVICE, credential="new")
    manager = CredentialManager(session, make_client())

    manager.invalidate(rejected="old")
    assert manager.current() == "new"

    manager.invalidate(rejected="new")
    assert manager.current() is None


def test_restore_strips_and_rejects_blank(make_client):
    manager = CredentialManager(DeviceSession(), make_client())

    assert isinstance(manager.restore("   "), ValidationError)
    assert manager.current() is None

    assert manager.restore(" tok ") == Success("tok")
    assert manager.current() == "tok"
