from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from leafrelay.utils.redaction import redact_url

logger = logging.getLogger(__name__)


class DeviceConnectionError(Exception):
    """The device could not be reached: refused, reset or timed out."""


@dataclass(frozen=True)
class DeviceResponse:
    status: int
    text: str = ""
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _decode_body(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


class DeviceClient:
    """Issues single HTTP requests against the device's local API."""

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    async def request(
        self, method: str, url: str, payload: dict[str, Any] | None = None
    ) -> DeviceResponse:
        logger.debug("%s %s", method, redact_url(url))
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, json=payload) as resp:
                    text = (await resp.read()).decode("utf-8", errors="replace")
                    response = DeviceResponse(
                        status=resp.status, text=text, payload=_decode_body(text)
                    )
        except (asyncio.TimeoutError, TimeoutError) as exc:
            raise DeviceConnectionError(
                f"timed out after {self._timeout:g}s"
            ) from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise DeviceConnectionError(str(exc) or type(exc).__name__) from exc

        logger.debug("%s %s -> %d", method, redact_url(url), response.status)
        return response

    async def get(self, url: str) -> DeviceResponse:
        return await self.request("GET", url)

    async def put(self, url: str, payload: dict[str, Any]) -> DeviceResponse:
        return await self.request("PUT", url, payload)

    async def post(
        self, url: str, payload: dict[str, Any] | None = None
    ) -> DeviceResponse:
        return await self.request("POST", url, payload)
