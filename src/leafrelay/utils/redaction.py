from __future__ import annotations

import re
from dataclasses import dataclass, field

_TOKEN_IN_PATH = re.compile(r"(/api/v1/)(?!new\b)([^/?#]+)")


def mask_token(token: str | None) -> str:
    if not token:
        return ""
    if len(token) <= 4:
        return "****"
    return f"****{token[-4:]}"


def redact_url(url: str) -> str:
    """Mask the auth token segment of a device API URL."""
    return _TOKEN_IN_PATH.sub(
        lambda match: match.group(1) + mask_token(match.group(2)), url
    )


@dataclass
class Redactor:
    enabled: bool = True
    _host_map: dict[str, int] = field(default_factory=dict)
    _host_counter: int = 0

    def redact_ip(self, ip: str) -> str:
        if not self.enabled:
            return ip
        parts = ip.split(".")
        if len(parts) == 4 and all(part.isdigit() for part in parts):
            return f"x.x.x.{parts[3]}"
        return ip

    def redact_host(self, host: str) -> str:
        if not self.enabled:
            return host
        redacted = self.redact_ip(host)
        if redacted != host:
            return redacted
        counter = self._host_map.get(host)
        if counter is None:
            self._host_counter += 1
            counter = self._host_counter
            self._host_map[host] = counter
        return f"host-{counter:02d}"

    def redact_token(self, token: str | None) -> str:
        if token is None:
            return ""
        if not self.enabled:
            return token
        return mask_token(token)
