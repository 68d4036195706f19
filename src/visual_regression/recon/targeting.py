from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .urls import DEFAULT_PORTS, InvalidUrlError

ALLOWED_SCHEMES = frozenset({"http", "https"})


def _origin_of(url: str) -> Optional[tuple[str, str, Optional[int]]]:
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    hostname = (parsed.hostname or "").lower()
    if scheme not in ALLOWED_SCHEMES or not hostname:
        return None

    return scheme, hostname, port if port is not None else DEFAULT_PORTS.get(scheme)


@dataclass(frozen=True, slots=True)
class OriginFilter:
    """Same-origin rule: scheme, host and port must match the seed URL."""

    scheme: str
    hostname: str
    port: Optional[int]

    @classmethod
    def from_url(cls, url: str) -> "OriginFilter":
        origin = _origin_of(url)
        if origin is None:
            raise InvalidUrlError(f"Cannot derive an http(s) origin from {url!r}")
        return cls(*origin)

    def is_allowed(self, url: str) -> bool:
        return _origin_of(url) == (self.scheme, self.hostname, self.port)
