"""URL canonicalization and target naming helpers used by the crawler."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, quote, unquote, unquote_to_bytes, urlsplit, urlunsplit

HOMEPAGE_NAME = "homepage"
DEFAULT_PORTS = {"http": 80, "https": 443}

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")
# Characters a browser leaves unescaped inside a path segment, besides unreserved ones.
PATH_SEGMENT_SAFE = "!$&'()*+,;=:@"


class InvalidUrlError(ValueError):
    """Raised when a value cannot be parsed as an absolute URL."""


def _build_netloc(scheme: str, parts: SplitResult) -> str:
    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid port in URL: {parts.geturl()!r}") from exc

    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"

    userinfo, separator, _ = parts.netloc.rpartition("@")
    return f"{userinfo}@{host}" if separator else host


def _remove_dot_segments(path: str) -> str:
    output: list[str] = []
    segments = path.split("/")[1:]
    for index, segment in enumerate(segments):
        decoded = unquote(segment)
        if decoded in (".", ".."):
            if decoded == ".." and output:
                output.pop()
            if index == len(segments) - 1:
                output.append("")
            continue
        output.append(segment)
    return "/" + "/".join(output)


def _canonical_path(path: str) -> str:
    segments = _remove_dot_segments(path).split("/")
    return "/".join(quote(unquote_to_bytes(segment), safe=PATH_SEGMENT_SAFE) for segment in segments)


def normalize_url(raw_url: str) -> str:
    """Returns the canonical dedup key for ``raw_url``.

    The fragment is dropped and a single trailing slash is removed from any
    path other than ``/``. Dot segments are resolved and each path segment is
    percent-encoded the way a browser serializes it, so ``/a b``, ``/a%20b``
    and ``/x/../a%20b`` share one key. Query strings are kept as-is.

    Exactly one trailing slash is removed per call, so a path ending in
    repeated slashes (``/a//``) only reaches its fixed point (``/a``) after
    one normalization per extra slash. Every other input is idempotent.
    """

    if not isinstance(raw_url, str) or not raw_url.strip():
        raise InvalidUrlError(f"Not a URL: {raw_url!r}")

    try:
        parts = urlsplit(raw_url.strip())
    except ValueError as exc:
        raise InvalidUrlError(f"Unparseable URL: {raw_url!r}") from exc

    scheme = parts.scheme.lower()
    if not scheme or not parts.netloc or not parts.hostname:
        raise InvalidUrlError(f"URL is not absolute: {raw_url!r}")

    path = _canonical_path(parts.path or "/")
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return urlunsplit((scheme, _build_netloc(scheme, parts), path, parts.query, ""))


def relative_target_url(url: str) -> str:
    """Path plus query of ``url``, as stored on a :class:`Target`."""

    parts = urlsplit(url)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def name_for_path(path: str) -> str:
    """Derives a filesystem-safe target name from a relative URL."""

    if path in ("", "/"):
        return HOMEPAGE_NAME

    slug = path[1:] if path.startswith("/") else path
    slug = slug.replace("/", "-")
    return _UNSAFE_NAME_CHARS.sub("-", slug) or HOMEPAGE_NAME
