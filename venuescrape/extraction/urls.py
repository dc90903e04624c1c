"""
venuescrape.extraction.urls

Ticket-link canonicalization: drop the query string so links are stable
across tracking/session parameters.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from venuescrape.runtime.results import ErrorKind, Result

# scheme -> default port; these schemes always carry a host and a path
_SPECIAL_SCHEMES = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


def canonicalize(url: str) -> Result[str]:
    raw = (url or "").strip()
    if not raw:
        return Result.fail(ErrorKind.INVALID_URL, "empty url")

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        return Result.fail(ErrorKind.INVALID_URL, str(e))

    scheme = parts.scheme.lower()
    if not scheme:
        return Result.fail(ErrorKind.INVALID_URL, f"not an absolute url: {raw}")
    if scheme in _SPECIAL_SCHEMES and not parts.hostname:
        return Result.fail(ErrorKind.INVALID_URL, f"missing host: {raw}")
    if any(c.isspace() for c in parts.netloc):
        return Result.fail(ErrorKind.INVALID_URL, f"invalid host: {raw}")

    userinfo, at, hostport = parts.netloc.rpartition("@")
    hostport = hostport.lower()
    if port is not None and port == _SPECIAL_SCHEMES.get(scheme):
        hostport = hostport[: -len(f":{port}")]
    netloc = f"{userinfo}{at}{hostport}"

    path = parts.path
    if not path and scheme in _SPECIAL_SCHEMES:
        path = "/"

    return Result.success(urlunsplit((scheme, netloc, path, "", parts.fragment)))


def strip_query(url: str) -> str:
    """Absolute URL without its query; anything unparseable is returned as-is."""
    return canonicalize(url).unwrap_or(url)
