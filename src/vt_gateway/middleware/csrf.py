"""Origin check for state-changing requests.

Requests without an Origin header (same-origin form posts, server-to-server
calls) pass. Otherwise the Origin host must equal the Host header; outside
production, any localhost/127.0.0.1 pairing is accepted as well.
"""

from urllib.parse import urlsplit

_UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_LOCALHOST_MARKERS = ("localhost", "127.0.0.1")


def _is_localhost(host: str) -> bool:
    return any(marker in host for marker in _LOCALHOST_MARKERS)


def is_csrf_safe(
    method: str,
    origin: str | None,
    host: str | None,
    allow_localhost: bool = False,
) -> bool:
    if method.upper() not in _UNSAFE_METHODS:
        return True
    if not origin:
        return True

    try:
        origin_host = urlsplit(origin).netloc
    except ValueError:
        return False
    if not origin_host:
        return False

    if origin_host == host:
        return True

    if allow_localhost and host and _is_localhost(origin_host) and _is_localhost(host):
        return True

    return False
