"""
Shared web security helpers.

Contains the same-origin check applied to every state-changing form post.
The credential cookie is SameSite=Lax already; this check additionally
rejects cross-site posts that carry an Origin/Referer from elsewhere.
"""
from __future__ import annotations

import os
from urllib.parse import urlparse

from fastapi import Request

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _default_port(scheme: str) -> int:
    return 443 if scheme == "https" else 80


def _parse_origin(url: str) -> tuple[str, str, int]:
    p = urlparse(url)
    if not p.scheme or not p.hostname:
        raise ValueError("invalid_origin")
    scheme = p.scheme.lower()
    return scheme, p.hostname.lower(), int(p.port or _default_port(scheme))


def _server_origin(request: Request) -> tuple[str, str, int]:
    """Origin of this server; X-Forwarded-* only when LMS_TRUST_PROXY=true."""
    scheme = (request.url.scheme or "http").lower()
    host = (request.url.hostname or "").lower()
    port = int(request.url.port or _default_port(scheme))
    if (os.getenv("LMS_TRUST_PROXY", "false") or "").lower() != "true":
        return scheme, host, port
    xf_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip().lower()
    xf_host = (request.headers.get("x-forwarded-host") or "").split(",")[0].strip().lower()
    scheme = xf_proto or scheme
    if xf_host:
        host_only, _, port_str = xf_host.partition(":")
        host = host_only
        port = int(port_str) if port_str.isdigit() else _default_port(scheme)
    return scheme, host, port


def is_same_origin(request: Request) -> bool:
    """Verify same-origin using Origin or Referer headers.

    Behavior:
    - If Origin is present, require exact scheme/host/port match with server.
    - Else if Referer is present, validate its origin similarly.
    - Else (no headers): allow to not break non-browser clients.
    """
    candidate = request.headers.get("origin") or request.headers.get("referer")
    if not candidate:
        return True
    try:
        return _parse_origin(candidate) == _server_origin(request)
    except ValueError:
        return False
