"""
Credential token persistence for one client context.

Why:
    The Session Store must not care where the bearer token lives. In the web
    app it lives in a browser cookie; tests and scripts use process memory.

Security:
    The cookie is HttpOnly and SameSite-restricted; `Secure` follows the
    environment policy from `web.auth_utils.cookie_opts`. Clearing writes an
    immediately expired cookie.
"""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

from starlette.responses import Response

TOKEN_COOKIE_NAME = "token"
TOKEN_MAX_AGE_SECONDS = 30 * 24 * 60 * 60


class TokenStore(Protocol):
    def get(self) -> Optional[str]:
        ...

    def set(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryTokenStore:
    """Keep the token in memory (tests, scripts)."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


_UNCHANGED = object()


class CookieTokenStore:
    """Read the token from request cookies and stage changes for the response.

    Writes are last-write-wins within a request: `set` after `clear` (or vice
    versa) only emits the final state when `apply` runs.
    """

    def __init__(
        self,
        cookies: Mapping[str, str],
        *,
        name: str = TOKEN_COOKIE_NAME,
        max_age: int = TOKEN_MAX_AGE_SECONDS,
        secure: bool = True,
        samesite: str = "lax",
    ) -> None:
        self.name = name
        self.max_age = max_age
        self.secure = secure
        self.samesite = samesite
        self._incoming = cookies.get(name) or None
        self._pending: object = _UNCHANGED

    def get(self) -> Optional[str]:
        if self._pending is _UNCHANGED:
            return self._incoming
        return self._pending  # type: ignore[return-value]

    def set(self, token: str) -> None:
        self._pending = token or None

    def clear(self) -> None:
        self._pending = None

    @property
    def dirty(self) -> bool:
        return self._pending is not _UNCHANGED

    def apply(self, response: Response) -> None:
        """Write the staged cookie change (if any) onto `response`."""
        if self._pending is _UNCHANGED:
            return
        if self._pending:
            response.set_cookie(
                key=self.name,
                value=str(self._pending),
                max_age=self.max_age,
                path="/",
                httponly=True,
                secure=self.secure,
                samesite=self.samesite,
            )
        else:
            response.delete_cookie(
                key=self.name,
                path="/",
                httponly=True,
                secure=self.secure,
                samesite=self.samesite,
            )
