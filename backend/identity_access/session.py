"""
Session store: who is logged in for one client context.

Why:
    A single authority over identity, credential token and the "restoring"
    read-state. Pages and guards only read `identity` / `is_restoring`; the
    only writers are `restore`, `login`, `register` and `logout`.

State machine:
    UNINITIALIZED -> RESTORING -> AUTHENTICATED | ANONYMOUS
    ANONYMOUS <-> AUTHENTICATED (login/register, logout)

Failure policy:
    Expected failures (bad credentials, rejected token, network errors) are
    returned as `AuthOutcome(success=False, error=...)`; nothing is raised.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from backend.lms_api.auth import AuthApi

from .domain import Role
from .models import Identity
from .tokens import TokenStore

logger = logging.getLogger("lms.identity_access")

UNKNOWN_ERROR = "Unknown error occurred"

# Absolute in-app paths only: no scheme, no "//", no "..".
INAPP_PATH_PATTERN = re.compile(r"^(?!.*//)(?!.*\.\.)/[A-Za-z0-9._\-/]*$")
MAX_INAPP_REDIRECT_LEN = 256


def safe_redirect(value: Optional[str]) -> Optional[str]:
    """Return `value` if it is an in-app path (optionally with query), else None."""
    if not isinstance(value, str) or not value or len(value) > MAX_INAPP_REDIRECT_LEN:
        return None
    path, _, query = value.partition("?")
    if not INAPP_PATH_PATTERN.match(path):
        return None
    if any(ch in query for ch in ("\\", "\r", "\n", " ")):
        return None
    return value


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class AuthOutcome:
    success: bool
    error: Optional[str] = None
    redirect: Optional[str] = None


def _parse_identity(payload: Any) -> Optional[Identity]:
    if not isinstance(payload, Mapping):
        return None
    try:
        return Identity.model_validate(payload)
    except ValidationError:
        return None


class Session:
    """Session of one client context.

    Construct one per client context (the web app builds one per request from
    the browser cookie) and call `restore()` before reading `identity`.
    """

    def __init__(
        self,
        auth_api: AuthApi,
        token_store: TokenStore,
        *,
        default_landing: str = "/dashboard",
        login_path: str = "/login",
    ) -> None:
        self._auth = auth_api
        self._tokens = token_store
        self.default_landing = default_landing
        self.login_path = login_path
        self._identity: Optional[Identity] = None
        self._state = SessionState.UNINITIALIZED
        self._restore_task: Optional[asyncio.Task] = None

    # --- reads -----------------------------------------------------------------

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_restoring(self) -> bool:
        return self._state in (SessionState.UNINITIALIZED, SessionState.RESTORING)

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def token(self) -> Optional[str]:
        return self._tokens.get()

    # --- restoration -----------------------------------------------------------

    async def restore(self) -> None:
        """Resolve the initial identity once; concurrent callers share the work."""
        if self._restore_task is None:
            self._state = SessionState.RESTORING
            self._restore_task = asyncio.ensure_future(self._restore())
        await asyncio.shield(self._restore_task)

    async def _restore(self) -> None:
        token = self._tokens.get()
        if not token:
            self._become_anonymous(clear_token=False)
            return
        result = await self._auth.me()
        if self._state is not SessionState.RESTORING:
            # A login/logout completed while restoring; it takes precedence.
            return
        identity = _parse_identity(result.data) if result.is_ok else None
        if identity is None:
            logger.info("Stored token rejected during restore; continuing anonymously")
            self._become_anonymous(clear_token=True)
            return
        self._identity = identity
        self._state = SessionState.AUTHENTICATED

    # --- actions ---------------------------------------------------------------

    async def login(self, email: str, password: str, redirect: Optional[str] = None) -> AuthOutcome:
        result = await self._auth.login(email, password)
        return self._accept_auth_response(result, redirect=redirect, action="login")

    async def register(self, name: str, email: str, password: str, redirect: Optional[str] = None) -> AuthOutcome:
        result = await self._auth.register(name, email, password, role=Role.STUDENT.value)
        return self._accept_auth_response(result, redirect=redirect, action="register")

    def logout(self) -> AuthOutcome:
        self._become_anonymous(clear_token=True)
        return AuthOutcome(success=True, redirect=self.login_path)

    # --- internals -------------------------------------------------------------

    def _accept_auth_response(self, result, *, redirect: Optional[str], action: str) -> AuthOutcome:
        if not result.is_ok:
            logger.info("%s rejected by backend", action.capitalize())
            return AuthOutcome(success=False, error=result.error)
        payload = result.data if isinstance(result.data, Mapping) else {}
        token = payload.get("token")
        identity = _parse_identity(payload.get("user"))
        if not isinstance(token, str) or not token or identity is None:
            logger.warning("%s response missing token or user", action.capitalize())
            return AuthOutcome(success=False, error=UNKNOWN_ERROR)
        self._tokens.set(token)
        self._identity = identity
        self._state = SessionState.AUTHENTICATED
        return AuthOutcome(success=True, redirect=safe_redirect(redirect) or self.default_landing)

    def _become_anonymous(self, *, clear_token: bool) -> None:
        if clear_token:
            self._tokens.clear()
        self._identity = None
        self._state = SessionState.ANONYMOUS
