"""
Per-request wiring of the LMS client and the session store.

Why:
    The app root owns exactly one `SessionProvider` (and with it one shared
    `httpx.AsyncClient`). Every request gets its own `Session`, bound to a
    `CookieTokenStore` for that browser, so identity never leaks between
    client contexts and no module-level session singleton exists.

Security:
    The token is read from and written to an HttpOnly cookie only. Nothing in
    this module logs tokens.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from starlette.requests import Request
from starlette.responses import Response

from backend.identity_access.session import Session
from backend.identity_access.tokens import CookieTokenStore
from backend.lms_api import ApiTransport, LmsApi

from .auth_utils import cookie_opts
from .config import Settings

logger = logging.getLogger("lms.web.session")


@dataclass
class RequestContext:
    """Everything a page needs from the data-access layer for one request."""

    session: Session
    api: LmsApi
    tokens: CookieTokenStore


class SessionProvider:
    """Build one `RequestContext` per request from shared app-root resources."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        # Created lazily: ASGI test transports do not run lifespan events.
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def build(self, request: Request) -> RequestContext:
        opts = cookie_opts(self.settings.environment)
        tokens = CookieTokenStore(
            request.cookies,
            name=self.settings.token_cookie_name,
            max_age=self.settings.token_max_age_seconds,
            secure=opts["secure"],
            samesite=opts["samesite"],
        )
        transport = ApiTransport(self.settings.api_url, self.http_client, tokens.get)
        api = LmsApi(transport)
        session = Session(
            api.auth,
            tokens,
            default_landing=self.settings.default_landing,
            login_path=self.settings.login_path,
        )
        return RequestContext(session=session, api=api, tokens=tokens)


def current_session(request: Request) -> Session:
    return request.state.ctx.session


def current_api(request: Request) -> LmsApi:
    return request.state.ctx.api


def apply_token_changes(request: Request, response: Response) -> None:
    """Flush staged cookie writes of this request's token store onto `response`."""
    ctx = getattr(request.state, "ctx", None)
    if ctx is not None:
        ctx.tokens.apply(response)
