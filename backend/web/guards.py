"""
Access guards for page handlers.

Why:
    Protected pages share one decision sequence: wait while the session is
    restoring, send anonymous visitors to the login page (remembering where
    they wanted to go), and send authenticated users without the required role
    to the default landing page. Guards compose around a page handler and
    return a handler with the same signature, so FastAPI keeps resolving the
    page's own parameters.

Permissions:
    Guards read only the public session interface: `is_restoring`,
    `identity` and the configured `login_path` / `default_landing`.
"""

from __future__ import annotations

import functools
from typing import Awaitable, Callable, Iterable

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from backend.identity_access.domain import Role

from .auth_utils import login_redirect_url
from .components import Layout, LoadingIndicator
from .session_wiring import current_session

Page = Callable[..., Awaitable[Response]]


def _request_from(args: tuple, kwargs: dict) -> Request:
    request = kwargs.get("request")
    if request is None:
        request = next((a for a in args if isinstance(a, Request)), None)
    if request is None:
        raise TypeError("Guarded pages must accept a `request: Request` parameter")
    return request


def _requested_target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _loading_response() -> HTMLResponse:
    page = Layout(title="Loading", content=LoadingIndicator().render(), show_nav=False)
    return HTMLResponse(page.render(), headers={"Cache-Control": "no-store", "Refresh": "1"})


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302, headers={"Cache-Control": "private, no-store"})


def _check(request: Request, allowed: frozenset | None) -> Response | None:
    """Return the response that replaces the page, or None to render it."""
    session = current_session(request)
    if session.is_restoring:
        return _loading_response()
    identity = session.identity
    if identity is None:
        return _redirect(login_redirect_url(session.login_path, _requested_target(request)))
    if allowed is not None and identity.role not in allowed:
        return _redirect(session.default_landing)
    return None


def require_auth(page: Page) -> Page:
    """Render `page` only for an authenticated session."""

    @functools.wraps(page)
    async def guarded(*args, **kwargs):
        blocked = _check(_request_from(args, kwargs), None)
        if blocked is not None:
            return blocked
        return await page(*args, **kwargs)

    return guarded


def require_role(page: Page, allowed_roles: Iterable[Role | str]) -> Page:
    """Render `page` only when the session's role is in `allowed_roles`."""
    allowed = frozenset(Role(r) for r in allowed_roles)

    @functools.wraps(page)
    async def guarded(*args, **kwargs):
        blocked = _check(_request_from(args, kwargs), allowed)
        if blocked is not None:
            return blocked
        return await page(*args, **kwargs)

    return guarded


def roles_allowed(*roles: Role | str) -> Callable[[Page], Page]:
    """Decorator form: `@roles_allowed(Role.ADMIN)`."""

    def decorate(page: Page) -> Page:
        return require_role(page, roles)

    return decorate
