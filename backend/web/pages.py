"""
Helpers shared by page routes: full-page rendering and notice redirects.

Why:
    Every page renders through the same Layout with the current identity and
    the notifications carried by `?notice=` / `?error=` after a mutation.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .components import Layout, Notification
from .session_wiring import current_session

PRIVATE_NO_STORE = {"Cache-Control": "private, no-store"}


def render_page(request: Request, title: str, content: str, *, status_code: int = 200, show_nav: bool = True) -> HTMLResponse:
    identity = current_session(request).identity
    notifications = Notification.from_query(
        request.query_params.get("notice"),
        request.query_params.get("error"),
    )
    page = Layout(
        title=title,
        content=content,
        user=identity.to_view() if identity else None,
        show_nav=show_nav,
        current_path=request.url.path,
        notifications=notifications,
    )
    return HTMLResponse(page.render(), status_code=status_code, headers=PRIVATE_NO_STORE)


def redirect_with(url: str, *, notice: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    """303 redirect (POST -> GET) carrying a notification for the next page."""
    params = {k: v for k, v in (("notice", notice), ("error", error)) if v}
    sep = "&" if "?" in url else "?"
    target = f"{url}{sep}{urlencode(params)}" if params else url
    return RedirectResponse(url=target, status_code=303, headers=PRIVATE_NO_STORE)


def form_str(form: Any, key: str) -> str:
    value = form.get(key)
    return value.strip() if isinstance(value, str) else ""


def form_int(form: Any, key: str) -> Optional[int]:
    raw = form_str(form, key)
    try:
        return int(raw) if raw else None
    except ValueError:
        return None
