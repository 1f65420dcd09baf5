"""
Authentication routes: login, registration and logout pages.

Why:
    Keep the session transitions (Anonymous <-> Authenticated) in one router.
    Handlers only translate form posts into `Session` actions and the
    resulting `AuthOutcome` into redirects; the token cookie is written by the
    session middleware once the response exists.

Security:
    Never log passwords or tokens. Return destinations must be in-app paths
    (validated by `safe_redirect`), otherwise the default landing page is used.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from backend.identity_access.session import safe_redirect

from ..components import LoginForm, RegisterForm
from ..pages import PRIVATE_NO_STORE, form_str, render_page
from ..session_wiring import current_session

auth_router = APIRouter(tags=["Auth"])
logger = logging.getLogger("lms.web.auth")

MIN_PASSWORD_LENGTH = 6


def _validate_registration(name: str, email: str, password: str) -> str | None:
    if not name:
        return "Name is required"
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        return "A valid email address is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def _already_signed_in(request: Request) -> RedirectResponse | None:
    session = current_session(request)
    if session.identity is not None:
        return RedirectResponse(url=session.default_landing, status_code=302, headers=PRIVATE_NO_STORE)
    return None


@auth_router.get("/")
async def home(request: Request):
    """Send visitors to the dashboard when signed in, else to the login page."""
    session = current_session(request)
    target = session.default_landing if session.identity else session.login_path
    return RedirectResponse(url=target, status_code=302, headers=PRIVATE_NO_STORE)


@auth_router.get("/login")
async def login_page(request: Request, redirect: str | None = None):
    """Render the login form; `redirect` is kept only if it is an in-app path."""
    signed_in = _already_signed_in(request)
    if signed_in:
        return signed_in
    form = LoginForm(redirect=safe_redirect(redirect))
    return render_page(request, "Log in", form.render(), show_nav=False)


@auth_router.post("/login")
async def login_submit(request: Request):
    """Authenticate against the backend and continue to the return destination.

    Behavior:
        - Success: 303 to the validated `redirect` field or `/dashboard`.
        - Failure: re-render the form with the backend's message (400).
    """
    form = await request.form()
    email = form_str(form, "email")
    password = form.get("password") if isinstance(form.get("password"), str) else ""
    redirect = safe_redirect(form_str(form, "redirect") or request.query_params.get("redirect"))

    if not email or not password:
        page = LoginForm(email=email, redirect=redirect, error="Email and password are required")
        return render_page(request, "Log in", page.render(), status_code=400, show_nav=False)

    outcome = await current_session(request).login(email, password, redirect=redirect)
    if not outcome.success:
        page = LoginForm(email=email, redirect=redirect, error=outcome.error)
        return render_page(request, "Log in", page.render(), status_code=400, show_nav=False)
    return RedirectResponse(url=outcome.redirect, status_code=303, headers=PRIVATE_NO_STORE)


@auth_router.get("/register")
async def register_page(request: Request):
    signed_in = _already_signed_in(request)
    if signed_in:
        return signed_in
    return render_page(request, "Register", RegisterForm().render(), show_nav=False)


@auth_router.post("/register")
async def register_submit(request: Request):
    """Create a student account and sign in with the returned token."""
    form = await request.form()
    name = form_str(form, "name")
    email = form_str(form, "email")
    password = form.get("password") if isinstance(form.get("password"), str) else ""

    error = _validate_registration(name, email, password)
    if error is None:
        outcome = await current_session(request).register(name, email, password)
        if outcome.success:
            return RedirectResponse(url=outcome.redirect, status_code=303, headers=PRIVATE_NO_STORE)
        error = outcome.error
    page = RegisterForm(name=name, email=email, error=error)
    return render_page(request, "Register", page.render(), status_code=400, show_nav=False)


@auth_router.post("/logout")
@auth_router.get("/logout")
async def logout(request: Request):
    """Discard token and identity, then return to the login page."""
    outcome = current_session(request).logout()
    return RedirectResponse(url=outcome.redirect, status_code=303, headers=PRIVATE_NO_STORE)
