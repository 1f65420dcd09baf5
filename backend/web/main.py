"LMS web front end"
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, ensure_secure_config_on_startup, load_env_file
from .routes.admin import admin_router
from .routes.auth import auth_router
from .routes.learning import learning_router
from .routes.operations import operations_router
from .routes.security import MUTATING_METHODS, is_same_origin
from .routes.users import users_router
from .session_wiring import SessionProvider, apply_token_changes

logger = logging.getLogger("lms.web")

static_dir = Path(__file__).parent / "static"


def _configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO")
    normalized_level = level_name.strip().upper() or "INFO"
    logging.basicConfig(level=normalized_level)


def _is_public_path(path: str) -> bool:
    return path.startswith("/static/") or path in ("/health", "/favicon.ico")


def create_app(settings: Optional[Settings] = None, *, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """Build the application with one `SessionProvider` at its root.

    Tests pass `settings` and an `httpx.AsyncClient` on a `MockTransport` so no
    real LMS backend is contacted.
    """
    if settings is None:
        load_env_file()
        settings = Settings.from_env()
    ensure_secure_config_on_startup(settings)
    provider = SessionProvider(settings, http_client=http_client)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await provider.aclose()

    app = FastAPI(title="LMS", description="Learning management web front end", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.sessions = provider

    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    # --- Session Middleware ------------------------------------------------------

    @app.middleware("http")
    async def session_context(request: Request, call_next):
        if request.method in MUTATING_METHODS and not is_same_origin(request):
            logger.warning("Rejected cross-origin %s %s", request.method, request.url.path)
            return HTMLResponse("", status_code=403, headers={"Cache-Control": "private, no-store", "Vary": "Origin"})

        ctx = provider.build(request)
        request.state.ctx = ctx
        request.state.session = ctx.session
        request.state.api = ctx.api
        if not _is_public_path(request.url.path):
            await ctx.session.restore()

        response = await call_next(request)
        apply_token_changes(request, response)
        return response

    # --- Security Headers Middleware -------------------------------------------

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        if settings.is_prod_like:
            # Harden CSP in production: avoid 'unsafe-inline' to reduce XSS surface.
            csp = (
                "default-src 'self'; script-src 'self'; style-src 'self'; "
                "img-src 'self' https: data:; media-src 'self' https:; font-src 'self' data:; connect-src 'self';"
            )
        else:
            csp = (
                "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
                "img-src 'self' http: https: data:; media-src 'self' http: https:; font-src 'self' data:; connect-src 'self';"
            )
        response.headers.setdefault("Content-Security-Policy", csp)
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if settings.is_prod_like:
            response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        return response

    app.include_router(operations_router)
    app.include_router(auth_router)
    app.include_router(learning_router)
    app.include_router(admin_router)
    app.include_router(users_router)
    return app


_configure_logging()
app = create_app()
