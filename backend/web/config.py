"""
Configuration and startup security checks for the LMS web front end.

Why: The front end only needs to know where the LMS backend lives and how to
persist the credential token. This module reads those settings from the
environment and refuses obviously insecure production deployments.

Permissions: The caller needs no special privileges. Functions read
environment variables and raise `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:3000/api"


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via LMS_ENABLE_DOTENV (default true outside pytest).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("LMS_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


def load_env_file() -> None:
    if _should_load_dotenv():
        load_dotenv()


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    environment: str = "dev"
    token_cookie_name: str = "token"
    token_max_age_days: int = 30
    http_timeout: float = 10.0
    default_landing: str = "/dashboard"
    login_path: str = "/login"

    @property
    def token_max_age_seconds(self) -> int:
        return self.token_max_age_days * 24 * 60 * 60

    @property
    def is_prod_like(self) -> bool:
        return _is_prod_like(self.environment)

    @classmethod
    def from_env(cls) -> "Settings":
        def _int(name: str, default: int) -> int:
            raw = (os.getenv(name) or "").strip()
            try:
                return int(raw) if raw else default
            except ValueError:
                raise SystemExit(f"Refusing to start: {name} must be an integer (got {raw!r}).")

        def _float(name: str, default: float) -> float:
            raw = (os.getenv(name) or "").strip()
            try:
                return float(raw) if raw else default
            except ValueError:
                raise SystemExit(f"Refusing to start: {name} must be a number (got {raw!r}).")

        return cls(
            api_url=(os.getenv("LMS_API_URL") or DEFAULT_API_URL).strip().rstrip("/"),
            environment=(os.getenv("LMS_ENV") or "dev").strip().lower(),
            token_cookie_name=(os.getenv("LMS_TOKEN_COOKIE") or "token").strip(),
            token_max_age_days=_int("LMS_TOKEN_MAX_AGE_DAYS", 30),
            http_timeout=_float("LMS_HTTP_TIMEOUT", 10.0),
        )


def ensure_secure_config_on_startup(settings: Settings | None = None) -> None:
    """Fail fast on insecure production configuration.

    Intent: Abort process startup when obviously insecure settings are detected
    in production/staging. Development remains permissive for convenience.

    Checks:
    - LMS_API_URL must use https (bearer tokens travel with every request).
    - The token cookie must keep a positive lifetime.
    """
    settings = settings or Settings.from_env()
    if not settings.is_prod_like:
        return  # dev/test remain permissive

    if not settings.api_url.lower().startswith("https://"):
        raise SystemExit(
            "Refusing to start: LMS_API_URL must use https in production (bearer tokens would travel in clear text)."
        )
    if settings.token_max_age_days <= 0:
        raise SystemExit("Refusing to start: LMS_TOKEN_MAX_AGE_DAYS must be positive.")
