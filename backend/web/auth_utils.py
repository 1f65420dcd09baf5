"""
Shared authentication utilities.

Why:
    Avoid duplicating environment-dependent cookie policy logic across modules
    (the session wiring and the auth router both need it).

Design:
    The helper is framework-agnostic and pure: it accepts an environment string
    and returns the corresponding cookie flags. Callers decide where the
    environment comes from (e.g., settings object).
"""

from __future__ import annotations

from urllib.parse import quote


def cookie_opts(environment: str) -> dict:
    """Return cookie flags for the credential token.

    Returns a mapping with keys:
      - secure: True outside dev/test (plain-http localhost would drop the cookie)
      - samesite: "lax"  # sent on top-level navigations, e.g. after login redirects
    """
    env = (environment or "").lower()
    return {"secure": env not in ("dev", "test", "local"), "samesite": "lax"}


def login_redirect_url(login_path: str, target: str) -> str:
    """Build `/login?redirect=<target>` with the target fully percent-encoded."""
    return f"{login_path}?redirect={quote(target, safe='')}"
