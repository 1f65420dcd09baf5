"""
Identity domain constants.

Why:
- Centralize the roles known to the LMS backend to avoid drift between the
  session layer, the guards and the page routes.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


__all__ = ["Role"]
