"""Authentication endpoints: login, register and "who am I"."""

from __future__ import annotations

from .base import ResourceApi
from .result import ApiResult


class AuthApi(ResourceApi):
    async def login(self, email: str, password: str) -> ApiResult:
        """POST /users/login; backend answers `{token, user}`."""
        return await self._call("/users/login", "POST", {"email": email, "password": password})

    async def register(self, name: str, email: str, password: str, role: str = "STUDENT") -> ApiResult:
        """POST /users/register; backend answers `{token, user}`."""
        payload = {"name": name, "email": email, "password": password, "role": role}
        return await self._call("/users/register", "POST", payload)

    async def me(self) -> ApiResult:
        """GET /users/me; bare user object, or the same wrapped in `{data: ...}`."""
        return await self._item("/users/me")
