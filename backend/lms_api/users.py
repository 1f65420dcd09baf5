from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceApi
from .result import ApiResult


class UsersApi(ResourceApi):
    async def list(self) -> ApiResult:
        return await self._list("/users")

    async def get(self, user_id: str) -> ApiResult:
        return await self._item(self._path("/users/{}", user_id))

    async def create(self, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call("/users", "POST", dict(payload))

    async def update(self, user_id: str, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call(self._path("/users/{}", user_id), "PUT", dict(payload))

    async def delete(self, user_id: str) -> ApiResult:
        return await self._call(self._path("/users/{}", user_id), "DELETE")
