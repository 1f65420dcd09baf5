from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceApi
from .result import ApiResult


class ModulesApi(ResourceApi):
    """Course modules (ordered sections of a course)."""

    async def list_by_course(self, course_id: str) -> ApiResult:
        return await self._list(self._path("/modules/course/{}", course_id))

    async def create(self, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call("/modules", "POST", dict(payload))

    async def update(self, module_id: str, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call(self._path("/modules/{}", module_id), "PUT", dict(payload))

    async def delete(self, module_id: str) -> ApiResult:
        return await self._call(self._path("/modules/{}", module_id), "DELETE")
