from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceApi
from .result import ApiResult


class CoursesApi(ResourceApi):
    async def list(self) -> ApiResult:
        return await self._list("/courses")

    async def get(self, course_id: str) -> ApiResult:
        return await self._item(self._path("/courses/{}", course_id))

    async def create(self, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call("/courses", "POST", dict(payload))

    async def update(self, course_id: str, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call(self._path("/courses/{}", course_id), "PUT", dict(payload))

    async def delete(self, course_id: str) -> ApiResult:
        return await self._call(self._path("/courses/{}", course_id), "DELETE")
