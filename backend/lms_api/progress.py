from __future__ import annotations

from .base import ResourceApi
from .result import ApiResult


class ProgressApi(ResourceApi):
    async def lesson(self, lesson_id: str) -> ApiResult:
        """Progress record of the current user for one lesson."""
        return await self._item(self._path("/progress/lesson/{}", lesson_id))

    async def complete_lesson(self, lesson_id: str) -> ApiResult:
        return await self._call(self._path("/progress/lesson/{}/complete", lesson_id), "POST")

    async def course(self, course_id: str) -> ApiResult:
        return await self._list(self._path("/progress/course/{}", course_id))
