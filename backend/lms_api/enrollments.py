from __future__ import annotations

from .base import ResourceApi
from .result import ApiResult


class EnrollmentsApi(ResourceApi):
    async def my(self) -> ApiResult:
        """Enrollments of the current user."""
        return await self._list("/enrollments/my")

    async def by_course(self, course_id: str) -> ApiResult:
        return await self._list(self._path("/enrollments/courses/{}", course_id))

    async def enroll(self, course_id: str) -> ApiResult:
        return await self._call(self._path("/enrollments/courses/{}", course_id), "POST")
