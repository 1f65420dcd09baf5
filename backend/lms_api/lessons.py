from __future__ import annotations

from typing import Any, Mapping

from .base import ResourceApi
from .result import ApiResult


class LessonsApi(ResourceApi):
    async def list_by_module(self, module_id: str) -> ApiResult:
        return await self._list(self._path("/lessons/module/{}", module_id))

    async def create(self, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call("/lessons", "POST", dict(payload))

    async def update(self, lesson_id: str, payload: Mapping[str, Any]) -> ApiResult:
        return await self._call(self._path("/lessons/{}", lesson_id), "PUT", dict(payload))

    async def delete(self, lesson_id: str) -> ApiResult:
        return await self._call(self._path("/lessons/{}", lesson_id), "DELETE")

    async def upload_video(
        self,
        lesson_id: str,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> ApiResult:
        """Upload a lesson video as multipart field `video`."""
        files = {"video": (filename, content, content_type)}
        return await self._call(self._path("/lessons/{}/video", lesson_id), "POST", files=files)
