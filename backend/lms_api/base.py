"""Shared plumbing for the per-resource API modules."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from .envelope import coerce_item, coerce_records
from .result import ApiResult
from .transport import ApiTransport

INVALID_RESPONSE = "Invalid response"


def _to_item(result: ApiResult) -> ApiResult:
    if not result.is_ok:
        return result
    item = coerce_item(result.data)
    if item is None:
        return ApiResult.fail(INVALID_RESPONSE)
    return ApiResult.ok(item)


class ResourceApi:
    """Bind a resource module to a transport.

    Subclasses only fix paths and verbs. List endpoints go through `_list` and
    single-object reads through `_item`; those are the only places where
    enveloped and bare payloads are unified. Ids always enter a URL through
    `_path`, so `?`, `#`, `/` or control characters cannot change the endpoint.
    """

    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    @staticmethod
    def _path(template: str, *ids: Any) -> str:
        return template.format(*(quote(str(i), safe="") for i in ids))

    async def _call(self, endpoint: str, method: str = "GET", body: Any = None, **kwargs: Any) -> ApiResult:
        return await self._transport.request(endpoint, method=method, body=body, **kwargs)

    async def _list(self, endpoint: str) -> ApiResult:
        result = await self._transport.request(endpoint)
        return result.map(coerce_records)

    async def _item(self, endpoint: str) -> ApiResult:
        return _to_item(await self._transport.request(endpoint))
