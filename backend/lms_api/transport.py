"""
Authenticated HTTP transport for the LMS REST backend.

Why:
    Keep a single place that knows how to talk to the backend: base URL,
    bearer credential, JSON encoding and the mapping of every outcome
    (unencodable request, network failure, HTTP error, malformed body) onto
    `ApiResult`.

Security:
    Never log tokens, request bodies or credentials. Failures are logged with
    method, endpoint and exception class only.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from .result import ApiResult

logger = logging.getLogger("lms.api.transport")

TokenProvider = Callable[[], Optional[str]]

GENERIC_ERROR = "An error occurred"
NETWORK_ERROR = "Network error"
INVALID_JSON = "Invalid JSON response"
INVALID_REQUEST = "Invalid request"


def _error_message(response: httpx.Response) -> str:
    """Extract a human-readable message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, Mapping):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return GENERIC_ERROR


class ApiTransport:
    """Perform one request against the backend and normalize its outcome.

    `token_provider` is called on every request so a token written during the
    current client context (e.g. right after login) is picked up immediately.
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._token_provider = token_provider or (lambda: None)

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _headers(self, extra: Mapping[str, str] | None, *, json_body: bool) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if extra:
            headers.update(extra)
        if json_body:
            headers["Content-Type"] = "application/json"
        token = self._token_provider()
        if token:
            # Caller headers are merged first; the credential always wins.
            for key in [k for k in headers if k.lower() == "authorization"]:
                headers.pop(key)
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> ApiResult:
        method = method.upper()
        json_body = body is not None and files is None
        kwargs: Dict[str, Any] = {"headers": self._headers(headers, json_body=json_body)}
        if files is not None:
            kwargs["files"] = files
            if body is not None:
                kwargs["data"] = body
        elif body is not None:
            try:
                kwargs["content"] = json.dumps(body)
            except (TypeError, ValueError) as exc:
                logger.warning("Unencodable body for %s %s (%s)", method, endpoint, exc.__class__.__name__)
                return ApiResult.fail(INVALID_REQUEST)

        try:
            response = await self._client.request(method, self._url(endpoint), **kwargs)
        except httpx.InvalidURL as exc:
            # Not an HTTPError subclass; raised before anything is sent.
            logger.warning("Invalid URL for %s %s (%s)", method, endpoint, exc.__class__.__name__)
            return ApiResult.fail(INVALID_REQUEST)
        except httpx.HTTPError as exc:
            logger.warning("Request failed: %s %s (%s)", method, endpoint, exc.__class__.__name__)
            return ApiResult.fail(str(exc) or NETWORK_ERROR)

        if not response.is_success:
            message = _error_message(response)
            logger.info("Backend rejected %s %s with %s", method, endpoint, response.status_code)
            return ApiResult.fail(message)

        if not response.content.strip():
            return ApiResult.ok({})
        try:
            data = response.json()
        except ValueError:
            logger.warning("Malformed JSON from %s %s", method, endpoint)
            return ApiResult.fail(INVALID_JSON)
        if data is None:
            return ApiResult.ok({})
        return ApiResult.ok(data)
