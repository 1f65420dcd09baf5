"""
Uniform outcome type for every call against the LMS REST backend.

Why:
    Pages should never branch on "exception vs. HTTP status". Every transport
    and resource call resolves to an `ApiResult` holding exactly one of `data`
    or `error`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True, slots=True)
class ApiResult:
    data: Any = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("ApiResult requires exactly one of data or error")

    @classmethod
    def ok(cls, data: Any) -> "ApiResult":
        return cls(data=data)

    @classmethod
    def fail(cls, message: str) -> "ApiResult":
        return cls(error=str(message) if message else "An error occurred")

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def map(self, fn) -> "ApiResult":
        """Apply `fn` to successful data; errors pass through untouched."""
        if self.error is not None:
            return self
        return ApiResult.ok(fn(self.data))

    def data_or(self, default: Any) -> Any:
        return self.data if self.error is None else default
