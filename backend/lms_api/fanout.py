"""
Concurrent fan-out over independent backend reads.

Pages often need one call per child resource (lessons of every module,
progress of every lesson). Branches run concurrently and are joined; a
branch that fails resolves to `default` so one bad call never breaks the
whole page.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Iterable, List

from .result import ApiResult

logger = logging.getLogger("lms.api.fanout")


async def gather_settled(calls: Iterable[Awaitable[ApiResult]], *, default: Any = None) -> List[Any]:
    """Await all `calls` concurrently and return their data in order.

    Failed results and exceptions raised by a branch are replaced by a copy of
    `default` (mutable defaults such as `[]` are not shared between branches).
    """
    outcomes = await asyncio.gather(*calls, return_exceptions=True)
    values: List[Any] = []
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning("Fan-out branch %d raised %s", index, outcome.__class__.__name__)
            values.append(copy.copy(default))
        elif isinstance(outcome, ApiResult) and outcome.is_ok:
            values.append(outcome.data)
        else:
            values.append(copy.copy(default))
    return values
