"""Operations endpoints (liveness for load balancers and compose health checks)."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

operations_router = APIRouter(tags=["Operations"])


@operations_router.get("/health")
async def health():
    """Liveness only; does not contact the LMS backend."""
    return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "no-store"})
