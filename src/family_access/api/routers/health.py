"""
family_access.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) that reads the allowlist store.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from family_access.allowlist.store import AllowlistStore
from family_access.api.deps import store_dep

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(store: AllowlistStore = Depends(store_dep)) -> dict[str, str]:
    # Readiness: the allowlist store is the critical dependency of every decision.
    await store.get()
    return {"status": "ready"}
