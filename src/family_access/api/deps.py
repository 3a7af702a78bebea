"""
family_access.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the components built by the app factory (engine, administration, store).
- Extract the caller's origin address and bearer credential from the request.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from family_access.access.engine import AccessDecisionEngine
from family_access.admin.service import AllowlistAdministration
from family_access.allowlist.store import AllowlistStore
from family_access.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def settings_dep(request: Request) -> Settings:
    # The settings object passed to `create_app`, not a fresh env parse.
    return request.app.state.settings  # type: ignore[attr-defined]


def engine_dep(request: Request) -> AccessDecisionEngine:
    return request.app.state.engine  # type: ignore[attr-defined]


def admin_dep(request: Request) -> AllowlistAdministration:
    return request.app.state.admin  # type: ignore[attr-defined]


def store_dep(request: Request) -> AllowlistStore:
    return request.app.state.store  # type: ignore[attr-defined]


def client_origin(request: Request, settings: Settings = Depends(settings_dep)) -> str:
    if settings.trust_forwarded_for:
        # Left-most hop is the original client as recorded by the trusted proxy.
        first_hop = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else ""


def bearer_credential(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str | None:
    if creds is None or not creds.credentials:
        return None
    return creds.credentials


# --- Module Notes -----------------------------------------------------------
# Missing credentials are not rejected here; the engine records them as
# `credential-missing` so every attempt is audited.
