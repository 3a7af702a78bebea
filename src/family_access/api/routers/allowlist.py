"""
family_access.api.routers.allowlist

Allowlist administration endpoints.

Responsibilities:
- Read, replace, add to, and remove from the origin allowlist.
- Every call passes the dual-factor decision via `AllowlistAdministration`.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from family_access.admin.service import AllowlistAdministration
from family_access.api.deps import admin_dep, bearer_credential, client_origin

router = APIRouter(prefix="/v1/auth/ip-allowlist", tags=["allowlist"])


class AllowlistResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    allowed_ips: list[str] = Field(alias="allowedIPs")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class AllowlistReplaceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    allowed_ips: list[str] = Field(alias="allowedIPs", max_length=1000)


class AllowlistUpdatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    updated_at: datetime | None = Field(default=None, alias="updatedAt")


@router.get("", response_model=AllowlistResponse, response_model_by_alias=True)
async def get_allowlist(
    origin: str = Depends(client_origin),
    credential: str | None = Depends(bearer_credential),
    admin: AllowlistAdministration = Depends(admin_dep),
) -> AllowlistResponse:
    snapshot = await admin.get_allowlist(origin, credential)
    return AllowlistResponse(allowed_ips=sorted(snapshot.origins), updated_at=snapshot.updated_at)


@router.put("", response_model=AllowlistUpdatedResponse, response_model_by_alias=True)
async def replace_allowlist(
    body: AllowlistReplaceRequest,
    origin: str = Depends(client_origin),
    credential: str | None = Depends(bearer_credential),
    admin: AllowlistAdministration = Depends(admin_dep),
) -> AllowlistUpdatedResponse:
    updated_at = await admin.set_allowlist(origin, credential, body.allowed_ips)
    return AllowlistUpdatedResponse(updated_at=updated_at)


@router.post("/{ip}", response_model=AllowlistUpdatedResponse, response_model_by_alias=True)
async def add_origin(
    ip: str,
    origin: str = Depends(client_origin),
    credential: str | None = Depends(bearer_credential),
    admin: AllowlistAdministration = Depends(admin_dep),
) -> AllowlistUpdatedResponse:
    return AllowlistUpdatedResponse(updated_at=await admin.add_origin(origin, credential, ip))


@router.delete("/{ip}", response_model=AllowlistUpdatedResponse, response_model_by_alias=True)
async def remove_origin(
    ip: str,
    origin: str = Depends(client_origin),
    credential: str | None = Depends(bearer_credential),
    admin: AllowlistAdministration = Depends(admin_dep),
) -> AllowlistUpdatedResponse:
    return AllowlistUpdatedResponse(updated_at=await admin.remove_origin(origin, credential, ip))


# --- Module Notes -----------------------------------------------------------
# Removing the caller's own origin is allowed; the next request will be denied.
