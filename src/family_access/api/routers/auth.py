"""
family_access.api.routers.auth

Caller-facing access validation endpoint.

Responsibilities:
- Accept a credential from the JSON body (`accessToken`) or the Authorization header.
- Run one dual-factor evaluation and map the decision to an HTTP status.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from family_access.access.engine import AccessDecisionEngine
from family_access.api.deps import bearer_credential, client_origin, engine_dep

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class ValidateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str | None = Field(default=None, alias="accessToken", repr=False)


class ValidateResponse(BaseModel):
    authorized: bool
    reason: str | None = None
    user_id: str | None = Field(default=None, serialization_alias="userId")
    username: str | None = None


@router.post("/validate", response_model=ValidateResponse)
async def validate_access(
    body: ValidateRequest | None = None,
    origin: str = Depends(client_origin),
    header_credential: str | None = Depends(bearer_credential),
    engine: AccessDecisionEngine = Depends(engine_dep),
) -> JSONResponse:
    credential = (body.access_token if body else None) or header_credential
    decision = await engine.evaluate(origin, credential)

    payload = ValidateResponse(
        authorized=decision.authorized,
        reason=decision.reason_code.value if decision.reason_code else None,
        user_id=decision.subject_id,
        username=decision.display_name,
    )
    return JSONResponse(
        status_code=decision.http_status,
        content=payload.model_dump(by_alias=True, exclude_none=True),
    )
