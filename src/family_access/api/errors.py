"""
family_access.api.errors

Exception handlers that turn domain errors into JSON responses.

Responsibilities:
- Render denials with the decision's reason code and mapped HTTP status.
- Keep provider/driver error text out of response bodies.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from family_access.errors import AccessDeniedError, AllowlistUnavailableError, ValidationError


async def access_denied_handler(_: Request, exc: AccessDeniedError) -> JSONResponse:
    decision = exc.decision
    return JSONResponse(
        status_code=decision.http_status,
        content={"authorized": False, "reason": decision.reason_code},
    )


async def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "invalid_origins", "invalid": exc.invalid},
    )


async def store_unavailable_handler(_: Request, __: AllowlistUnavailableError) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "allowlist_unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessDeniedError, access_denied_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        AllowlistUnavailableError, store_unavailable_handler  # type: ignore[arg-type]
    )
