"""
family_access.audit.models

Audit trail record types.

Responsibilities:
- Define the immutable `AuditRecord` written once per access decision.
- Define the closed vocabularies for audit method and result.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class AuthMethod(enum.StrEnum):
    # Values are written to the audit stream; treat as stable contract.
    origin_only = "origin-only"
    identity_only = "identity-only"
    dual_validation = "dual-validation"
    system_error = "system-error"


class AuditResult(enum.StrEnum):
    success = "success"
    failure = "failure"


@dataclass(frozen=True, slots=True)
class AuditRecord:
    timestamp: datetime
    origin_address: str
    method: AuthMethod
    result: AuditResult
    reason_code: str | None = None
    subject_id: str | None = None
    display_name: str | None = None
    detail: str | None = None
    record_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        if self.result is AuditResult.failure and not self.reason_code:
            raise ValueError("failure audit records require a reason_code")

    def to_dict(self) -> dict[str, Any]:
        # Shape used by the log sink; optional fields are omitted when absent.
        # "timestamp" belongs to the log pipeline, so the request time is "occurred_at".
        data: dict[str, Any] = {
            "record_id": str(self.record_id),
            "occurred_at": self.timestamp.isoformat(),
            "origin_address": self.origin_address,
            "method": self.method.value,
            "result": self.result.value,
        }
        for key in ("reason_code", "subject_id", "display_name", "detail"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


# --- Module Notes -----------------------------------------------------------
# There is deliberately no credential field on `AuditRecord`.
