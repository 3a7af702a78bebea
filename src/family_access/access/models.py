"""
family_access.access.models

Access decision domain types.

Responsibilities:
- Define the inbound `AccessRequest` and the immutable `AccessDecision`.
- Define the closed set of denial reason codes and their caller-visible HTTP status.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime

from family_access.audit.models import AuthMethod
from family_access.identity.models import IdentityAssertion


class ReasonCode(enum.StrEnum):
    # Values are part of the caller-facing API and the audit stream.
    origin_missing = "origin-missing"
    origin_not_allowed = "origin-not-allowed"
    credential_missing = "credential-missing"
    credential_invalid = "credential-invalid"
    credential_malformed = "credential-malformed"
    system_error = "system-error"


_METHOD_BY_REASON: dict[ReasonCode, AuthMethod] = {
    ReasonCode.origin_missing: AuthMethod.origin_only,
    ReasonCode.origin_not_allowed: AuthMethod.origin_only,
    ReasonCode.credential_missing: AuthMethod.identity_only,
    ReasonCode.credential_invalid: AuthMethod.identity_only,
    ReasonCode.credential_malformed: AuthMethod.identity_only,
    ReasonCode.system_error: AuthMethod.system_error,
}

_STATUS_BY_REASON: dict[ReasonCode, int] = {
    ReasonCode.origin_missing: 400,
    ReasonCode.origin_not_allowed: 403,
    ReasonCode.credential_missing: 401,
    ReasonCode.credential_invalid: 401,
    ReasonCode.credential_malformed: 401,
    ReasonCode.system_error: 503,
}


def http_status_for(reason_code: ReasonCode | None) -> int:
    if reason_code is None:
        return 200
    return _STATUS_BY_REASON[reason_code]


@dataclass(frozen=True, slots=True)
class AccessRequest:
    origin_address: str
    credential: str | None = field(default=None, repr=False)
    request_time: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """
    Outcome of one evaluation. Build through `deny()` / `grant()` only.
    """

    authorized: bool
    method: AuthMethod
    reason_code: ReasonCode | None = None
    subject_id: str | None = None
    display_name: str | None = None

    @classmethod
    def deny(cls, reason_code: ReasonCode) -> AccessDecision:
        return cls(authorized=False, method=_METHOD_BY_REASON[reason_code], reason_code=reason_code)

    @classmethod
    def grant(cls, identity: IdentityAssertion) -> AccessDecision:
        return cls(
            authorized=True,
            method=AuthMethod.dual_validation,
            subject_id=identity.subject_id,
            display_name=identity.display_name,
        )

    @property
    def http_status(self) -> int:
        return http_status_for(self.reason_code)

    @property
    def is_system_error(self) -> bool:
        return self.reason_code is ReasonCode.system_error


# --- Module Notes -----------------------------------------------------------
# `grant()` is only called by the engine after both the origin and identity gates pass.
