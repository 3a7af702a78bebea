"""
family_access.errors

Exception hierarchy shared across the access-control layers.

Responsibilities:
- Give every failure a typed home so callers can map it to a reason code.
- Keep identity-provider outages distinct from rejected credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from family_access.access.models import AccessDecision


class FamilyAccessError(Exception):
    pass


class ValidationError(FamilyAccessError):
    """
    Raised when an allowlist update contains malformed origins.
    Nothing is written when this is raised.
    """

    def __init__(self, message: str, *, invalid: list[str] | None = None) -> None:
        super().__init__(message)
        self.invalid = list(invalid or [])


class AllowlistUnavailableError(FamilyAccessError):
    pass


class VerificationError(FamilyAccessError):
    pass


class CredentialMalformedError(VerificationError):
    pass


class CredentialInvalidError(VerificationError):
    pass


class ProviderUnavailableError(VerificationError):
    pass


class AuditSinkError(FamilyAccessError):
    pass


class AccessDeniedError(FamilyAccessError):
    """
    Raised by privileged operations when the decision engine denies the caller.
    """

    def __init__(self, decision: AccessDecision) -> None:
        super().__init__(f"access denied: {decision.reason_code}")
        self.decision = decision


# --- Module Notes -----------------------------------------------------------
# Error messages must never embed a bearer credential; see `audit.redaction`.
