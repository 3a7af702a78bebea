"""
family_access.access.engine

Dual-factor access decision engine.

Responsibilities:
- Check the caller's origin against the allowlist, then verify the credential.
- Fail closed on every dependency error (store, identity provider, timeout).
- Emit exactly one audit record per evaluation, including cancelled ones.

Flow per evaluation (no state is kept between calls):

    Start -> OriginChecked -> Denied
                           -> CredentialChecked -> Denied
                                                -> Authorized
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

from family_access.access.models import AccessDecision, AccessRequest, ReasonCode
from family_access.allowlist.store import AllowlistStore
from family_access.audit.logger import AuditLogger
from family_access.errors import (
    AllowlistUnavailableError,
    CredentialInvalidError,
    CredentialMalformedError,
    ProviderUnavailableError,
)
from family_access.identity.models import IdentityAssertion
from family_access.identity.verifier import IdentityVerifier
from family_access.observability.logging import get_logger

log = get_logger(__name__)


class _Outcome:
    # Decision plus the operational note that goes into the audit record.
    __slots__ = ("decision", "detail")

    def __init__(self, decision: AccessDecision, detail: str | None = None) -> None:
        self.decision = decision
        self.detail = detail


class AccessDecisionEngine:
    def __init__(
        self,
        *,
        store: AllowlistStore,
        verifier: IdentityVerifier,
        audit: AuditLogger,
        verify_timeout: float = 5.0,
    ) -> None:
        self._store = store
        self._verifier = verifier
        self._audit = audit
        self._verify_timeout = verify_timeout

    async def evaluate(
        self,
        origin_address: str,
        credential: str | None = None,
        *,
        request_time: datetime | None = None,
    ) -> AccessDecision:
        request = AccessRequest(
            origin_address=(origin_address or "").strip(),
            credential=credential,
            request_time=request_time or datetime.now(tz=UTC),
        )
        try:
            outcome = await self._decide(request)
        except asyncio.CancelledError:
            # The caller went away mid-evaluation; the attempt is still audited.
            cancelled = _Outcome(
                AccessDecision.deny(ReasonCode.system_error), "evaluation cancelled"
            )
            self._emit(request, cancelled)
            raise
        self._emit(request, outcome)
        return outcome.decision

    async def _decide(self, request: AccessRequest) -> _Outcome:
        if not request.origin_address:
            return _Outcome(AccessDecision.deny(ReasonCode.origin_missing))

        # Gate 1: origin. The verifier is never reached for an unlisted origin.
        try:
            allowlist = await self._store.get()
        except AllowlistUnavailableError as e:
            return _Outcome(AccessDecision.deny(ReasonCode.system_error), str(e))
        except Exception as e:
            return _Outcome(
                AccessDecision.deny(ReasonCode.system_error),
                f"allowlist store failure ({type(e).__name__})",
            )
        if not allowlist.allows(request.origin_address):
            return _Outcome(AccessDecision.deny(ReasonCode.origin_not_allowed))

        if request.credential is None or not request.credential.strip():
            return _Outcome(AccessDecision.deny(ReasonCode.credential_missing))

        # Gate 2: identity.
        try:
            identity = await self._verify(request.credential)
        except CredentialInvalidError:
            return _Outcome(AccessDecision.deny(ReasonCode.credential_invalid))
        except CredentialMalformedError:
            return _Outcome(AccessDecision.deny(ReasonCode.credential_malformed))
        except ProviderUnavailableError as e:
            return _Outcome(AccessDecision.deny(ReasonCode.system_error), str(e))
        except Exception as e:
            return _Outcome(
                AccessDecision.deny(ReasonCode.system_error),
                f"identity verifier failure ({type(e).__name__})",
            )

        return _Outcome(AccessDecision.grant(identity))

    async def _verify(self, credential: str) -> IdentityAssertion:
        try:
            async with asyncio.timeout(self._verify_timeout):
                return await self._verifier.verify(credential)
        except TimeoutError as e:
            raise ProviderUnavailableError(
                f"identity provider timeout after {self._verify_timeout:g}s"
            ) from e

    def _emit(self, request: AccessRequest, outcome: _Outcome) -> None:
        decision = outcome.decision
        record = self._audit.record(
            decision,
            origin_address=request.origin_address,
            timestamp=request.request_time,
            credential=request.credential,
            detail=outcome.detail,
        )
        fields = {
            "origin_address": record.origin_address,
            "authorized": decision.authorized,
            "reason_code": record.reason_code,
            "method": record.method.value,
            "audit_record_id": str(record.record_id),
        }
        if decision.is_system_error:
            # Dependency failure, not a client denial.
            log.warning("access_evaluated", error_kind="dependency", detail=record.detail, **fields)
        else:
            log.info("access_evaluated", **fields)


# --- Module Notes -----------------------------------------------------------
# No lock is held across `_verify`; the only shared state is the allowlist store.
