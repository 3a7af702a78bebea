"""
family_access.identity.verifier

Identity verifier boundary used by the access decision engine.

Responsibilities:
- Define the `IdentityVerifier` protocol the engine depends on.
- Call an external identity provider's user-info endpoint (HTTP) with a bounded timeout.
- Verify locally issued JWTs for dev/test deployments.
- Map provider outcomes onto malformed / invalid / provider-unavailable failures.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from family_access.errors import (
    CredentialInvalidError,
    CredentialMalformedError,
    ProviderUnavailableError,
)
from family_access.identity.jwt import JwtConfig, decode_and_validate
from family_access.identity.models import IdentityAssertion


class IdentityVerifier(Protocol):
    async def verify(self, credential: str) -> IdentityAssertion: ...


def _check_syntax(credential: str) -> None:
    # Cheap client-side screening; anything past this point is the provider's call.
    if not credential or not credential.strip():
        raise CredentialMalformedError("empty credential")
    if any(ch.isspace() or not ch.isprintable() for ch in credential):
        raise CredentialMalformedError("credential contains whitespace or control characters")


def _assertion_from_claims(claims: dict[str, Any]) -> IdentityAssertion | None:
    subject = str(claims.get("sub") or "").strip()
    if not subject:
        return None
    display_name = next(
        (
            str(claims[key])
            for key in ("name", "preferred_username", "username")
            if claims.get(key)
        ),
        subject,
    )
    return IdentityAssertion(subject_id=subject, display_name=display_name)


class HttpIdentityVerifier:
    """
    Asks the identity provider who owns a bearer token (OIDC user-info style).

    - 2xx + `sub` claim: valid
    - 400: malformed token
    - 401/403: rejected (expired, revoked, unknown)
    - anything else, transport errors, timeouts: provider unavailable
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        userinfo_url: str,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._http = http
        self._userinfo_url = userinfo_url
        self._timeout = httpx.Timeout(timeout_seconds)

    async def verify(self, credential: str) -> IdentityAssertion:
        _check_syntax(credential)
        try:
            r = await self._http.get(
                self._userinfo_url,
                headers={"Authorization": f"Bearer {credential}"},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError("identity provider timeout") from e
        except httpx.HTTPError as e:
            # Exception text may echo request headers; report only the type.
            raise ProviderUnavailableError(
                f"identity provider unreachable ({type(e).__name__})"
            ) from e

        if r.status_code == 400:
            raise CredentialMalformedError("identity provider rejected token format")
        if r.status_code in (401, 403):
            raise CredentialInvalidError(f"identity provider rejected token ({r.status_code})")
        if not r.is_success:
            raise ProviderUnavailableError(f"identity provider error ({r.status_code})")

        try:
            claims = r.json()
        except ValueError as e:
            raise ProviderUnavailableError("identity provider returned non-JSON body") from e
        assertion = _assertion_from_claims(claims) if isinstance(claims, dict) else None
        if assertion is None:
            raise ProviderUnavailableError("identity provider response missing subject")
        return assertion


class JwtIdentityVerifier:
    def __init__(self, *, cfg: JwtConfig) -> None:
        self._cfg = cfg

    async def verify(self, credential: str) -> IdentityAssertion:
        _check_syntax(credential)
        claims = decode_and_validate(cfg=self._cfg, token=credential)
        assertion = _assertion_from_claims(claims)
        if assertion is None:
            raise CredentialInvalidError("token subject is empty")
        return assertion


# --- Module Notes -----------------------------------------------------------
# The engine imposes its own hard timeout around `verify`; the httpx timeout here
# only keeps sockets from lingering after the engine has given up.
