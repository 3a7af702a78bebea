"""
tests.test_identity

Identity verifiers: provider status mapping over a mocked transport, and local JWT checks.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from family_access.errors import (
    CredentialInvalidError,
    CredentialMalformedError,
    ProviderUnavailableError,
)
from family_access.identity.jwt import JwtConfig, issue_token
from family_access.identity.verifier import HttpIdentityVerifier, JwtIdentityVerifier

USERINFO_URL = "https://idp.test/oauth2/userInfo"
TOKEN = "abc.def.ghi"


def _verifier(handler) -> tuple[HttpIdentityVerifier, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return HttpIdentityVerifier(http=http, userinfo_url=USERINFO_URL, timeout_seconds=1.0), seen


@pytest.mark.asyncio
async def test_http_verifier_returns_identity() -> None:
    verifier, seen = _verifier(
        lambda _: httpx.Response(200, json={"sub": "user-1", "username": "alex"})
    )
    identity = await verifier.verify(TOKEN)

    assert identity.subject_id == "user-1"
    assert identity.display_name == "alex"
    assert seen[0].headers["authorization"] == f"Bearer {TOKEN}"


@pytest.mark.asyncio
async def test_http_verifier_prefers_name_claim() -> None:
    verifier, _ = _verifier(
        lambda _: httpx.Response(200, json={"sub": "user-1", "name": "Alex Doe", "username": "a"})
    )
    assert (await verifier.verify(TOKEN)).display_name == "Alex Doe"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (400, CredentialMalformedError),
        (401, CredentialInvalidError),
        (403, CredentialInvalidError),
        (429, ProviderUnavailableError),
        (500, ProviderUnavailableError),
        (503, ProviderUnavailableError),
    ],
)
async def test_http_verifier_status_mapping(status, error) -> None:
    verifier, _ = _verifier(lambda _: httpx.Response(status, json={"message": "nope"}))
    with pytest.raises(error):
        await verifier.verify(TOKEN)


@pytest.mark.asyncio
async def test_http_verifier_missing_subject_is_provider_fault() -> None:
    verifier, _ = _verifier(lambda _: httpx.Response(200, json={"username": "alex"}))
    with pytest.raises(ProviderUnavailableError):
        await verifier.verify(TOKEN)


@pytest.mark.asyncio
async def test_http_verifier_non_json_is_provider_fault() -> None:
    verifier, _ = _verifier(lambda _: httpx.Response(200, text="<html>"))
    with pytest.raises(ProviderUnavailableError):
        await verifier.verify(TOKEN)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [httpx.ConnectTimeout("timed out"), httpx.ConnectError("refused"), httpx.ReadError("reset")],
)
async def test_http_verifier_transport_errors(exc) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise exc

    verifier, _ = _verifier(handler)
    with pytest.raises(ProviderUnavailableError) as info:
        await verifier.verify(TOKEN)
    assert TOKEN not in str(info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("credential", ["", "two words", "tab\there", "nul\x00"])
async def test_http_verifier_rejects_bad_syntax_without_network(credential) -> None:
    verifier, seen = _verifier(lambda _: httpx.Response(200, json={"sub": "x"}))
    with pytest.raises(CredentialMalformedError):
        await verifier.verify(credential)
    assert seen == []


CFG = JwtConfig(
    alg="HS256",
    issuer="family-access-gate",
    audience="family-display",
    secret="s3cret-signing-key-for-tests-0123456789",
)


@pytest.mark.asyncio
async def test_jwt_verifier_accepts_issued_token() -> None:
    token = issue_token(cfg=CFG, subject="user-7", name="Sam")
    identity = await JwtIdentityVerifier(cfg=CFG).verify(token)
    assert identity.subject_id == "user-7"
    assert identity.display_name == "Sam"


@pytest.mark.asyncio
async def test_jwt_verifier_falls_back_to_subject_for_name() -> None:
    token = issue_token(cfg=CFG, subject="user-7")
    assert (await JwtIdentityVerifier(cfg=CFG).verify(token)).display_name == "user-7"


@pytest.mark.asyncio
async def test_jwt_verifier_rejects_expired() -> None:
    token = issue_token(cfg=CFG, subject="user-7", ttl=timedelta(seconds=-30))
    with pytest.raises(CredentialInvalidError):
        await JwtIdentityVerifier(cfg=CFG).verify(token)


@pytest.mark.asyncio
async def test_jwt_verifier_rejects_foreign_signature() -> None:
    other = JwtConfig(
        alg="HS256",
        issuer=CFG.issuer,
        audience=CFG.audience,
        secret="other-signing-key-for-tests-0123456789",
    )
    token = issue_token(cfg=other, subject="user-7")
    with pytest.raises(CredentialInvalidError):
        await JwtIdentityVerifier(cfg=CFG).verify(token)


@pytest.mark.asyncio
async def test_jwt_verifier_rejects_wrong_audience() -> None:
    other = JwtConfig(alg="HS256", issuer=CFG.issuer, audience="elsewhere", secret=CFG.secret)
    token = issue_token(cfg=other, subject="user-7")
    with pytest.raises(CredentialInvalidError):
        await JwtIdentityVerifier(cfg=CFG).verify(token)


@pytest.mark.asyncio
async def test_jwt_verifier_flags_garbage_as_malformed() -> None:
    with pytest.raises(CredentialMalformedError):
        await JwtIdentityVerifier(cfg=CFG).verify("not-a-jwt")


def test_jwt_config_hides_secret() -> None:
    assert CFG.secret not in repr(CFG)
