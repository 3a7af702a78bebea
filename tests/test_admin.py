"""
tests.test_admin

Allowlist administration: privileged operations require dual validation; bootstrap applies once.
"""

from __future__ import annotations

import pytest

from family_access.access.models import ReasonCode
from family_access.admin.service import AllowlistAdministration, bootstrap_allowlist
from family_access.allowlist.store import InMemoryAllowlistStore
from family_access.errors import AccessDeniedError, CredentialInvalidError, ValidationError

ALLOWED = "203.0.113.5"
TOKEN = "admin-token"


@pytest.fixture
def admin(engine, store) -> AllowlistAdministration:
    return AllowlistAdministration(engine=engine, store=store)


@pytest.mark.asyncio
async def test_get_requires_dual_validation(admin, verifier, audit, sink) -> None:
    snapshot = await admin.get_allowlist(ALLOWED, TOKEN)
    assert snapshot.origins == frozenset({ALLOWED})

    with pytest.raises(AccessDeniedError) as exc:
        await admin.get_allowlist(ALLOWED, None)
    assert exc.value.decision.reason_code is ReasonCode.credential_missing

    verifier.outcome = CredentialInvalidError("revoked")
    with pytest.raises(AccessDeniedError):
        await admin.get_allowlist(ALLOWED, TOKEN)
    await audit.aclose()

    # Administration attempts are audited like any other access.
    assert len(sink.records) == 3


@pytest.mark.asyncio
async def test_set_from_unlisted_origin_is_denied(admin, store, verifier) -> None:
    with pytest.raises(AccessDeniedError) as exc:
        await admin.set_allowlist("198.51.100.9", TOKEN, ["198.51.100.9"])
    assert exc.value.decision.reason_code is ReasonCode.origin_not_allowed
    assert verifier.calls == []
    assert (await store.get()).origins == frozenset({ALLOWED})


@pytest.mark.asyncio
async def test_set_replaces_whole_set(admin, store) -> None:
    updated_at = await admin.set_allowlist(ALLOWED, TOKEN, [ALLOWED, "198.51.100.9"])
    snapshot = await store.get()
    assert snapshot.origins == frozenset({ALLOWED, "198.51.100.9"})
    assert snapshot.updated_at == updated_at


@pytest.mark.asyncio
async def test_set_rejects_malformed(admin, store) -> None:
    with pytest.raises(ValidationError):
        await admin.set_allowlist(ALLOWED, TOKEN, [ALLOWED, "home-router"])
    assert (await store.get()).origins == frozenset({ALLOWED})


@pytest.mark.asyncio
async def test_add_and_remove_origin(admin, store) -> None:
    await admin.add_origin(ALLOWED, TOKEN, "198.51.100.9")
    assert (await store.get()).origins == frozenset({ALLOWED, "198.51.100.9"})

    before = (await store.get()).updated_at
    assert await admin.add_origin(ALLOWED, TOKEN, "198.51.100.9") == before

    await admin.remove_origin(ALLOWED, TOKEN, "198.51.100.9")
    assert (await store.get()).origins == frozenset({ALLOWED})

    before = (await store.get()).updated_at
    assert await admin.remove_origin(ALLOWED, TOKEN, "192.0.2.1") == before


@pytest.mark.asyncio
async def test_bootstrap_seeds_only_once() -> None:
    store = InMemoryAllowlistStore()
    first = await bootstrap_allowlist(store, [ALLOWED])
    assert first is not None

    second = await bootstrap_allowlist(store, ["198.51.100.9"])
    assert second is None
    assert (await store.get()).origins == frozenset({ALLOWED})


@pytest.mark.asyncio
async def test_bootstrap_with_empty_seed_keeps_fail_closed() -> None:
    store = InMemoryAllowlistStore()
    assert await bootstrap_allowlist(store, []) is None
    assert (await store.get()).updated_at is None
