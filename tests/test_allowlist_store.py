"""
tests.test_allowlist_store

Allowlist store contract: fail-closed default, validation, atomic replace, SQL persistence.
"""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import IntegrityError

from family_access.allowlist.origins import normalize_origin, validate_origins
from family_access.allowlist.sql import SqlAllowlistStore
from family_access.allowlist.store import InMemoryAllowlistStore
from family_access.db.init_db import init_db
from family_access.db.repositories.allowlist import AllowlistRepo
from family_access.db.session import create_engine, create_sessionmaker
from family_access.errors import ValidationError
from family_access.settings import Settings


def test_normalize_origin() -> None:
    assert normalize_origin(" 203.0.113.5 ") == "203.0.113.5"
    assert normalize_origin("2001:DB8:0:0::1") == "2001:db8::1"
    assert normalize_origin("203.0.113.0/24") is None
    assert normalize_origin("example.com") is None
    assert normalize_origin("") is None
    assert normalize_origin(None) is None


def test_validate_origins_reports_every_bad_entry() -> None:
    with pytest.raises(ValidationError) as exc:
        validate_origins(["203.0.113.5", "nope", "10.0.0.0/8"])
    assert len(exc.value.invalid) == 2


def test_validate_origins_rejects_bare_string() -> None:
    with pytest.raises(ValidationError):
        validate_origins("203.0.113.5")


@pytest.mark.asyncio
async def test_never_set_is_empty() -> None:
    snapshot = await InMemoryAllowlistStore().get()
    assert snapshot.origins == frozenset()
    assert snapshot.updated_at is None
    assert snapshot.allows("203.0.113.5") is False


@pytest.mark.asyncio
async def test_replace_supersedes_previous_set() -> None:
    store = InMemoryAllowlistStore(["203.0.113.5", "203.0.113.6"])
    updated_at = await store.replace(["198.51.100.9"])

    snapshot = await store.get()
    assert snapshot.origins == frozenset({"198.51.100.9"})
    assert snapshot.updated_at == updated_at


@pytest.mark.asyncio
async def test_malformed_replace_leaves_store_untouched() -> None:
    store = InMemoryAllowlistStore(["203.0.113.5"])
    before = await store.get()
    with pytest.raises(ValidationError):
        await store.replace(["198.51.100.9", "not-an-ip"])
    assert await store.get() == before


@pytest.mark.asyncio
async def test_concurrent_reads_see_whole_sets() -> None:
    old = {f"10.0.0.{i}" for i in range(1, 50)}
    new = {f"10.1.0.{i}" for i in range(1, 50)}
    store = InMemoryAllowlistStore(old)
    seen: list[frozenset[str]] = []

    async def reader() -> None:
        for _ in range(200):
            seen.append((await store.get()).origins)
            await asyncio.sleep(0)

    async def writer() -> None:
        for i in range(50):
            await store.replace(new if i % 2 == 0 else old)
            await asyncio.sleep(0)

    await asyncio.gather(reader(), reader(), writer())
    assert all(s in (frozenset(old), frozenset(new)) for s in seen)


@pytest.mark.asyncio
async def test_sql_store_round_trip(tmp_path) -> None:
    settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'gate.db'}")
    engine = create_engine(settings)
    try:
        await init_db(engine)
        factory = create_sessionmaker(engine)
        store = SqlAllowlistStore(session_factory=factory, scope="SYSTEM_CONFIG")

        empty = await store.get()
        assert empty.origins == frozenset()
        assert empty.updated_at is None

        await store.replace(["203.0.113.5", "2001:DB8::1"])
        updated_at = await store.replace(["203.0.113.5", "198.51.100.9"])

        snapshot = await store.get()
        assert snapshot.origins == frozenset({"203.0.113.5", "198.51.100.9"})
        assert snapshot.updated_at == updated_at

        with pytest.raises(ValidationError):
            await store.replace(["bogus"])
        assert (await store.get()).origins == snapshot.origins
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_store_scopes_are_independent(tmp_path) -> None:
    settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'gate.db'}")
    engine = create_engine(settings)
    try:
        await init_db(engine)
        factory = create_sessionmaker(engine)
        system = SqlAllowlistStore(session_factory=factory)
        other = SqlAllowlistStore(session_factory=factory, scope="STAGING")

        await system.replace(["203.0.113.5"])
        assert (await other.get()).origins == frozenset()
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_store_first_write_race_last_writer_wins(tmp_path, monkeypatch) -> None:
    settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'gate.db'}")
    engine = create_engine(settings)
    try:
        await init_db(engine)
        factory = create_sessionmaker(engine)
        store = SqlAllowlistStore(session_factory=factory)
        real_put = AllowlistRepo.put
        calls: list[list[str]] = []

        async def racing_put(self, *, scope, origins, updated_at):
            calls.append(origins)
            if len(calls) == 1:
                # Another writer creates the scope row first; our insert then collides.
                async with factory() as other, other.begin():
                    await real_put(
                        AllowlistRepo(other),
                        scope=scope,
                        origins=["192.0.2.1"],
                        updated_at=updated_at,
                    )
                raise IntegrityError("INSERT INTO allowlist_configs", {}, Exception("UNIQUE"))
            return await real_put(self, scope=scope, origins=origins, updated_at=updated_at)

        monkeypatch.setattr(AllowlistRepo, "put", racing_put)
        await store.replace(["203.0.113.5"])

        assert len(calls) == 2
        assert (await store.get()).origins == frozenset({"203.0.113.5"})
    finally:
        await engine.dispose()
