"""
family_access.allowlist.sql

SQL-backed allowlist store.

Responsibilities:
- Persist the allowlist as a single row per scope (wholesale replace, one transaction).
- Translate database failures into `AllowlistUnavailableError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from family_access.allowlist.origins import validate_origins
from family_access.allowlist.store import EMPTY_SNAPSHOT, AllowlistSnapshot
from family_access.db.repositories.allowlist import AllowlistRepo
from family_access.errors import AllowlistUnavailableError


def _aware(ts: datetime) -> datetime:
    # SQLite drops tzinfo on the way back; values are always written as UTC.
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=UTC)


class SqlAllowlistStore:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        scope: str = "SYSTEM_CONFIG",
    ) -> None:
        self._session_factory = session_factory
        self._scope = scope

    async def get(self) -> AllowlistSnapshot:
        try:
            async with self._session_factory() as session:
                row = await AllowlistRepo(session).get(self._scope)
        except SQLAlchemyError as e:
            raise AllowlistUnavailableError(f"allowlist read failed ({type(e).__name__})") from e
        if row is None:
            return EMPTY_SNAPSHOT
        return AllowlistSnapshot(origins=frozenset(row.origins), updated_at=_aware(row.updated_at))

    async def replace(self, origins: Iterable[str]) -> datetime:
        validated = validate_origins(origins)
        updated_at = datetime.now(tz=UTC)
        try:
            try:
                await self._write(sorted(validated), updated_at)
            except IntegrityError:
                # A concurrent first write inserted the row; the second pass updates it.
                await self._write(sorted(validated), updated_at)
        except SQLAlchemyError as e:
            raise AllowlistUnavailableError(f"allowlist write failed ({type(e).__name__})") from e
        return updated_at

    async def _write(self, origins: list[str], updated_at: datetime) -> None:
        # session.begin() commits on success and rolls back on any error.
        async with self._session_factory() as session, session.begin():
            await AllowlistRepo(session).put(
                scope=self._scope, origins=origins, updated_at=updated_at
            )


# --- Module Notes -----------------------------------------------------------
# Origins are stored sorted so diffs between revisions are readable.
