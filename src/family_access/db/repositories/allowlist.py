from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from family_access.db.models import AllowlistConfig


class AllowlistRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, scope: str) -> AllowlistConfig | None:
        return await self._session.get(AllowlistConfig, scope)

    async def put(self, *, scope: str, origins: list[str], updated_at: datetime) -> AllowlistConfig:
        # Row lock serializes writers once the scope row exists.
        row = await self._session.get(AllowlistConfig, scope, with_for_update=True)
        if row is None:
            row = AllowlistConfig(scope=scope, origins=origins, updated_at=updated_at)
            self._session.add(row)
        else:
            row.origins = origins
            row.updated_at = updated_at
        await self._session.flush()
        return row
