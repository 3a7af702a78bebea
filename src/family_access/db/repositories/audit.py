"""
family_access.db.repositories.audit

Repository for `AccessAuditEvent` entities.

Responsibilities:
- Append access audit records.
- Query the most recent records for operators.
"""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from family_access.audit.models import AuditRecord
from family_access.db.models import AccessAuditEvent


class AccessAuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, record: AuditRecord) -> AccessAuditEvent:
        # Audit events are append-only (no update/delete) in normal operation.
        ev = AccessAuditEvent(
            id=record.record_id,
            occurred_at=record.timestamp,
            origin_address=record.origin_address,
            subject_id=record.subject_id,
            display_name=record.display_name,
            method=record.method.value,
            result=record.result.value,
            reason_code=record.reason_code,
            detail=record.detail,
        )
        self._session.add(ev)
        await self._session.flush()
        return ev

    async def list_recent(self, *, limit: int = 200) -> list[AccessAuditEvent]:
        # Newest-first for operator review.
        stmt = select(AccessAuditEvent).order_by(desc(AccessAuditEvent.occurred_at)).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Retention/deletion is an operational concern handled outside this service.
