"""
family_access.db.models

Persistence schema for the access gate.

Responsibilities:
- Define ORM models:
  - AllowlistConfig: one row per scope holding the full origin set (replaced wholesale)
  - AccessAuditEvent: append-only security audit trail
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from family_access.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AllowlistConfig(Base):
    __tablename__ = "allowlist_configs"

    # Single system scope today ("SYSTEM_CONFIG"); the key keeps room for more.
    scope: Mapped[str] = mapped_column(String(64), primary_key=True)
    origins: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class AccessAuditEvent(Base):
    __tablename__ = "access_audit_events"

    id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), primary_key=True)

    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    origin_address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[str | None] = mapped_column(String(256), nullable=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)

    method: Mapped[str] = mapped_column(String(32), nullable=False)
    result: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    reason_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (Index("ix_access_audit_result_occurred", "result", "occurred_at"),)


# --- Module Notes -----------------------------------------------------------
# Audit rows are keyed by the in-memory record id so a record written twice
# (e.g. operator replay) collides instead of duplicating.
