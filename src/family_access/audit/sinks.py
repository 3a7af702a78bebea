"""
family_access.audit.sinks

Destinations for audit records.

Responsibilities:
- Define the append-only `AuditSink` protocol.
- Log-stream sink (one `SECURITY_AUDIT` JSON line per record).
- Database sink (append to `access_audit_events`).
- In-memory and fan-out sinks.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from family_access.audit.models import AuditRecord
from family_access.db.repositories.audit import AccessAuditRepo
from family_access.errors import AuditSinkError
from family_access.observability.logging import get_logger


class AuditSink(Protocol):
    async def append(self, record: AuditRecord) -> None: ...


class LogAuditSink:
    def __init__(
        self,
        logger_name: str = "family_access.security_audit",
        *,
        logger: Any | None = None,
    ) -> None:
        self._log = logger if logger is not None else get_logger(logger_name)

    async def append(self, record: AuditRecord) -> None:
        self._log.info("security_audit", event_type="SECURITY_AUDIT", **record.to_dict())


class SqlAuditSink:
    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(self, record: AuditRecord) -> None:
        async with self._session_factory() as session, session.begin():
            await AccessAuditRepo(session).add(record)


class InMemoryAuditSink:
    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    async def append(self, record: AuditRecord) -> None:
        self.records.append(record)


class FanoutAuditSink:
    """
    Writes each record to every sink; one failing sink does not starve the others.
    """

    def __init__(self, sinks: Sequence[AuditSink]) -> None:
        self._sinks = list(sinks)

    async def append(self, record: AuditRecord) -> None:
        failures: list[str] = []
        for sink in self._sinks:
            try:
                await sink.append(record)
            except Exception as e:
                failures.append(f"{type(sink).__name__}: {type(e).__name__}")
        if failures:
            raise AuditSinkError("; ".join(failures))
