"""
family_access.audit.logger

Non-blocking audit logger fed by the access decision engine.

Responsibilities:
- Build exactly one `AuditRecord` per decision, with the credential redacted everywhere.
- Hand records to a background worker through a bounded queue.
- Count and log sink failures without ever failing the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import datetime

from family_access.access.models import AccessDecision
from family_access.audit.models import AuditRecord, AuditResult
from family_access.audit.redaction import redact
from family_access.audit.sinks import AuditSink
from family_access.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(slots=True)
class AuditStats:
    emitted: int = 0
    written: int = 0
    failed: int = 0
    dropped: int = 0


class AuditLogger:
    """
    `record()` is synchronous and never raises because of the sink: the decision
    path only pays for building the record and a queue put.
    """

    def __init__(
        self,
        sink: AuditSink,
        *,
        queue_size: int = 1000,
        write_timeout: float = 2.0,
    ) -> None:
        self._sink = sink
        self._queue_size = queue_size
        self._write_timeout = write_timeout
        self._queue: asyncio.Queue[AuditRecord] | None = None
        self._worker: asyncio.Task[None] | None = None
        self.stats = AuditStats()

    def record(
        self,
        decision: AccessDecision,
        *,
        origin_address: str,
        timestamp: datetime,
        credential: str | None = None,
        detail: str | None = None,
    ) -> AuditRecord:
        record = AuditRecord(
            timestamp=timestamp,
            origin_address=origin_address,
            method=decision.method,
            result=AuditResult.success if decision.authorized else AuditResult.failure,
            reason_code=decision.reason_code.value if decision.reason_code else None,
            subject_id=decision.subject_id,
            display_name=decision.display_name,
            # Only free text is scrubbed; structured fields are kept verbatim.
            detail=redact(detail, credential),
        )
        self.stats.emitted += 1
        self._enqueue(record)
        return record

    def _enqueue(self, record: AuditRecord) -> None:
        queue = self._ensure_worker()
        try:
            queue.put_nowait(record)
        except asyncio.QueueFull:
            self.stats.dropped += 1
            log.error(
                "audit_record_dropped",
                record_id=str(record.record_id),
                reason_code=record.reason_code,
                queue_size=self._queue_size,
            )

    def _ensure_worker(self) -> asyncio.Queue[AuditRecord]:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._queue_size)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._drain(self._queue), name="audit-writer"
            )
        return self._queue

    async def _drain(self, queue: asyncio.Queue[AuditRecord]) -> None:
        while True:
            record = await queue.get()
            try:
                await self._write(record)
            finally:
                queue.task_done()

    async def _write(self, record: AuditRecord) -> None:
        try:
            async with asyncio.timeout(self._write_timeout):
                await self._sink.append(record)
        except TimeoutError:
            self.stats.failed += 1
            log.error("audit_sink_failed", record_id=str(record.record_id), error_kind="timeout")
        except Exception as e:
            # Secondary signal only: the decision has already been returned.
            self.stats.failed += 1
            log.error(
                "audit_sink_failed",
                record_id=str(record.record_id),
                error_kind=type(e).__name__,
            )
        else:
            self.stats.written += 1

    async def flush(self) -> None:
        if self._queue is not None:
            await self._queue.join()

    async def aclose(self) -> None:
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None


# --- Module Notes -----------------------------------------------------------
# Sink exception text is not logged: providers and drivers may echo request data.
