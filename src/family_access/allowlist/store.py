"""
family_access.allowlist.store

Allowlist store boundary and the in-memory implementation.

Responsibilities:
- Define the `AllowlistStore` protocol consumed by the decision engine and administration.
- Provide `AllowlistSnapshot`, the immutable view returned by `get()`.
- Provide an in-memory store whose `replace` is atomic w.r.t. concurrent readers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from family_access.allowlist.origins import normalize_origin, validate_origins


@dataclass(frozen=True, slots=True)
class AllowlistSnapshot:
    origins: frozenset[str]
    # None means the allowlist was never set; callers treat that as "nothing allowed".
    updated_at: datetime | None = None

    def allows(self, origin_address: str) -> bool:
        origin = normalize_origin(origin_address)
        return origin is not None and origin in self.origins


EMPTY_SNAPSHOT = AllowlistSnapshot(origins=frozenset())


class AllowlistStore(Protocol):
    async def get(self) -> AllowlistSnapshot: ...

    async def replace(self, origins: Iterable[str]) -> datetime: ...


class InMemoryAllowlistStore:
    """
    Holds one immutable snapshot; `replace` swaps the reference under a lock.
    Readers never lock: they see the old or the new snapshot, never a mix.
    """

    def __init__(self, origins: Iterable[str] | None = None) -> None:
        self._snapshot = EMPTY_SNAPSHOT
        if origins is not None:
            self._snapshot = AllowlistSnapshot(
                origins=validate_origins(origins), updated_at=datetime.now(tz=UTC)
            )
        self._lock = asyncio.Lock()

    async def get(self) -> AllowlistSnapshot:
        return self._snapshot

    async def replace(self, origins: Iterable[str]) -> datetime:
        # Validate before taking the lock so malformed input never touches state.
        validated = validate_origins(origins)
        async with self._lock:
            updated_at = datetime.now(tz=UTC)
            self._snapshot = AllowlistSnapshot(origins=validated, updated_at=updated_at)
        return updated_at
