"""
family_access.admin.service

Allowlist administration.

Responsibilities:
- Expose get/replace/add/remove over the allowlist store for privileged callers.
- Require the caller to pass the full dual-factor decision for every operation.
- Apply the provisioning-time bootstrap set exactly once.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import datetime

from family_access.access.engine import AccessDecisionEngine
from family_access.access.models import AccessDecision
from family_access.allowlist.origins import validate_origins
from family_access.allowlist.store import AllowlistSnapshot, AllowlistStore
from family_access.errors import AccessDeniedError
from family_access.observability.logging import get_logger

log = get_logger(__name__)


class AllowlistAdministration:
    def __init__(self, *, engine: AccessDecisionEngine, store: AllowlistStore) -> None:
        self._engine = engine
        self._store = store
        # Serializes read-modify-write for add/remove within this process.
        self._edit_lock = asyncio.Lock()

    async def _authorize(self, origin_address: str, credential: str | None) -> AccessDecision:
        decision = await self._engine.evaluate(origin_address, credential)
        if not decision.authorized:
            raise AccessDeniedError(decision)
        return decision

    async def get_allowlist(self, origin_address: str, credential: str | None) -> AllowlistSnapshot:
        await self._authorize(origin_address, credential)
        return await self._store.get()

    async def set_allowlist(
        self,
        origin_address: str,
        credential: str | None,
        origins: Iterable[str],
    ) -> datetime:
        decision = await self._authorize(origin_address, credential)
        origins = list(origins)
        async with self._edit_lock:
            updated_at = await self._store.replace(origins)
        log.info(
            "allowlist_updated",
            operation="replace",
            actor=decision.subject_id,
            allowed_origin_count=len(set(origins)),
        )
        return updated_at

    async def add_origin(
        self, origin_address: str, credential: str | None, origin: str
    ) -> datetime | None:
        decision = await self._authorize(origin_address, credential)
        (normalized,) = validate_origins([origin])
        async with self._edit_lock:
            current = await self._store.get()
            if normalized in current.origins:
                return current.updated_at
            updated_at = await self._store.replace(current.origins | {normalized})
        log.info("allowlist_updated", operation="add", actor=decision.subject_id, origin=normalized)
        return updated_at

    async def remove_origin(
        self, origin_address: str, credential: str | None, origin: str
    ) -> datetime | None:
        decision = await self._authorize(origin_address, credential)
        (normalized,) = validate_origins([origin])
        async with self._edit_lock:
            current = await self._store.get()
            if normalized not in current.origins:
                return current.updated_at
            updated_at = await self._store.replace(current.origins - {normalized})
        log.info(
            "allowlist_updated", operation="remove", actor=decision.subject_id, origin=normalized
        )
        return updated_at


async def bootstrap_allowlist(store: AllowlistStore, origins: Iterable[str]) -> datetime | None:
    """
    Trusted provisioning path: seed the allowlist if it has never been set.

    An existing allowlist is never overwritten, and an empty seed is skipped so the
    store stays in its fail-closed "never set" state.
    """

    seed = validate_origins(origins)
    if not seed:
        return None
    current = await store.get()
    if current.updated_at is not None:
        log.info("allowlist_bootstrap_skipped", reason="already_configured")
        return None
    updated_at = await store.replace(seed)
    log.info("allowlist_bootstrapped", allowed_origin_count=len(seed))
    return updated_at
