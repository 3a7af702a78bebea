"""
tests.conftest

Shared fixtures: in-memory collaborators for the access decision engine.
"""

from __future__ import annotations

import asyncio

import pytest

from family_access.access.engine import AccessDecisionEngine
from family_access.allowlist.store import InMemoryAllowlistStore
from family_access.audit.logger import AuditLogger
from family_access.audit.sinks import InMemoryAuditSink
from family_access.identity.models import IdentityAssertion

ALLOWED_ORIGIN = "203.0.113.5"
OTHER_ORIGIN = "198.51.100.9"


class FakeVerifier:
    """
    Test double for the identity provider: returns `outcome` (or raises it) and
    records every credential it was asked about.
    """

    def __init__(
        self,
        outcome: IdentityAssertion | Exception,
        *,
        delay: float = 0.0,
    ) -> None:
        self.outcome = outcome
        self.delay = delay
        self.calls: list[str] = []

    async def verify(self, credential: str) -> IdentityAssertion:
        self.calls.append(credential)
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.fixture
def store() -> InMemoryAllowlistStore:
    return InMemoryAllowlistStore([ALLOWED_ORIGIN])


@pytest.fixture
def sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def audit(sink: InMemoryAuditSink) -> AuditLogger:
    return AuditLogger(sink, write_timeout=1.0)


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier(IdentityAssertion(subject_id="user-123", display_name="Alex"))


@pytest.fixture
def engine(
    store: InMemoryAllowlistStore, verifier: FakeVerifier, audit: AuditLogger
) -> AccessDecisionEngine:
    return AccessDecisionEngine(store=store, verifier=verifier, audit=audit, verify_timeout=0.5)
