"""
family_access.api.app

FastAPI app factory for the Family Access Gate service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Compose the access components once (store, verifier, audit logger, engine, administration).
- Apply the one-time bootstrap allowlist and dispose shared resources on shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from family_access.access.engine import AccessDecisionEngine
from family_access.admin.service import AllowlistAdministration, bootstrap_allowlist
from family_access.allowlist.sql import SqlAllowlistStore
from family_access.allowlist.store import AllowlistStore
from family_access.api.errors import register_exception_handlers
from family_access.api.routers.allowlist import router as allowlist_router
from family_access.api.routers.auth import router as auth_router
from family_access.api.routers.dev_auth import router as dev_auth_router
from family_access.api.routers.health import router as health_router
from family_access.audit.logger import AuditLogger
from family_access.audit.sinks import AuditSink, FanoutAuditSink, LogAuditSink, SqlAuditSink
from family_access.db.init_db import init_db
from family_access.db.session import create_engine, create_sessionmaker
from family_access.identity.jwt import JwtConfig
from family_access.identity.verifier import (
    HttpIdentityVerifier,
    IdentityVerifier,
    JwtIdentityVerifier,
)
from family_access.observability.logging import configure_logging, get_logger
from family_access.observability.middleware import RequestContextMiddleware
from family_access.settings import Settings

log = get_logger(__name__)


def _needs_database(
    settings: Settings, store: AllowlistStore | None, audit_sink: AuditSink | None
) -> bool:
    return store is None or (audit_sink is None and "db" in settings.audit_sinks)


def _build_audit_sink(
    settings: Settings, sessionmaker: async_sessionmaker[AsyncSession] | None
) -> AuditSink:
    sinks: list[AuditSink] = []
    for name in dict.fromkeys(settings.audit_sinks):
        if name == "log":
            sinks.append(LogAuditSink())
        elif name == "db" and sessionmaker is not None:
            sinks.append(SqlAuditSink(session_factory=sessionmaker))
    if not sinks:
        # An audit trail is mandatory; fall back to the log stream.
        sinks.append(LogAuditSink())
    return sinks[0] if len(sinks) == 1 else FanoutAuditSink(sinks)


def create_app(
    *,
    settings: Settings,
    store: AllowlistStore | None = None,
    verifier: IdentityVerifier | None = None,
    audit_sink: AuditSink | None = None,
) -> FastAPI:
    """
    Components not passed in are built from `settings` at startup.
    Tests inject in-memory fakes for all three collaborators.
    """

    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        db_engine: AsyncEngine | None = None
        sessionmaker: async_sessionmaker[AsyncSession] | None = None
        if _needs_database(settings, store, audit_sink):
            db_engine = create_engine(settings)
            sessionmaker = create_sessionmaker(db_engine)
            if settings.env in ("dev", "test"):
                # Dev/test convenience: create tables automatically. Prod uses Alembic.
                await init_db(db_engine)

        http: httpx.AsyncClient | None = None
        resolved_verifier = verifier
        if resolved_verifier is None:
            if settings.identity_backend == "http":
                http = httpx.AsyncClient()
                resolved_verifier = HttpIdentityVerifier(
                    http=http,
                    userinfo_url=settings.identity_userinfo_url,
                    timeout_seconds=settings.identity_timeout_seconds,
                )
            else:
                resolved_verifier = JwtIdentityVerifier(cfg=JwtConfig.from_settings(settings))

        resolved_store = store
        if resolved_store is None:
            assert sessionmaker is not None
            resolved_store = SqlAllowlistStore(
                session_factory=sessionmaker, scope=settings.allowlist_scope
            )

        audit = AuditLogger(
            audit_sink or _build_audit_sink(settings, sessionmaker),
            queue_size=settings.audit_queue_size,
            write_timeout=settings.audit_write_timeout_seconds,
        )
        engine = AccessDecisionEngine(
            store=resolved_store,
            verifier=resolved_verifier,
            audit=audit,
            verify_timeout=settings.identity_timeout_seconds,
        )

        app.state.settings = settings
        app.state.store = resolved_store
        app.state.audit = audit
        app.state.engine = engine
        app.state.admin = AllowlistAdministration(engine=engine, store=resolved_store)

        if settings.bootstrap_allowed_origins:
            await bootstrap_allowlist(resolved_store, settings.bootstrap_allowed_origins)

        try:
            yield
        finally:
            # Drain pending audit records before closing the resources they write to.
            await audit.aclose()
            if http is not None:
                await http.aclose()
            if db_engine is not None:
                await db_engine.dispose()
            log.info("shutdown", audit_stats=str(audit.stats))

    app = FastAPI(
        title="Family Access Gate",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    # Set before startup too, so settings-only dependencies work in every phase.
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(allowlist_router)
    app.include_router(dev_auth_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; decision logic
# stays in `access.engine`.
