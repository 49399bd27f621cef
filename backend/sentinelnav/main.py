"""SentinelNav API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SentinelError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store, token issuer, prober and orchestrator built once in the lifespan
      and shared through app.state

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - The sweep scheduler lives in the same event loop as the API, so the
      in-process live status is shared between scheduled and on-demand checks
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sentinelnav.api.error_handlers import register_error_handlers
from sentinelnav.api.routes import auth, captcha, categories, health, monitor, sites, theme
from sentinelnav.config import Settings, get_settings
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.core.tokens import TokenIssuer
from sentinelnav.infrastructure.observability import setup_logging
from sentinelnav.infrastructure.prober import HttpProber
from sentinelnav.infrastructure.scheduler import SweepScheduler
from sentinelnav.infrastructure.stores import create_store
from sentinelnav.services.monitoring import MonitoringOrchestrator, persist_report

logger = logging.getLogger(__name__)


def _sweep_job(
    orchestrator: MonitoringOrchestrator, store: PersistenceStore, persist: bool,
):
    async def on_report(report):
        await persist_report(store, report)

    async def run_sweep():
        await orchestrator.sweep(on_report if persist else None)

    return run_sweep


def _build_scheduler(
    settings: Settings, orchestrator: MonitoringOrchestrator, store: PersistenceStore,
) -> SweepScheduler | None:
    if not settings.sweep_enabled:
        logger.info("Scheduled sweeps disabled")
        return None
    return SweepScheduler(
        _sweep_job(orchestrator, store, settings.sweep_persist_results),
        interval_seconds=settings.sweep_interval_seconds,
        max_instances=settings.sweep_max_instances,
        run_on_startup=settings.sweep_run_on_startup,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if not settings.admin_password_hash:
        logger.warning("ADMIN_PASSWORD_HASH is not set: administrator login is disabled")

    store = await create_store(settings)
    prober = HttpProber(
        timeout_ms=settings.probe_timeout_ms,
        user_agent=settings.probe_user_agent,
    )
    orchestrator = MonitoringOrchestrator(store, prober)
    app.state.store = store
    app.state.prober = prober
    app.state.orchestrator = orchestrator
    app.state.token_issuer = TokenIssuer(
        settings.session_secret, settings.challenge_secret,
    )

    scheduler = _build_scheduler(settings, orchestrator, store)
    if scheduler is not None:
        scheduler.start()
    logger.info("SentinelNav API started", extra={"backend": store.backend_name})
    try:
        yield
    finally:
        logger.info("SentinelNav API shutting down")
        if scheduler is not None:
            scheduler.shutdown()
        await prober.close()
        await store.close()


app = FastAPI(
    title="SentinelNav API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(sites.router)
app.include_router(categories.router)
app.include_router(theme.router)
app.include_router(monitor.router)
app.include_router(captcha.router)
app.include_router(auth.router)

register_error_handlers(app)

# Static files: the frontend build, when present
# Mounted AFTER API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
