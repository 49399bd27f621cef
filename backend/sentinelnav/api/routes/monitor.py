"""Monitor Routes — ad-hoc probes, per-site checks, sweeps and live status.

Invariants:
    - Probing is public; results are only written back when ?persist=true,
      and that requires a session
    - POST /sweep checks everything but persists nothing
"""

import logging

from fastapi import APIRouter, Depends, Query

from sentinelnav.api.dependencies import (
    get_orchestrator, get_store, optional_session,
)
from sentinelnav.core.errors import UnauthorizedError
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.core.tokens import SessionClaims
from sentinelnav.schemas.monitor import CheckReportResponse, ProbeRequest, ProbeResponse
from sentinelnav.services.monitoring import MonitoringOrchestrator, persist_report

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/monitor", tags=["monitor"])


@router.post("/check", response_model=ProbeResponse)
async def check_url(
    body: ProbeRequest,
    orchestrator: MonitoringOrchestrator = Depends(get_orchestrator),
):
    return ProbeResponse.from_result(await orchestrator.check_url(body.url))


@router.post("/sites/{site_id}/check", response_model=CheckReportResponse)
async def check_site(
    site_id: str,
    persist: bool = Query(False),
    claims: SessionClaims | None = Depends(optional_session),
    orchestrator: MonitoringOrchestrator = Depends(get_orchestrator),
    store: PersistenceStore = Depends(get_store),
):
    if persist and claims is None:
        raise UnauthorizedError()
    report = await orchestrator.check_site_by_id(site_id)
    if persist:
        await persist_report(store, report)
    return CheckReportResponse.from_report(report)


@router.post("/sweep", response_model=list[CheckReportResponse])
async def sweep(orchestrator: MonitoringOrchestrator = Depends(get_orchestrator)):
    reports = await orchestrator.sweep()
    return [CheckReportResponse.from_report(r) for r in reports]


@router.get("/status", response_model=list[CheckReportResponse])
async def live_status(orchestrator: MonitoringOrchestrator = Depends(get_orchestrator)):
    """Most recent report per site seen by this process, including in-flight checks."""
    return [CheckReportResponse.from_report(r) for r in orchestrator.live_reports()]
