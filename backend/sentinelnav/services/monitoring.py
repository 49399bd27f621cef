"""Monitoring Orchestrator — bridges the store and the prober for checks and sweeps.

Invariants:
    - A check publishes an ephemeral CHECKING report, probes, then publishes the result
    - Check results are reports, not store writes: persisting is the caller's choice
      (persist_report), so anonymous viewers can trigger checks
    - A sweep reads list_sites() once, then probes every site concurrently
      (one task per site); per-site failures never affect other sites
    - Concurrent checks of the same site all run; the last one to finish wins

Design Decisions:
    - Live reports held in a per-process dict keyed by site id; pruned on each sweep
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sentinelnav.core.domain_types import SiteStatus
from sentinelnav.core.entities import Site
from sentinelnav.core.errors import NotFoundError, SentinelError
from sentinelnav.core.site_rules import normalize_url
from sentinelnav.core.store_protocol import PersistenceStore
from sentinelnav.infrastructure.prober import HttpProber, ProbeResult

logger = logging.getLogger(__name__)

ReportCallback = Callable[["CheckReport"], Awaitable[object]]


@dataclass(frozen=True)
class CheckReport:
    site_id: str
    url: str
    status: SiteStatus
    last_checked: int
    latency_ms: int | None = None
    status_code: int | None = None


def _now_ms() -> int:
    return int(time.time() * 1000)


class MonitoringOrchestrator:
    """Runs per-site checks and full sweeps."""

    def __init__(
        self,
        store: PersistenceStore,
        prober: HttpProber,
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store
        self._prober = prober
        self._clock = clock
        self._live: dict[str, CheckReport] = {}

    def live_reports(self) -> list[CheckReport]:
        return list(self._live.values())

    async def check_url(self, url: str) -> ProbeResult:
        """Probe an ad-hoc URL (not necessarily a stored site)."""
        return await self._prober.probe(normalize_url(url))

    async def check_site(self, site: Site) -> CheckReport:
        self._live[site.id] = CheckReport(
            site_id=site.id,
            url=site.url,
            status=SiteStatus.CHECKING,
            last_checked=site.last_checked,
            latency_ms=site.latency,
        )
        result = await self._prober.probe(site.url)
        report = CheckReport(
            site_id=site.id,
            url=site.url,
            status=result.status,
            last_checked=self._clock(),
            latency_ms=result.latency_ms,
            status_code=result.status_code,
        )
        self._live[site.id] = report
        return report

    async def check_site_by_id(self, site_id: str) -> CheckReport:
        for site in await self._store.list_sites():
            if site.id == site_id:
                return await self.check_site(site)
        raise NotFoundError("Site", site_id)

    async def sweep(self, on_report: ReportCallback | None = None) -> list[CheckReport]:
        sites = await self._store.list_sites()
        present = {s.id for s in sites}
        for stale in set(self._live) - present:
            self._live.pop(stale, None)

        reports = await asyncio.gather(
            *(self._check_and_report(site, on_report) for site in sites),
        )
        online = sum(1 for r in reports if r.status == SiteStatus.ONLINE)
        logger.info(
            f"Sweep finished: {online}/{len(reports)} online",
            extra={"site_count": len(reports)},
        )
        return list(reports)

    async def _check_and_report(
        self, site: Site, on_report: ReportCallback | None,
    ) -> CheckReport:
        report = await self.check_site(site)
        if on_report is not None:
            try:
                await on_report(report)
            except SentinelError as e:
                logger.error(
                    f"Failed to record check result: {e.message}",
                    extra={"site_id": site.id, "error_code": e.code},
                )
        return report


async def persist_report(store: PersistenceStore, report: CheckReport) -> bool:
    """Write a check result back to the store; False if the site is gone."""
    updates: dict[str, object] = {
        "status": report.status,
        "last_checked": report.last_checked,
    }
    if report.latency_ms is not None:
        updates["latency"] = report.latency_ms
    saved = await store.update_site(report.site_id, updates)
    if not saved:
        logger.info("Site removed before its result was saved", extra={"site_id": report.site_id})
    return saved
