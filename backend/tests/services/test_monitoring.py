"""Monitoring orchestrator tests — checks, sweeps, live status and persistence.

Invariants:
    - Checks report results but never write to the store by themselves
    - A sweep probes every site once and survives per-site callback failures
    - The live map shows CHECKING while a probe is in flight
"""

import asyncio

import pytest

from sentinelnav.core.domain_types import SiteStatus
from sentinelnav.core.errors import NotFoundError, StoreUnavailableError
from sentinelnav.infrastructure.prober import ProbeResult
from sentinelnav.services.monitoring import CheckReport, persist_report

async def test_check_url_normalizes_before_probing(orchestrator, prober):
    result = await orchestrator.check_url("example.com")
    assert prober.calls == ["https://example.com"]
    assert result.status == SiteStatus.ONLINE


async def test_check_site_reports_without_persisting(orchestrator, store, prober, now_ms):
    site = await store.create_site({"title": "A", "url": "a.com"})
    prober.results["https://a.com"] = ProbeResult(SiteStatus.OFFLINE, None, 500)

    report = await orchestrator.check_site(site)

    assert report == CheckReport(
        site_id=site.id, url="https://a.com", status=SiteStatus.OFFLINE,
        last_checked=now_ms, latency_ms=None, status_code=500,
    )
    [stored] = await store.list_sites()
    assert stored.status == SiteStatus.UNKNOWN


async def test_live_status_shows_checking_while_in_flight(orchestrator, store, prober):
    site = await store.create_site({"title": "A", "url": "a.com"})
    prober.gate = asyncio.Event()

    task = asyncio.create_task(orchestrator.check_site(site))
    await asyncio.sleep(0)
    [live] = orchestrator.live_reports()
    assert live.status == SiteStatus.CHECKING

    prober.gate.set()
    await task
    [live] = orchestrator.live_reports()
    assert live.status == SiteStatus.ONLINE


async def test_check_unknown_site_raises_not_found(orchestrator):
    with pytest.raises(NotFoundError):
        await orchestrator.check_site_by_id("nope")


async def test_sweep_probes_every_site_once(orchestrator, store, prober):
    for name in ("a", "b", "c"):
        await store.create_site({"title": name, "url": f"{name}.com"})

    reports = await orchestrator.sweep()

    assert sorted(prober.calls) == ["https://a.com", "https://b.com", "https://c.com"]
    assert len(reports) == 3


async def test_sweep_runs_probes_concurrently(orchestrator, store, prober):
    for name in ("a", "b"):
        await store.create_site({"title": name, "url": f"{name}.com"})
    prober.gate = asyncio.Event()

    task = asyncio.create_task(orchestrator.sweep())
    await asyncio.sleep(0.01)
    assert len(prober.calls) == 2
    prober.gate.set()
    await task


async def test_sweep_callback_failure_does_not_stop_others(orchestrator, store):
    a = await store.create_site({"title": "A", "url": "a.com"})
    b = await store.create_site({"title": "B", "url": "b.com"})
    recorded = []

    async def on_report(report):
        if report.site_id == a.id:
            raise StoreUnavailableError("disk full", "write", "file")
        recorded.append(report.site_id)

    reports = await orchestrator.sweep(on_report)

    assert len(reports) == 2
    assert recorded == [b.id]


async def test_sweep_prunes_vanished_sites_from_live_status(orchestrator, store):
    a = await store.create_site({"title": "A", "url": "a.com"})
    b = await store.create_site({"title": "B", "url": "b.com"})
    await orchestrator.sweep()
    await store.delete_site(a.id)

    await orchestrator.sweep()

    assert [r.site_id for r in orchestrator.live_reports()] == [b.id]


async def test_persist_report_writes_result(store, orchestrator, now_ms):
    site = await store.create_site({"title": "A", "url": "a.com"})
    report = await orchestrator.check_site(site)

    assert await persist_report(store, report) is True

    [stored] = await store.list_sites()
    assert stored.status == SiteStatus.ONLINE
    assert stored.last_checked == now_ms
    assert stored.latency == 10
    assert stored.title == site.title


async def test_persist_report_keeps_previous_latency_when_offline(store, orchestrator, prober):
    site = await store.create_site({"title": "A", "url": "a.com"})
    await persist_report(store, await orchestrator.check_site(site))
    prober.results["https://a.com"] = ProbeResult(SiteStatus.OFFLINE)

    await persist_report(store, await orchestrator.check_site(site))

    [stored] = await store.list_sites()
    assert stored.status == SiteStatus.OFFLINE
    assert stored.latency == 10


async def test_persist_report_for_deleted_site_returns_false(store, orchestrator):
    site = await store.create_site({"title": "A", "url": "a.com"})
    report = await orchestrator.check_site(site)
    await store.delete_site(site.id)

    assert await persist_report(store, report) is False
    assert await store.list_sites() == []
