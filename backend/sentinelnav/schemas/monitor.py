"""Monitor Schemas — probe requests and check reports.

Invariants:
    - Reports carry lastChecked in epoch milliseconds, like stored sites
"""

from pydantic import Field

from sentinelnav.core.domain_types import SiteStatus
from sentinelnav.infrastructure.prober import ProbeResult
from sentinelnav.schemas.base import CamelModel
from sentinelnav.services.monitoring import CheckReport


class ProbeRequest(CamelModel):
    url: str = Field(min_length=1, max_length=2048)


class ProbeResponse(CamelModel):
    status: SiteStatus
    latency_ms: int | None = None
    status_code: int | None = None

    @classmethod
    def from_result(cls, result: ProbeResult) -> "ProbeResponse":
        return cls(
            status=result.status,
            latency_ms=result.latency_ms,
            status_code=result.status_code,
        )


class CheckReportResponse(CamelModel):
    site_id: str
    url: str
    status: SiteStatus
    last_checked: int
    latency_ms: int | None = None
    status_code: int | None = None

    @classmethod
    def from_report(cls, report: CheckReport) -> "CheckReportResponse":
        return cls(
            site_id=report.site_id,
            url=report.url,
            status=report.status,
            last_checked=report.last_checked,
            latency_ms=report.latency_ms,
            status_code=report.status_code,
        )
