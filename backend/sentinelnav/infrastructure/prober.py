"""HTTP Prober — decides whether a URL is reachable within a time budget.

Invariants:
    - HEAD first; on timeout, transport error or non-2xx, exactly one GET fallback
    - Each request is hard-cancelled at the budget (asyncio.wait_for aborts the request)
    - online only for a 2xx response; latency_ms is the duration of THAT request
    - Never raises for network failures: they become ProbeResult(offline, None)
    - No shared mutable state between concurrent probes (the client pool is thread-safe)

Design Decisions:
    - Response bodies are never read: stream=True and close after the status line
    - Redirects followed so a 301 → 200 chain counts as online
"""

import asyncio
import logging
import time
from dataclasses import dataclass

import httpx

from sentinelnav.core.domain_types import SiteStatus, DEFAULT_PROBE_TIMEOUT_MS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    status: SiteStatus
    latency_ms: int | None = None
    status_code: int | None = None


@dataclass(frozen=True)
class _Attempt:
    status_code: int | None
    elapsed_ms: int

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


class HttpProber:
    """Reachability checks over one shared httpx.AsyncClient."""

    def __init__(
        self,
        timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
        user_agent: str = "Mozilla/5.0 (compatible; SentinelNav/1.0)",
        client: httpx.AsyncClient | None = None,
    ):
        self.timeout_ms = timeout_ms
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout_ms / 1000,
        )
        self._headers = {"User-Agent": user_agent}

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def probe(self, url: str, timeout_ms: int | None = None) -> ProbeResult:
        budget_ms = timeout_ms or self.timeout_ms
        head = await self._attempt("HEAD", url, budget_ms)
        if head.ok:
            return self._online(url, head)

        get = await self._attempt("GET", url, budget_ms)
        if get.ok:
            return self._online(url, get)

        status_code = get.status_code or head.status_code
        logger.info(
            "Probe offline",
            extra={"url": url, "status_code": status_code},
        )
        return ProbeResult(SiteStatus.OFFLINE, None, status_code)

    def _online(self, url: str, attempt: _Attempt) -> ProbeResult:
        logger.debug(
            "Probe online",
            extra={"url": url, "status_code": attempt.status_code, "latency_ms": attempt.elapsed_ms},
        )
        return ProbeResult(SiteStatus.ONLINE, attempt.elapsed_ms, attempt.status_code)

    async def _attempt(self, method: str, url: str, budget_ms: int) -> _Attempt:
        started = time.perf_counter()
        try:
            status_code = await asyncio.wait_for(
                self._send(method, url), timeout=budget_ms / 1000,
            )
        except asyncio.TimeoutError:
            logger.debug(f"{method} timed out", extra={"url": url})
            status_code = None
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.debug(f"{method} failed: {e}", extra={"url": url})
            status_code = None
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return _Attempt(status_code, elapsed_ms)

    async def _send(self, method: str, url: str) -> int:
        request = self._client.build_request(method, url, headers=self._headers)
        response = await self._client.send(request, stream=True)
        await response.aclose()
        return response.status_code
