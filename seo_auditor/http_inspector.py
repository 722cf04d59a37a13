# seo_auditor/http_inspector.py
"""
HTTPX-based page inspector (no JavaScript execution).

Fetches the raw HTML with redirects and a timeout, then extracts the same
signals as the browser inspector. What only a browser can measure is
absent: no computed font size (scored as unmeasurable) and no Web Vitals.
Load time is the elapsed time of the GET.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx

from seo_auditor.errors import NavigationError, NavigationTimeout
from seo_auditor.models import PageSignals
from seo_auditor.probe import UrlProber
from seo_auditor.signals import extract_signals

log = logging.getLogger(__name__)


@dataclass
class PageInspector:
    """
    Config keys consumed:
      - user_agent: str
      - navigation_timeout: float (seconds)
      - use_registrable_domain: bool
      - probe_* and cache: see probe.py
    """

    config: Dict[str, Any]
    transport: httpx.AsyncBaseTransport | None = None

    _client: httpx.AsyncClient = field(init=False, repr=False)

    async def __aenter__(self) -> "PageInspector":
        headers = {}
        if self.config.get("user_agent"):
            headers["User-Agent"] = self.config["user_agent"]
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.config.get("navigation_timeout", 30.0),
            headers=headers,
            transport=self.transport,
        )
        log.info("httpx session initialized.")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.aclose()
        log.info("httpx session closed.")

    async def _fetch(self, url: str) -> tuple[httpx.Response, float]:
        started = time.perf_counter()
        try:
            resp = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise NavigationTimeout(url, f"Timed out: {e}") from e
        except httpx.HTTPError as e:
            raise NavigationError(url, f"Could not fetch page: {e}") from e
        elapsed_ms = (time.perf_counter() - started) * 1000

        if resp.status_code >= 400:
            log.warning("URL returned error status: %s (%d)", url, resp.status_code)
        ctype = resp.headers.get("content-type", "").lower()
        if ctype and "html" not in ctype:
            raise NavigationError(url, f"Not an HTML document ({ctype})")
        return resp, elapsed_ms

    async def load(self, url: str) -> PageSignals:
        resp, load_time_ms = await self._fetch(url)
        log.info("Fetched %s in %.0f ms (status %d).", url, load_time_ms, resp.status_code)

        async with UrlProber(self.config, transport=self.transport) as prober:
            has_robots, has_sitemap = await prober.probe_well_known(url)

        return extract_signals(
            resp.text,
            url,
            load_time_ms=load_time_ms,
            has_robots_txt=has_robots,
            has_sitemap=has_sitemap,
            status_code=resp.status_code,
            use_registrable_domain=self.config.get("use_registrable_domain", False),
        )
