# seo_auditor/probe.py
"""
Best-effort existence checks for well-known static paths.

A HEAD request that ends (after redirects) in 200 means the path exists.
Anything else, including network and TLS failures, means it does not.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict
from urllib.parse import urlparse

import httpx

from seo_auditor.cache import CacheConfig, ProbeCache

log = logging.getLogger(__name__)


def well_known_urls(page_url: str) -> tuple[str, str]:
    """(robots.txt URL, sitemap.xml URL) at the root of the page's origin."""
    parsed = urlparse(page_url)
    base = f"{parsed.scheme}://{parsed.netloc}"
    return f"{base}/robots.txt", f"{base}/sitemap.xml"


@dataclass
class UrlProber:
    """
    Async context manager owning one httpx client for the probes of an audit.

    Config keys consumed:
      - probe_timeout: float (seconds)
      - probe_verify_tls: bool
      - user_agent: str
      - cache: {enabled, directory, expire_seconds}
    """

    config: Dict[str, Any]
    transport: httpx.AsyncBaseTransport | None = None

    _client: httpx.AsyncClient = field(init=False, repr=False)
    _cache: ProbeCache | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> "UrlProber":
        cache_cfg_raw = self.config.get("cache") or {}
        if cache_cfg_raw.get("enabled", False):
            self._cache = ProbeCache(
                CacheConfig(
                    enabled=True,
                    directory=str(cache_cfg_raw.get("directory", ".seo_auditor_cache")),
                    expire_seconds=int(cache_cfg_raw.get("expire_seconds", 6 * 3600)),
                )
            )

        headers = {}
        if self.config.get("user_agent"):
            headers["User-Agent"] = self.config["user_agent"]
        self._client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.config.get("probe_timeout", 5.0),
            verify=self.config.get("probe_verify_tls", False),
            headers=headers,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.aclose()
        if self._cache is not None:
            self._cache.close()

    async def exists(self, url: str) -> bool:
        if self._cache is not None:
            hit = self._cache.get(url)
            if hit is not None:
                log.debug("Probe cache hit for %s: %s", url, hit)
                return bool(hit.get("exists"))

        status: int | None = None
        try:
            resp = await self._client.head(url)
            status = resp.status_code
        except httpx.HTTPError as e:
            log.info("Probe of %s failed: %s", url, e)

        found = status == 200
        log.info("Probe %s -> %s (%s)", url, "found" if found else "missing", status)
        if self._cache is not None:
            self._cache.set_probe(url, exists=found, status=status)
        return found

    async def probe_well_known(self, page_url: str) -> tuple[bool, bool]:
        """Probe robots.txt and sitemap.xml concurrently."""
        robots_url, sitemap_url = well_known_urls(page_url)
        has_robots, has_sitemap = await asyncio.gather(
            self.exists(robots_url), self.exists(sitemap_url)
        )
        return has_robots, has_sitemap
