# seo_auditor/playwright_inspector.py
"""
Playwright-based page inspector.

Goals:
- Render the page in headless Chromium and wait for the network to go idle.
- Read only what a browser can know (inner text, computed font size, Web
  Vitals); every DOM count is taken from the rendered HTML by signals.py.
- Probe robots.txt / sitemap.xml alongside.

Config keys consumed:
  - user_agent: str
  - headless: bool
  - navigation_timeout: float (seconds)
  - wait_until: "load" | "domcontentloaded" | "networkidle" | "commit"
  - collect_performance: bool
  - vitals_settle_ms: int
  - use_registrable_domain: bool
  - probe_* and cache: see probe.py
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict

from playwright.async_api import Browser, Error as PlaywrightError
from playwright.async_api import Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from seo_auditor.errors import NavigationError, NavigationTimeout
from seo_auditor.models import PageSignals, PerformanceSignals
from seo_auditor.probe import UrlProber
from seo_auditor.signals import extract_signals, parse_performance_payload

log = logging.getLogger(__name__)

# Installed before any page script runs so buffered entries are observed.
VITALS_OBSERVER_SCRIPT = """
(() => {
  const vitals = { lcp: null, cls: 0, inp: null, attribution: {} };
  window.__seoAuditorVitals = vitals;
  const describe = (node) => {
    if (!node || !node.tagName) return null;
    let label = node.tagName.toLowerCase();
    if (node.id) return label + '#' + node.id;
    if (node.classList && node.classList.length) {
      label += '.' + Array.from(node.classList).slice(0, 2).join('.');
    }
    return label;
  };
  const observe = (type, callback, extra) => {
    try {
      new PerformanceObserver((list) => callback(list.getEntries()))
        .observe(Object.assign({ type: type, buffered: true }, extra || {}));
    } catch (e) { /* entry type unsupported */ }
  };
  observe('largest-contentful-paint', (entries) => {
    const last = entries[entries.length - 1];
    if (last) {
      vitals.lcp = last.startTime;
      vitals.attribution.lcp = describe(last.element);
    }
  });
  observe('layout-shift', (entries) => {
    for (const entry of entries) {
      if (entry.hadRecentInput) continue;
      vitals.cls += entry.value;
      const source = entry.sources && entry.sources[0];
      if (source && source.node) vitals.attribution.cls = describe(source.node);
    }
  });
  observe('event', (entries) => {
    for (const entry of entries) {
      if (!entry.interactionId) continue;
      if (vitals.inp === null || entry.duration > vitals.inp) {
        vitals.inp = entry.duration;
        vitals.attribution.inp = describe(entry.target);
      }
    }
  }, { durationThreshold: 16 });
})();
"""

COLLECT_VITALS_SCRIPT = """
() => {
  const v = window.__seoAuditorVitals || {};
  const nav = performance.getEntriesByType('navigation')[0] || null;
  const paint = performance.getEntriesByName('first-contentful-paint')[0] || null;
  const resources = performance.getEntriesByType('resource') || [];
  const transfer = resources.reduce((sum, r) => sum + (r.transferSize || 0), 0)
    + (nav ? (nav.transferSize || 0) : 0);
  return {
    lcp_ms: v.lcp === undefined ? null : v.lcp,
    fcp_ms: paint ? paint.startTime : null,
    cls: v.cls === undefined ? null : v.cls,
    inp_ms: v.inp === undefined ? null : v.inp,
    ttfb_ms: nav ? nav.responseStart : null,
    dom_content_loaded_ms: nav ? nav.domContentLoadedEventEnd : null,
    dom_complete_ms: nav ? nav.domComplete : null,
    transfer_bytes: transfer,
    resource_count: resources.length,
    attribution: v.attribution || {}
  };
}
"""

BODY_FONT_SIZE_SCRIPT = (
    "() => document.body ? window.getComputedStyle(document.body).fontSize : null"
)


@dataclass
class PageInspector:
    """
    Loads one page at a time in a shared headless browser.
    Each `load` uses a fresh page that is closed afterwards.
    """

    config: Dict[str, Any]

    # Playwright state
    _playwright: Playwright = field(init=False, repr=False)
    _browser: Browser = field(init=False, repr=False)

    async def __aenter__(self) -> "PageInspector":
        """Starts Playwright and launches Chromium."""
        log.info("Starting headless browser session...")
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.get("headless", True)
            )
        except PlaywrightError:
            await self._playwright.stop()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Tears down the browser cleanly."""
        log.info("Closing headless browser session...")
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
        log.info("Browser session closed.")

    async def _navigate(self, page: Page, url: str) -> tuple[int, float]:
        """Navigate and return (status code, elapsed milliseconds)."""
        timeout_ms = int(self.config.get("navigation_timeout", 30.0) * 1000)
        wait_until = self.config.get("wait_until", "networkidle")
        log.debug("Navigating to %s (wait_until=%s, timeout=%sms)...", url, wait_until, timeout_ms)

        started = time.perf_counter()
        try:
            response = await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(url, f"Timed out after {timeout_ms} ms") from e
        except PlaywrightError as e:
            raise NavigationError(url, f"Could not navigate to page: {e.message}") from e
        elapsed_ms = (time.perf_counter() - started) * 1000

        if response is None:
            raise NavigationError(url, "No response received")
        if response.status >= 400:
            log.warning("URL returned error status: %s (%d)", url, response.status)
        return response.status, elapsed_ms

    async def _content(self, page: Page, url: str) -> str:
        try:
            return await page.content()
        except PlaywrightError as e:
            # e.g. a client-side redirect destroyed the execution context
            raise NavigationError(url, f"Could not read rendered page: {e.message}") from e

    async def _font_size(self, page: Page) -> str | None:
        try:
            value = await page.evaluate(BODY_FONT_SIZE_SCRIPT)
        except PlaywrightError as e:
            log.info("Computed font size unavailable: %s", e.message)
            return None
        return value if isinstance(value, str) else None

    async def _body_text(self, page: Page) -> str:
        try:
            return await page.inner_text("body", timeout=5000)
        except PlaywrightError:
            log.info("Page has no readable <body>; treating text as empty.")
            return ""

    async def _performance(self, page: Page) -> PerformanceSignals | None:
        if not self.config.get("collect_performance", True):
            return None
        settle_ms = int(self.config.get("vitals_settle_ms", 500))
        if settle_ms > 0:
            await page.wait_for_timeout(settle_ms)
        try:
            raw = await page.evaluate(COLLECT_VITALS_SCRIPT)
        except PlaywrightError as e:
            log.warning("Web Vitals collection failed: %s", e.message)
            return None
        return parse_performance_payload(raw if isinstance(raw, dict) else None)

    async def load(self, url: str) -> PageSignals:
        """
        Render `url` and return its signals. Navigation failures are fatal
        (NavigationError / NavigationTimeout); nothing partial is returned.
        """
        context = await self._browser.new_context(
            user_agent=self.config.get("user_agent"),
        )
        try:
            page = await context.new_page()
            if self.config.get("collect_performance", True):
                await page.add_init_script(VITALS_OBSERVER_SCRIPT)

            status, load_time_ms = await self._navigate(page, url)
            log.info("Loaded %s in %.0f ms (status %d).", url, load_time_ms, status)

            html = await self._content(page, url)
            body_text = await self._body_text(page)
            font_size = await self._font_size(page)
            performance = await self._performance(page)
        finally:
            await context.close()

        async with UrlProber(self.config) as prober:
            has_robots, has_sitemap = await prober.probe_well_known(url)

        return extract_signals(
            html,
            url,
            load_time_ms=load_time_ms,
            body_text=body_text,
            font_size=font_size,
            has_robots_txt=has_robots,
            has_sitemap=has_sitemap,
            performance=performance,
            status_code=status,
            use_registrable_domain=self.config.get("use_registrable_domain", False),
        )
