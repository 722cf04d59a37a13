# seo_auditor/api.py
# The primary, programmer-facing API for the library.

from __future__ import annotations

import logging
from datetime import datetime, timezone

from seo_auditor.config import RENDERERS, load_config
from seo_auditor.grading import build_recommendations, grade_for, overall_score
from seo_auditor.http_inspector import PageInspector as HttpxInspector
from seo_auditor.models import AuditResult, PageSignals
from seo_auditor.performance import score_performance
from seo_auditor.playwright_inspector import PageInspector as PlaywrightInspector
from seo_auditor.scoring import (
    score_content_quality,
    score_link_structure,
    score_on_page,
    score_schema_markup,
    score_security,
    score_technical,
    score_user_experience,
)

log = logging.getLogger(__name__)


def audit_signals(
    signals: PageSignals,
    *,
    url: str | None = None,
    timestamp: datetime | None = None,
) -> AuditResult:
    """
    Score an already-extracted page. Pure apart from the default timestamp:
    the same signals always give the same categories, score, grade and
    recommendations.

    Args:
        signals: The page snapshot produced by an inspector.
        url: The audited URL; defaults to signals.url.
        timestamp: When the audit ran; defaults to now (UTC).
    """
    technical = score_technical(signals)
    on_page = score_on_page(signals)
    content = score_content_quality(signals)
    links = score_link_structure(signals)
    schema = score_schema_markup(signals)
    security = score_security(signals)
    ux = score_user_experience(signals)
    performance = (
        score_performance(signals.performance) if signals.performance is not None else None
    )

    overall = overall_score(technical, on_page, content, links, schema, security, ux)
    ordered = [technical, on_page, content, links, schema, security, ux]
    if performance is not None:
        ordered.append(performance)
    recommendations = build_recommendations(
        ordered,
        technical_score=technical.score,
        is_https=security.is_https,
        has_title=on_page.has_title,
    )
    log.debug("Overall score %.2f from %d categories.", overall, len(ordered))

    return AuditResult(
        url=url if url is not None else signals.url,
        timestamp=timestamp or datetime.now(timezone.utc),
        technical_seo=technical,
        on_page_seo=on_page,
        content_quality=content,
        link_structure=links,
        schema_markup=schema,
        security=security,
        user_experience=ux,
        performance=performance,
        overall_score=overall,
        grade=grade_for(overall),
        recommendations=recommendations,
    )


async def audit_url(
    url: str,
    *,
    renderer: str | None = None,
    collect_performance: bool | None = None,
    navigation_timeout: float | None = None,
) -> AuditResult:
    """
    The main API function. Loads the page, extracts signals and scores them.

    Args:
        url: The page to audit.
        renderer: "playwright" (default) or "httpx".
        collect_performance: Override whether Web Vitals are measured.
        navigation_timeout: Override the navigation timeout in seconds.

    Returns:
        An AuditResult.

    Raises:
        NavigationError, NavigationTimeout: the page could not be loaded.
    """
    log.info("Starting audit for: %s", url)

    config = load_config()
    log.debug("Loaded base configuration.")

    if renderer is not None:
        if renderer not in RENDERERS:
            raise ValueError(f"Unknown renderer {renderer!r}; expected one of {RENDERERS}")
        config["renderer"] = renderer
        log.info("Applied override - renderer set to: %s", renderer)
    if collect_performance is not None:
        config["collect_performance"] = collect_performance
        log.info("Applied override - collect_performance set to: %s", collect_performance)
    if navigation_timeout is not None:
        config["navigation_timeout"] = navigation_timeout
        log.info("Applied override - navigation_timeout set to: %.1f", navigation_timeout)

    log.info("Step 1: Inspecting page with %s.", config["renderer"])
    if config["renderer"] == "httpx":
        async with HttpxInspector(config) as inspector:
            signals = await inspector.load(url)
    else:
        async with PlaywrightInspector(config) as inspector:
            signals = await inspector.load(url)

    log.info("Step 2: Scoring categories.")
    result = audit_signals(signals, url=url)
    log.info("Audit complete. Overall score: %.2f (%s)", result.overall_score, result.grade)
    return result
