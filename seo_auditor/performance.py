# Optional Web-Vitals category. Reported next to the overall score, never inside it.

from __future__ import annotations

import logging
from typing import Callable

from seo_auditor.models import PerformanceResult, PerformanceSignals, Rating
from seo_auditor.ratings import rate_cls, rate_fcp, rate_inp, rate_lcp, rate_ttfb

log = logging.getLogger(__name__)

POINTS_PER_METRIC = 20
RATING_POINTS: dict[str, float] = {
    "good": 20,
    "needs-improvement": 12,
    "poor": 4,
}
MAX_RESOURCES = 100
MAX_TRANSFER_BYTES = 5 * 1024 * 1024

METRIC_NAMES = {
    "lcp": "Largest Contentful Paint",
    "fcp": "First Contentful Paint",
    "cls": "Cumulative Layout Shift",
    "inp": "Interaction to Next Paint",
    "ttfb": "Time to First Byte",
}


def _seconds(value: float) -> str:
    return f"{value / 1000:.2f} s"


def _millis(value: float) -> str:
    return f"{value:.0f} ms"


def _unitless(value: float) -> str:
    return f"{value:.3f}"


def _metric_issue(metric: str, rating: Rating, shown: str) -> str | None:
    if rating == "good":
        return None
    verdict = "needs improvement" if rating == "needs-improvement" else "is poor"
    return f"{METRIC_NAMES[metric]} {verdict} ({shown})"


def score_performance(perf: PerformanceSignals) -> PerformanceResult:
    """
    Score each captured metric at 20/12/4 points by rating, then rescale to
    100 over the metrics that were actually captured. CLS always counts
    (an unmeasured CLS is 0); the others only count with a positive value.
    """
    raw = 0.0
    captured = 0
    issues: list[str] = []
    ratings: dict[str, Rating | None] = {}
    cls = perf.cls if perf.cls is not None else 0.0

    measured: list[tuple[str, float | None, Callable[[float], Rating], Callable[[float], str]]] = [
        ("lcp", perf.lcp_ms, rate_lcp, _seconds),
        ("fcp", perf.fcp_ms, rate_fcp, _seconds),
        ("cls", cls, rate_cls, _unitless),
        ("inp", perf.inp_ms, rate_inp, _millis),
        ("ttfb", perf.ttfb_ms, rate_ttfb, _millis),
    ]
    for metric, value, rater, shown in measured:
        if value is None or (metric != "cls" and value <= 0):
            ratings[metric] = None
            continue
        rating = rater(value)
        ratings[metric] = rating
        captured += 1
        raw += RATING_POINTS[rating]
        issue = _metric_issue(metric, rating, shown(value))
        if issue:
            issues.append(issue)

    score = raw / (captured * POINTS_PER_METRIC) * 100
    log.debug("Web Vitals: %d metric(s) captured, raw=%.0f, score=%.2f", captured, raw, score)

    if perf.resource_count > MAX_RESOURCES:
        issues.append(f"High number of resource requests ({perf.resource_count})")
    if perf.transfer_bytes > MAX_TRANSFER_BYTES:
        issues.append(
            f"Large total transfer size ({perf.transfer_bytes / (1024 * 1024):.2f} MB)"
        )

    return PerformanceResult(
        score=round(score, 2),
        raw_score=raw,
        captured_metrics=captured,
        lcp_ms=perf.lcp_ms if ratings["lcp"] else None,
        lcp_rating=ratings["lcp"],
        fcp_ms=perf.fcp_ms if ratings["fcp"] else None,
        fcp_rating=ratings["fcp"],
        cls=cls,
        cls_rating=rate_cls(cls),
        inp_ms=perf.inp_ms if ratings["inp"] else None,
        inp_rating=ratings["inp"],
        ttfb_ms=perf.ttfb_ms if ratings["ttfb"] else None,
        ttfb_rating=ratings["ttfb"],
        dom_content_loaded_ms=perf.dom_content_loaded_ms,
        dom_complete_ms=perf.dom_complete_ms,
        transfer_bytes=perf.transfer_bytes,
        resource_count=perf.resource_count,
        attribution=dict(perf.attribution),
        issues=tuple(issues),
    )
