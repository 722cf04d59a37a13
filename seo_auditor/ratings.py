# Three-tier qualitative ratings for Core Web Vitals and related timings.

from __future__ import annotations

from seo_auditor.models import Rating

# metric -> (good upper bound, needs-improvement upper bound), both inclusive
THRESHOLDS: dict[str, tuple[float, float]] = {
    "lcp": (2500, 4000),
    "fcp": (1800, 3000),
    "cls": (0.10, 0.25),
    "ttfb": (800, 1800),
    "inp": (200, 500),
}


def rate(metric: str, value: float) -> Rating:
    """
    Map a raw metric value onto good / needs-improvement / poor.

    A value sitting exactly on a boundary belongs to the better tier.
    Raises KeyError for an unknown metric name.
    """
    good, needs_improvement = THRESHOLDS[metric]
    if value <= good:
        return "good"
    if value <= needs_improvement:
        return "needs-improvement"
    return "poor"


def rate_lcp(value_ms: float) -> Rating:
    return rate("lcp", value_ms)


def rate_fcp(value_ms: float) -> Rating:
    return rate("fcp", value_ms)


def rate_cls(value: float) -> Rating:
    return rate("cls", value)


def rate_ttfb(value_ms: float) -> Rating:
    return rate("ttfb", value_ms)


def rate_inp(value_ms: float) -> Rating:
    return rate("inp", value_ms)
