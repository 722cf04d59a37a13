import pytest

from seo_auditor.models import PerformanceSignals
from seo_auditor.performance import score_performance


def test_only_cls_captured_renormalizes_to_100():
    result = score_performance(PerformanceSignals(cls=0.05))
    assert result.captured_metrics == 1
    assert result.raw_score == 20
    assert result.score == 100.0
    assert result.cls_rating == "good"
    assert result.lcp_rating is None
    assert result.issues == ()


def test_unmeasured_cls_counts_as_good_zero():
    result = score_performance(PerformanceSignals())
    assert result.captured_metrics == 1
    assert result.cls == 0.0
    assert result.cls_rating == "good"
    assert result.score == 100.0


def test_all_metrics_good():
    perf = PerformanceSignals(lcp_ms=2000, fcp_ms=1000, cls=0.01, inp_ms=100, ttfb_ms=500)
    result = score_performance(perf)
    assert result.captured_metrics == 5
    assert result.raw_score == 100
    assert result.score == 100.0


def test_mixed_ratings_and_issue_text():
    perf = PerformanceSignals(lcp_ms=3000, fcp_ms=3500, cls=0.3, inp_ms=300, ttfb_ms=900)
    result = score_performance(perf)
    # 12 + 4 + 4 + 12 + 12
    assert result.raw_score == 44
    assert result.score == 44.0
    assert result.issues == (
        "Largest Contentful Paint needs improvement (3.00 s)",
        "First Contentful Paint is poor (3.50 s)",
        "Cumulative Layout Shift is poor (0.300)",
        "Interaction to Next Paint needs improvement (300 ms)",
        "Time to First Byte needs improvement (900 ms)",
    )


def test_partial_capture_is_rescaled():
    # poor LCP (4) + default CLS (20) over 2 captured metrics
    result = score_performance(PerformanceSignals(lcp_ms=5000))
    assert result.captured_metrics == 2
    assert result.raw_score == 24
    assert result.score == pytest.approx(60.0)


def test_non_positive_timings_are_not_counted():
    result = score_performance(PerformanceSignals(lcp_ms=0.0, ttfb_ms=0.0, cls=0.0))
    assert result.captured_metrics == 1
    assert result.lcp_ms is None
    assert result.lcp_rating is None
    assert result.ttfb_rating is None


@pytest.mark.parametrize(
    "resources, transfer, expected",
    [
        (100, 5 * 1024 * 1024, ()),
        (101, 0, ("High number of resource requests (101)",)),
        (0, 6 * 1024 * 1024, ("Large total transfer size (6.00 MB)",)),
    ],
)
def test_resource_advisories(resources, transfer, expected):
    perf = PerformanceSignals(cls=0.0, resource_count=resources, transfer_bytes=transfer)
    result = score_performance(perf)
    assert result.issues == expected
    # advisories never change the score
    assert result.score == 100.0


def test_attribution_is_carried_through():
    perf = PerformanceSignals(lcp_ms=4200, attribution={"lcp": "img.hero"})
    result = score_performance(perf)
    assert result.attribution == {"lcp": "img.hero"}
    assert result.lcp_rating == "poor"
