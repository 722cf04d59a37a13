import pytest

from seo_auditor.ratings import rate, rate_cls, rate_fcp, rate_inp, rate_lcp, rate_ttfb


@pytest.mark.parametrize(
    "rater, value, expected",
    [
        (rate_lcp, 1200, "good"),
        (rate_lcp, 2500, "good"),  # boundary belongs to the better tier
        (rate_lcp, 2500.1, "needs-improvement"),
        (rate_lcp, 4000, "needs-improvement"),
        (rate_lcp, 4000.01, "poor"),
        (rate_fcp, 1800, "good"),
        (rate_fcp, 3000, "needs-improvement"),
        (rate_fcp, 3001, "poor"),
        (rate_cls, 0.0, "good"),
        (rate_cls, 0.10, "good"),
        (rate_cls, 0.11, "needs-improvement"),
        (rate_cls, 0.25, "needs-improvement"),
        (rate_cls, 0.26, "poor"),
        (rate_ttfb, 800, "good"),
        (rate_ttfb, 1800, "needs-improvement"),
        (rate_ttfb, 1801, "poor"),
        (rate_inp, 200, "good"),
        (rate_inp, 500, "needs-improvement"),
        (rate_inp, 501, "poor"),
    ],
)
def test_rating_ladders(rater, value, expected):
    assert rater(value) == expected


def test_rate_by_name_matches_helpers():
    assert rate("lcp", 3000) == rate_lcp(3000)
    assert rate("cls", 0.3) == "poor"


def test_unknown_metric_raises():
    with pytest.raises(KeyError):
        rate("tti", 100)
