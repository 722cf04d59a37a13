import asyncio
import copy
from datetime import datetime, timezone

import pytest

from seo_auditor import api
from seo_auditor.api import audit_signals, audit_url
from seo_auditor.config import DEFAULT_CONFIG
from seo_auditor.errors import NavigationTimeout
from seo_auditor.grading import CRITICAL_HTTPS, CRITICAL_TECHNICAL, CRITICAL_TITLE
from seo_auditor.models import LinkSummary, PageSignals, PerformanceSignals

TS = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _good_page(**overrides) -> PageSignals:
    base = dict(
        url="https://acme.example/",
        scheme="https",
        host="acme.example",
        load_time_ms=900,
        html_bytes=80_000,
        image_count=4,
        images_with_alt=4,
        script_count=6,
        stylesheet_count=2,
        title="Acme Widgets | Hand-made widgets built to last forever",
        meta_description="d" * 155,
        heading_counts=(1, 4, 2, 0, 0, 0),
        paragraph_count=9,
        word_count=1400,
        sentence_count=120,
        has_viewport=True,
        has_canonical=True,
        has_og_title=True,
        has_og_description=True,
        has_og_image=True,
        has_twitter_card=True,
        has_favicon=True,
        has_lang_attribute=True,
        has_breadcrumbs=True,
        has_robots_txt=True,
        has_sitemap=True,
        links=LinkSummary(internal=12, external=3, relative=1, with_text=16, descriptive=15),
        json_ld_blocks=('{"@type": ["Organization", "BreadcrumbList", "Article"]}',),
        font_size="16px",
    )
    base.update(overrides)
    return PageSignals(**base)


def _fake_inspector(signals=None, error=None, seen=None):
    class FakeInspector:
        def __init__(self, config):
            if seen is not None:
                seen.append(config)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc):
            return None

        async def load(self, url):
            if error is not None:
                raise error
            return signals

    return FakeInspector


@pytest.fixture
def default_config(monkeypatch):
    monkeypatch.setattr(api, "load_config", lambda: copy.deepcopy(DEFAULT_CONFIG))


def test_empty_page_audit():
    result = audit_signals(PageSignals(url="https://acme.example/"), timestamp=TS)
    assert result.url == "https://acme.example/"
    assert result.timestamp == TS
    assert result.technical_seo.score == 45
    assert result.on_page_seo.score == 0
    assert result.content_quality.score == 20
    assert result.link_structure.score == 45
    assert result.schema_markup.score == 0
    assert result.security.score == 30
    assert result.user_experience.score == 45
    assert result.overall_score == 25.75
    assert result.grade == "F"
    assert result.performance is None
    assert result.recommendations[:4] == (
        CRITICAL_TITLE,
        CRITICAL_HTTPS,
        CRITICAL_TECHNICAL,
        "Site is not using HTTPS",
    )


def test_good_page_grades_a_plus():
    result = audit_signals(_good_page(), timestamp=TS)
    # content tops out at 90 and security at 85; everything else is full
    assert result.content_quality.score == 90
    assert result.overall_score == 97.25
    assert result.grade == "A+"
    assert result.recommendations == ("Unable to verify security headers",)


def test_audit_is_deterministic():
    signals = _good_page(performance=PerformanceSignals(lcp_ms=3100, cls=0.02))
    assert audit_signals(signals, timestamp=TS) == audit_signals(signals, timestamp=TS)


def test_performance_is_reported_separately():
    plain = audit_signals(PageSignals(), timestamp=TS)
    with_perf = audit_signals(
        PageSignals(performance=PerformanceSignals(lcp_ms=5000)), timestamp=TS
    )
    assert with_perf.performance is not None
    assert with_perf.performance.score == 60.0
    assert with_perf.overall_score == plain.overall_score
    assert with_perf.recommendations[-1] == "Largest Contentful Paint is poor (5.00 s)"
    assert with_perf.recommendations[:-1] == plain.recommendations


def test_url_argument_overrides_signals_url():
    result = audit_signals(PageSignals(url="https://final.example/"), url="https://asked.example/")
    assert result.url == "https://asked.example/"
    assert result.timestamp.tzinfo is not None


def test_audit_url_uses_browser_by_default(monkeypatch, default_config):
    seen = []
    monkeypatch.setattr(api, "PlaywrightInspector", _fake_inspector(_good_page(), seen=seen))
    monkeypatch.setattr(api, "HttpxInspector", _fake_inspector(error=AssertionError("wrong renderer")))

    result = asyncio.run(audit_url("https://acme.example/", collect_performance=False))
    assert result.grade == "A+"
    assert seen[0]["collect_performance"] is False
    assert seen[0]["renderer"] == "playwright"


def test_audit_url_static_renderer(monkeypatch, default_config):
    seen = []
    monkeypatch.setattr(api, "HttpxInspector", _fake_inspector(PageSignals(), seen=seen))
    monkeypatch.setattr(api, "PlaywrightInspector", _fake_inspector(error=AssertionError("wrong renderer")))

    result = asyncio.run(
        audit_url("https://acme.example/", renderer="httpx", navigation_timeout=5)
    )
    assert result.url == "https://acme.example/"
    assert seen[0]["navigation_timeout"] == 5


def test_audit_url_propagates_inspection_errors(monkeypatch, default_config):
    error = NavigationTimeout("https://slow.example/", "Timed out")
    monkeypatch.setattr(api, "PlaywrightInspector", _fake_inspector(error=error))
    with pytest.raises(NavigationTimeout):
        asyncio.run(audit_url("https://slow.example/"))


def test_audit_url_rejects_unknown_renderer(default_config):
    with pytest.raises(ValueError):
        asyncio.run(audit_url("https://acme.example/", renderer="lynx"))
