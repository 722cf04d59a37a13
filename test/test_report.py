import dataclasses
import json
from datetime import datetime, timezone

from seo_auditor.api import audit_signals
from seo_auditor.models import PageSignals, PerformanceSignals
from seo_auditor.report import render_json, render_markdown

TS = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _result(**signal_overrides):
    signals = PageSignals(url="https://acme.example/", **signal_overrides)
    return audit_signals(signals, timestamp=TS)


def test_markdown_report_sections():
    text = render_markdown(_result())
    assert text.startswith("# SEO Audit: https://acme.example/\n")
    assert "- Overall score: **25.75 / 100**" in text
    assert "- Grade: **F**" in text
    assert "| Technical SEO | 45 / 100 | 5 |" in text
    assert "## Technical SEO (45/100)" in text
    assert "- Has robots txt: no" in text
    assert "- Schema types: none" in text
    assert "1. CRITICAL: Add a title tag to the page" in text
    assert "Performance" not in text


def test_markdown_report_with_performance():
    perf = PerformanceSignals(lcp_ms=5000, attribution={"lcp": "img.hero"})
    text = render_markdown(_result(performance=perf))
    assert "- Performance (reported separately): **60.00 / 100**" in text
    assert "## Performance (60/100)" in text
    assert "| LCP | 5000 ms | poor | img.hero |" in text
    assert "| FCP | not captured | - | - |" in text
    assert "| CLS | 0.000 | good | - |" in text
    assert "- Largest Contentful Paint is poor (5.00 s)" in text


def test_markdown_report_without_recommendations():
    result = dataclasses.replace(_result(), recommendations=())
    assert "Nothing to recommend." in render_markdown(result)


def test_json_report():
    data = json.loads(render_json(_result()))
    assert data["url"] == "https://acme.example/"
    assert data["timestamp"] == TS.isoformat()
    assert data["grade"] == "F"
    assert data["overall_score"] == 25.75
    assert data["technical_seo"]["score"] == 45
    assert data["schema_markup"]["schema_types"] == []
    assert data["link_structure"]["broken_links_checked"] is False
    assert data["performance"] is None
    assert data["recommendations"][0] == "CRITICAL: Add a title tag to the page"


def test_json_report_compact():
    assert "\n" not in render_json(_result(), indent=None)
