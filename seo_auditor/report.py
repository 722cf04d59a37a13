# seo_auditor/report.py
"""
Document renderers for an AuditResult: a Markdown report meant to be read by
people or pasted into an LLM prompt, and the JSON form of the result.
"""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from seo_auditor.models import AuditResult, PerformanceResult

# (attribute on AuditResult, heading)
CATEGORY_SECTIONS = [
    ("technical_seo", "Technical SEO"),
    ("on_page_seo", "On-Page SEO"),
    ("content_quality", "Content Quality"),
    ("link_structure", "Link Structure"),
    ("schema_markup", "Schema Markup"),
    ("security", "Security"),
    ("user_experience", "User Experience"),
]

_HIDDEN_FACETS = {"score", "max_score", "issues"}


def _json_default(o: Any) -> Any:
    # Minimal, safe encoder for dataclasses and datetimes.
    if isinstance(o, datetime):
        return o.isoformat()
    if is_dataclass(o):
        return asdict(o)  # type: ignore[arg-type]
    return str(o)


def render_json(result: AuditResult, indent: int | None = 2) -> str:
    return json.dumps(result, default=_json_default, indent=indent)


def _label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def _value(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (tuple, list)):
        return ", ".join(str(v) for v in value) if value else "none"
    if value is None:
        return "n/a"
    return str(value)


def _facets(result: Any) -> list[str]:
    lines = []
    for name, value in asdict(result).items():
        if name in _HIDDEN_FACETS:
            continue
        lines.append(f"- {_label(name)}: {_value(value)}")
    return lines


def _issues(issues: tuple[str, ...]) -> list[str]:
    if not issues:
        return ["No issues found."]
    return [f"- {issue}" for issue in issues]


def _vitals_table(perf: PerformanceResult) -> list[str]:
    rows = [
        ("LCP", perf.lcp_ms, perf.lcp_rating, "ms", perf.attribution.get("lcp")),
        ("FCP", perf.fcp_ms, perf.fcp_rating, "ms", None),
        ("CLS", perf.cls, perf.cls_rating, "", perf.attribution.get("cls")),
        ("INP", perf.inp_ms, perf.inp_rating, "ms", perf.attribution.get("inp")),
        ("TTFB", perf.ttfb_ms, perf.ttfb_rating, "ms", None),
    ]
    lines = [
        "| Metric | Value | Rating | Element |",
        "|---|---|---|---|",
    ]
    for metric, value, rating, unit, element in rows:
        if value is None:
            shown = "not captured"
        elif unit:
            shown = f"{value:.0f} {unit}"
        else:
            shown = f"{value:.3f}"
        lines.append(f"| {metric} | {shown} | {rating or '-'} | {element or '-'} |")
    return lines


def render_markdown(result: AuditResult) -> str:
    """Render the whole audit as a Markdown document."""
    out: list[str] = [
        f"# SEO Audit: {result.url}",
        "",
        f"- Audited at: {result.timestamp.isoformat()}",
        f"- Overall score: **{result.overall_score:.2f} / 100**",
        f"- Grade: **{result.grade}**",
    ]
    if result.performance is not None:
        out.append(
            f"- Performance (reported separately): **{result.performance.score:.2f} / 100**"
        )

    out += ["", "## Category Scores", "", "| Category | Score | Issues |", "|---|---|---|"]
    for attr, heading in CATEGORY_SECTIONS:
        category = getattr(result, attr)
        out.append(
            f"| {heading} | {category.score:.0f} / {category.max_score:.0f} | {len(category.issues)} |"
        )
    if result.performance is not None:
        perf = result.performance
        out.append(
            f"| Performance | {perf.score:.0f} / {perf.max_score:.0f} | {len(perf.issues)} |"
        )

    for attr, heading in CATEGORY_SECTIONS:
        category = getattr(result, attr)
        out += ["", f"## {heading} ({category.score:.0f}/{category.max_score:.0f})", ""]
        out += _facets(category)
        out += ["", "**Issues**", ""]
        out += _issues(category.issues)

    if result.performance is not None:
        perf = result.performance
        out += ["", f"## Performance ({perf.score:.0f}/{perf.max_score:.0f})", ""]
        out.append(
            f"Captured {perf.captured_metrics} of 5 metrics; {perf.resource_count} resources, "
            f"{perf.transfer_bytes / 1024:.0f} KB transferred."
        )
        out.append("")
        out += _vitals_table(perf)
        out += ["", "**Issues**", ""]
        out += _issues(perf.issues)

    out += ["", "## Recommendations", ""]
    if result.recommendations:
        out += [f"{i}. {rec}" for i, rec in enumerate(result.recommendations, start=1)]
    else:
        out.append("Nothing to recommend.")
    out.append("")
    return "\n".join(out)
