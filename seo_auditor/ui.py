# seo_auditor/ui.py
# Presentation-only utilities for CLI output.
from __future__ import annotations

from typing import IO, Iterable

from seo_auditor.models import AuditResult
from seo_auditor.report import CATEGORY_SECTIONS


def _writeln(text: str = "", *, file: IO[str]) -> None:
    file.write(text + "\n")


def render_audit_header(url: str, *, file: IO[str]) -> None:
    _writeln(f"Auditing: {url}...", file=file)


def render_score_line(result: AuditResult, *, file: IO[str]) -> None:
    _writeln(f"\nOverall score: {result.overall_score:.2f} ({result.grade})", file=file)


def render_category_section(result: AuditResult, *, file: IO[str]) -> None:
    _writeln("\n--- Categories ---", file=file)
    for attr, heading in CATEGORY_SECTIONS:
        category = getattr(result, attr)
        _writeln(f"- {heading:<16} {category.score:>5.0f} / {category.max_score:.0f}", file=file)
    if result.performance is not None:
        perf = result.performance
        _writeln(
            f"- {'Performance':<16} {perf.score:>5.0f} / {perf.max_score:.0f}"
            f"  (separate; {perf.captured_metrics}/5 metrics)",
            file=file,
        )


def render_recommendations_section(recommendations: Iterable[str], *, file: IO[str]) -> None:
    recs = list(recommendations)
    if not recs:
        return
    _writeln("\n--- Recommendations ---", file=file)
    for rec in recs:
        _writeln(f"- {rec}", file=file)


def render_error(message: str, *, file: IO[str]) -> None:
    _writeln(f"Audit failed: {message}", file=file)
