# Folds category results into the overall score, the letter grade and the
# recommendation list.

from __future__ import annotations

import math
from dataclasses import astuple, dataclass
from typing import Iterable, Protocol

from seo_auditor.models import Grade


class _Scored(Protocol):
    score: float
    max_score: float
    issues: tuple[str, ...]


@dataclass(frozen=True)
class CategoryWeights:
    """Weights of the seven mandatory categories. They must sum to 1.0."""

    technical: float = 0.30
    on_page: float = 0.25
    content: float = 0.20
    links: float = 0.10
    schema: float = 0.05
    security: float = 0.05
    ux: float = 0.05

    def validate(self) -> "CategoryWeights":
        total = math.fsum(astuple(self))
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Category weights must sum to 1.0, got {total}")
        if any(w < 0 for w in astuple(self)):
            raise ValueError("Category weights must not be negative")
        return self


WEIGHTS = CategoryWeights().validate()

# Descending, non-overlapping lower bounds; anything below the last is "F".
GRADE_BREAKPOINTS: tuple[tuple[float, Grade], ...] = (
    (90, "A+"),
    (85, "A"),
    (80, "A-"),
    (75, "B+"),
    (70, "B"),
    (65, "B-"),
    (60, "C+"),
    (55, "C"),
    (50, "C-"),
    (45, "D+"),
    (40, "D"),
)
GRADE_ORDER: tuple[Grade, ...] = tuple(g for _, g in GRADE_BREAKPOINTS) + ("F",)

CRITICAL_TECHNICAL = "CRITICAL: Address technical SEO issues immediately"
CRITICAL_HTTPS = "CRITICAL: Implement HTTPS for security and SEO"
CRITICAL_TITLE = "CRITICAL: Add a title tag to the page"


def round2(value: float) -> float:
    """Round half away from zero to two decimals (scores are never negative)."""
    return math.floor(value * 100 + 0.5) / 100


def percent_of_max(result: _Scored) -> float:
    if result.max_score <= 0:
        return 0.0
    return result.score / result.max_score * 100


def overall_score(
    technical: _Scored,
    on_page: _Scored,
    content: _Scored,
    links: _Scored,
    schema: _Scored,
    security: _Scored,
    ux: _Scored,
    weights: CategoryWeights = WEIGHTS,
) -> float:
    """Weighted sum of the seven mandatory category percentages, 2 decimals."""
    parts = [
        percent_of_max(technical) * weights.technical,
        percent_of_max(on_page) * weights.on_page,
        percent_of_max(content) * weights.content,
        percent_of_max(links) * weights.links,
        percent_of_max(schema) * weights.schema,
        percent_of_max(security) * weights.security,
        percent_of_max(ux) * weights.ux,
    ]
    return round2(math.fsum(parts))


def grade_for(score: float) -> Grade:
    for lower_bound, grade in GRADE_BREAKPOINTS:
        if score >= lower_bound:
            return grade
    return "F"


def build_recommendations(
    ordered_results: Iterable[_Scored],
    *,
    technical_score: float,
    is_https: bool,
    has_title: bool,
) -> tuple[str, ...]:
    """
    Concatenate category issues in the given order, then prepend critical
    markers. Each marker is pushed onto the front, so the last one checked
    (missing title) ends up first.
    """
    recommendations: list[str] = []
    for result in ordered_results:
        recommendations.extend(result.issues)

    if technical_score < 50:
        recommendations.insert(0, CRITICAL_TECHNICAL)
    if not is_https:
        recommendations.insert(0, CRITICAL_HTTPS)
    if not has_title:
        recommendations.insert(0, CRITICAL_TITLE)
    return tuple(recommendations)
