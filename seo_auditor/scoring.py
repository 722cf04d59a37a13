# Category scorers. Each one turns a PageSignals snapshot into a bounded
# sub-score out of 100, the derived facets for its category and its issues.

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

from seo_auditor.models import (
    ContentQualityResult,
    LinkStructureResult,
    OnPageResult,
    PageSignals,
    SchemaMarkupResult,
    SecurityResult,
    TechnicalResult,
    UserExperienceResult,
)

log = logging.getLogger(__name__)

# (threshold, points, issue template or None)
Tier = Tuple[float, float, Optional[str]]

MAX_PAGE_SIZE_BYTES = 3 * 1024 * 1024
MIN_READABLE_FONT_PX = 14.0
RECOGNIZED_SCHEMA_TYPES = (
    "Organization",
    "BreadcrumbList",
    "Article",
    "Product",
    "LocalBusiness",
)
_PX_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*px\s*$", re.IGNORECASE)


# ---------- shared helpers ----------


def percentage(part: int, whole: int) -> float | None:
    """part / whole * 100, or None when there is nothing to measure."""
    if whole <= 0:
        return None
    return part / whole * 100


def tier_at_least(
    value: float, tiers: Sequence[Tier], fallback: tuple[float, str | None]
) -> tuple[float, str | None]:
    """
    Walk tiers ordered by descending threshold and return the first one whose
    threshold the value reaches. Issue templates are formatted with `value`.
    """
    for threshold, points, issue in tiers:
        if value >= threshold:
            return points, _fmt(issue, value)
    points, issue = fallback
    return points, _fmt(issue, value)


def tier_below(
    value: float, tiers: Sequence[Tier], fallback: tuple[float, str | None]
) -> tuple[float, str | None]:
    """Same as tier_at_least, for ascending thresholds the value must stay under."""
    for threshold, points, issue in tiers:
        if value < threshold:
            return points, _fmt(issue, value)
    points, issue = fallback
    return points, _fmt(issue, value)


def _fmt(template: str | None, value: float) -> str | None:
    return template.format(value=value) if template else None


class _Card:
    """Running total and issue list for one category."""

    def __init__(self) -> None:
        self.points = 0.0
        self.issues: list[str] = []

    def check(self, ok: bool, points: float, issue: str, partial: float = 0.0) -> bool:
        if ok:
            self.points += points
        else:
            self.points += partial
            self.issues.append(issue)
        return ok

    def award(self, points: float, issue: str | None = None) -> None:
        self.points += points
        if issue:
            self.issues.append(issue)

    def bounded(self, max_score: float = 100.0) -> float:
        return max(0.0, min(max_score, self.points))


# ---------- Technical ----------

LOAD_TIME_TIERS: list[Tier] = [
    (2000, 20, None),
    (3000, 15, "Page load time is moderate (2-3 seconds)"),
    (5000, 10, "Page load time is slow (3-5 seconds)"),
]
REQUEST_TIERS: list[Tier] = [
    (50, 10, None),
    (100, 5, None),
]


def score_technical(signals: PageSignals) -> TechnicalResult:
    card = _Card()

    card.check(signals.is_https, 15, "Site is not using HTTPS")
    card.check(signals.has_viewport, 10, "Missing viewport meta tag")
    card.check(signals.has_robots_txt, 10, "robots.txt not found")
    card.check(signals.has_sitemap, 10, "sitemap.xml not found")

    load_seconds = signals.load_time_ms / 1000
    card.award(
        *tier_below(
            signals.load_time_ms,
            LOAD_TIME_TIERS,
            (5, f"Page load time is very slow ({load_seconds:.2f} seconds)"),
        )
    )

    size_mb = signals.html_bytes / (1024 * 1024)
    card.check(
        signals.html_bytes < MAX_PAGE_SIZE_BYTES,
        10,
        f"Page size is large ({size_mb:.2f} MB)",
    )

    requests = signals.estimated_requests
    card.award(
        *tier_below(
            requests, REQUEST_TIERS, (0, "High number of HTTP requests ({value:.0f})")
        )
    )

    card.check(signals.has_canonical, 10, "Missing canonical tag")

    # Reaching a rendered page at all earns the status credit.
    card.award(5)

    return TechnicalResult(
        score=card.bounded(),
        load_time_ms=signals.load_time_ms,
        page_size_bytes=signals.html_bytes,
        http_requests=requests,
        has_robots_txt=signals.has_robots_txt,
        has_sitemap=signals.has_sitemap,
        is_https=signals.is_https,
        is_mobile_friendly=signals.has_viewport,
        has_viewport=signals.has_viewport,
        has_canonical=signals.has_canonical,
        http_status_code=signals.status_code,
        issues=tuple(card.issues),
    )


# ---------- On-page ----------


def _length_band(
    card: _Card, length: int, low: int, high: int, too_short: str, too_long: str
) -> None:
    if low <= length <= high:
        card.award(10)
    elif length < low:
        card.award(5, too_short)
    else:
        card.award(5, too_long)


def has_proper_heading_hierarchy(counts: Sequence[int]) -> bool:
    """An H1 exists and no level from H3 down appears without the level above it."""
    if counts[0] == 0:
        return False
    for level in range(2, 6):
        if counts[level] > 0 and counts[level - 1] == 0:
            return False
    return True


def score_on_page(signals: PageSignals) -> OnPageResult:
    card = _Card()

    title_length = len(signals.title)
    has_title = title_length > 0
    if card.check(has_title, 15, "Missing title tag"):
        _length_band(
            card,
            title_length,
            50,
            60,
            "Title tag is too short (< 50 characters)",
            "Title tag is too long (> 60 characters)",
        )

    desc_length = len(signals.meta_description)
    has_description = desc_length > 0
    if card.check(has_description, 15, "Missing meta description"):
        _length_band(
            card,
            desc_length,
            150,
            160,
            "Meta description is too short (< 150 characters)",
            "Meta description is too long (> 160 characters)",
        )

    h1_count = signals.heading_count(1)
    if h1_count == 1:
        card.award(15)
    elif h1_count > 1:
        card.award(5, f"Multiple H1 tags found ({h1_count})")
    else:
        card.award(0, "Missing H1 tag")

    h2_count = signals.heading_count(2)
    if h2_count > 0:
        card.award(5)

    proper_hierarchy = has_proper_heading_hierarchy(signals.heading_counts)
    card.check(proper_hierarchy, 10, "Improper heading hierarchy")

    has_og = signals.has_og_title and signals.has_og_description and signals.has_og_image
    card.check(has_og, 10, "Incomplete Open Graph tags")
    card.check(signals.has_twitter_card, 5, "Missing Twitter Card tags")
    card.check(signals.has_canonical, 10, "Missing canonical tag")

    # Without a target keyword, a non-empty title is the best available proxy.
    keyword_in_title = has_title
    if keyword_in_title:
        card.award(5)

    return OnPageResult(
        score=card.bounded(),
        has_title=has_title,
        title_length=title_length,
        has_meta_description=has_description,
        meta_description_length=desc_length,
        has_h1=h1_count > 0,
        h1_count=h1_count,
        h2_count=h2_count,
        has_og_tags=has_og,
        has_twitter_card=signals.has_twitter_card,
        has_canonical=signals.has_canonical,
        keyword_in_title=keyword_in_title,
        proper_heading_hierarchy=proper_hierarchy,
        issues=tuple(card.issues),
    )


# ---------- Content quality ----------

WORD_COUNT_TIERS: list[Tier] = [
    (1000, 25, None),
    (500, 15, "Content length is moderate (500-1000 words)"),
    (300, 10, "Content length is short (300-500 words)"),
]
ALT_TEXT_TIERS: list[Tier] = [
    (100, 20, None),
    (75, 15, "{value:.0f}% of images have alt text"),
    (50, 10, "Only {value:.0f}% of images have alt text"),
]
NO_IMAGES_POINTS = 10


def readability(word_count: int, sentence_count: int) -> float:
    """
    Flesch Reading Ease with syllables estimated at 1.5 per word.
    Caller guarantees word_count > 0; a page without sentence punctuation
    counts as one sentence.
    """
    sentences = max(sentence_count, 1)
    syllables = word_count * 1.5
    return 206.835 - 1.015 * (word_count / sentences) - 84.6 * (syllables / word_count)


def score_content_quality(signals: PageSignals) -> ContentQualityResult:
    card = _Card()

    card.award(
        *tier_at_least(
            signals.word_count,
            WORD_COUNT_TIERS,
            (5, "Content is too thin ({value:.0f} words)"),
        )
    )

    if signals.paragraph_count >= 5:
        card.award(10)

    alt_pct = percentage(signals.images_with_alt, signals.image_count)
    if alt_pct is None:
        card.award(NO_IMAGES_POINTS)
    else:
        card.award(
            *tier_at_least(
                alt_pct, ALT_TEXT_TIERS, (5, "Most images missing alt text ({value:.0f}%)")
            )
        )

    internal = signals.links.internal + signals.links.relative
    external = signals.links.external
    card.check(
        internal >= 3, 15, f"Low internal linking ({internal} links)", partial=5
    )
    card.check(external > 0, 10, "No external links to authoritative sources")

    reading_ease = 0.0
    if signals.word_count > 0:
        reading_ease = readability(signals.word_count, signals.sentence_count)
        card.check(
            reading_ease >= 60, 10, "Content may be difficult to read", partial=5
        )

    return ContentQualityResult(
        score=card.bounded(),
        word_count=signals.word_count,
        paragraph_count=signals.paragraph_count,
        image_count=signals.image_count,
        images_with_alt=signals.images_with_alt,
        internal_links=internal,
        external_links=external,
        readability_score=reading_ease,
        issues=tuple(card.issues),
    )


# ---------- Link structure ----------

INTERNAL_LINK_TIERS: list[Tier] = [
    (5, 25, None),
    (3, 15, None),
]
NO_ANCHOR_TEXT_POINTS = 15
BROKEN_LINK_CREDIT = 20


def score_link_structure(signals: PageSignals) -> LinkStructureResult:
    card = _Card()
    links = signals.links

    card.award(
        *tier_at_least(
            links.internal, INTERNAL_LINK_TIERS, (5, "Low internal link count ({value:.0f})")
        )
    )

    if 0 < links.external <= 10:
        card.award(15)
    elif links.external > 10:
        card.award(10, "High number of external links")
    else:
        card.award(5, "No external links")

    descriptive_pct = percentage(links.descriptive, links.with_text)
    descriptive = False
    if descriptive_pct is None:
        card.award(NO_ANCHOR_TEXT_POINTS)
    else:
        descriptive = descriptive_pct >= 80
        card.check(descriptive, 20, "Many links have generic anchor text", partial=10)

    card.check(signals.has_breadcrumbs, 20, "No breadcrumb navigation found")

    # Links are not fetched, so none are known to be broken.
    card.award(BROKEN_LINK_CREDIT)

    return LinkStructureResult(
        score=card.bounded(),
        internal_links=links.internal,
        external_links=links.external,
        has_breadcrumbs=signals.has_breadcrumbs,
        descriptive_anchors=descriptive,
        issues=tuple(card.issues),
    )


# ---------- Schema markup ----------


def _walk_types(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        declared = node.get("@type")
        if isinstance(declared, str):
            yield declared
        elif isinstance(declared, list):
            yield from (t for t in declared if isinstance(t, str))
        for value in node.values():
            yield from _walk_types(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk_types(item)


def find_schema_types(blocks: Iterable[str]) -> tuple[str, ...]:
    """Distinct recognized @type values across JSON-LD blocks, first seen first."""
    found: list[str] = []
    for block in blocks:
        try:
            candidates = [t for t in _walk_types(json.loads(block)) if t in RECOGNIZED_SCHEMA_TYPES]
        except json.JSONDecodeError:
            log.debug("JSON-LD block is not valid JSON; falling back to text search.")
            if '"@type"' not in block:
                continue
            candidates = [t for t in RECOGNIZED_SCHEMA_TYPES if t in block]
        for schema_type in candidates:
            if schema_type not in found:
                found.append(schema_type)
    return tuple(found)


def score_schema_markup(signals: PageSignals) -> SchemaMarkupResult:
    card = _Card()
    schema_types: tuple[str, ...] = ()
    has_json_ld = bool(signals.json_ld_blocks)

    if has_json_ld:
        card.award(30)
        schema_types = find_schema_types(signals.json_ld_blocks)
        if len(schema_types) >= 3:
            card.award(40)
        elif len(schema_types) == 2:
            card.award(30)
        elif len(schema_types) == 1:
            card.award(20, "Limited schema markup types")
        card.check("Organization" in schema_types, 15, "Missing Organization schema")
        card.check("BreadcrumbList" in schema_types, 15, "Missing BreadcrumbList schema")
    elif signals.has_microdata:
        card.award(20, "Using microdata instead of JSON-LD (JSON-LD is preferred)")
    else:
        card.award(0, "No structured data (schema markup) found")

    return SchemaMarkupResult(
        score=card.bounded(),
        has_schema=has_json_ld or signals.has_microdata,
        schema_types=schema_types,
        has_organization="Organization" in schema_types,
        has_breadcrumb="BreadcrumbList" in schema_types,
        issues=tuple(card.issues),
    )


# ---------- Security ----------

SECURITY_HEADER_CREDIT = 15


def score_security(signals: PageSignals) -> SecurityResult:
    card = _Card()
    is_https = signals.is_https
    mixed_content = False

    card.check(is_https, 40, "Site is not using HTTPS")
    if is_https:
        mixed_content = signals.insecure_resource_count > 0
        card.check(
            not mixed_content,
            30,
            "Mixed content detected (HTTP resources on HTTPS page)",
            partial=10,
        )
    else:
        card.award(15)

    # Response headers never reach the scorer; report and give partial credit.
    card.award(SECURITY_HEADER_CREDIT, "Unable to verify security headers")

    return SecurityResult(
        score=card.bounded(),
        is_https=is_https,
        has_ssl=is_https,
        mixed_content=mixed_content,
        issues=tuple(card.issues),
    )


# ---------- User experience ----------


def parse_font_px(font_size: str | None) -> float | None:
    """'16px' -> 16.0; anything not expressed in px is unmeasurable."""
    if not font_size:
        return None
    match = _PX_RE.match(font_size)
    return float(match.group(1)) if match else None


def score_user_experience(signals: PageSignals) -> UserExperienceResult:
    card = _Card()

    card.check(signals.has_favicon, 20, "Missing favicon")
    card.check(signals.has_lang_attribute, 25, "Missing lang attribute on html tag")

    font_px = parse_font_px(signals.font_size)
    readable = False
    if font_px is None:
        card.award(15)
    else:
        readable = font_px >= MIN_READABLE_FONT_PX
        card.check(
            readable,
            25,
            "Font size may be too small for comfortable reading",
            partial=10,
        )

    no_popups = not signals.has_intrusive_popup
    card.check(no_popups, 30, "Intrusive popups detected", partial=15)

    return UserExperienceResult(
        score=card.bounded(),
        has_favicon=signals.has_favicon,
        font_size_readable=readable,
        font_size_measured=font_px is not None,
        has_lang_attribute=signals.has_lang_attribute,
        no_intrusive_popups=no_popups,
        issues=tuple(card.issues),
    )
