# Defines the data structures passed between the inspector, the scorers and the renderers.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Rating = Literal["good", "needs-improvement", "poor"]
Grade = Literal["A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "F"]


@dataclass(frozen=True)
class PerformanceSignals:
    """
    Runtime timings read from the browser after the page settled.
    A metric that was not captured is None; CLS accumulates from 0.
    """

    lcp_ms: float | None = None
    fcp_ms: float | None = None
    cls: float | None = None
    inp_ms: float | None = None
    ttfb_ms: float | None = None
    dom_content_loaded_ms: float | None = None
    dom_complete_ms: float | None = None
    transfer_bytes: int = 0
    resource_count: int = 0
    # metric key ("lcp", "cls", "inp") -> element description, e.g. "img.hero"
    attribution: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkSummary:
    """Pre-aggregated statistics over every <a href> on the page."""

    internal: int = 0  # absolute same-host and root-relative
    external: int = 0  # absolute, other host
    relative: int = 0  # any other non-fragment relative href
    with_text: int = 0
    descriptive: int = 0


@dataclass(frozen=True)
class PageSignals:
    """
    Everything extracted from one page load. Produced once per audit by an
    inspector and read-only to all scorers. Every field defaults to its
    "absent" value, so PageSignals() is a valid (empty) page.
    """

    url: str = ""
    scheme: str = ""
    host: str = ""
    status_code: int = 200
    load_time_ms: float = 0.0
    html_bytes: int = 0

    image_count: int = 0
    images_with_alt: int = 0
    script_count: int = 0
    stylesheet_count: int = 0

    title: str = ""
    meta_description: str = ""
    heading_counts: tuple[int, int, int, int, int, int] = (0, 0, 0, 0, 0, 0)
    paragraph_count: int = 0
    word_count: int = 0
    sentence_count: int = 0

    has_viewport: bool = False
    has_canonical: bool = False
    has_og_title: bool = False
    has_og_description: bool = False
    has_og_image: bool = False
    has_twitter_card: bool = False
    has_favicon: bool = False
    has_lang_attribute: bool = False
    has_breadcrumbs: bool = False
    has_microdata: bool = False
    has_intrusive_popup: bool = False
    has_robots_txt: bool = False
    has_sitemap: bool = False

    links: LinkSummary = field(default_factory=LinkSummary)
    json_ld_blocks: tuple[str, ...] = ()
    insecure_resource_count: int = 0
    font_size: str | None = None
    performance: PerformanceSignals | None = None

    @property
    def is_https(self) -> bool:
        return self.scheme.lower() == "https"

    @property
    def estimated_requests(self) -> int:
        return self.image_count + self.script_count + self.stylesheet_count

    def heading_count(self, level: int) -> int:
        return self.heading_counts[level - 1]


# --- Category results ---------------------------------------------------------
# Field names double as the JSON contract of the original service.


@dataclass(frozen=True)
class TechnicalResult:
    score: float
    load_time_ms: float
    page_size_bytes: int
    http_requests: int
    has_robots_txt: bool
    has_sitemap: bool
    is_https: bool
    is_mobile_friendly: bool
    has_viewport: bool
    has_canonical: bool
    http_status_code: int
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class OnPageResult:
    score: float
    has_title: bool
    title_length: int
    has_meta_description: bool
    meta_description_length: int
    has_h1: bool
    h1_count: int
    h2_count: int
    has_og_tags: bool
    has_twitter_card: bool
    has_canonical: bool
    keyword_in_title: bool
    proper_heading_hierarchy: bool
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class ContentQualityResult:
    score: float
    word_count: int
    paragraph_count: int
    image_count: int
    images_with_alt: int
    internal_links: int
    external_links: int
    readability_score: float
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class LinkStructureResult:
    score: float
    internal_links: int
    external_links: int
    has_breadcrumbs: bool
    descriptive_anchors: bool
    broken_links: int = 0
    # Broken-link probing is not performed; the category always credits it.
    broken_links_checked: bool = False
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class SchemaMarkupResult:
    score: float
    has_schema: bool
    schema_types: tuple[str, ...]
    has_organization: bool
    has_breadcrumb: bool
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class SecurityResult:
    score: float
    is_https: bool
    has_ssl: bool
    mixed_content: bool
    has_security_headers: bool = False
    # Response headers are not inspected; the category always reports it.
    security_headers_checked: bool = False
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class UserExperienceResult:
    score: float
    has_favicon: bool
    font_size_readable: bool
    font_size_measured: bool
    has_lang_attribute: bool
    no_intrusive_popups: bool
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class PerformanceResult:
    score: float
    raw_score: float
    captured_metrics: int
    lcp_ms: float | None
    lcp_rating: Rating | None
    fcp_ms: float | None
    fcp_rating: Rating | None
    cls: float
    cls_rating: Rating
    inp_ms: float | None
    inp_rating: Rating | None
    ttfb_ms: float | None
    ttfb_rating: Rating | None
    dom_content_loaded_ms: float | None
    dom_complete_ms: float | None
    transfer_bytes: int
    resource_count: int
    attribution: dict[str, str] = field(default_factory=dict)
    issues: tuple[str, ...] = ()
    max_score: float = 100.0


@dataclass(frozen=True)
class AuditResult:
    """The final result of an audit. Performance is reported beside, not inside, the overall score."""

    url: str
    timestamp: datetime
    technical_seo: TechnicalResult
    on_page_seo: OnPageResult
    content_quality: ContentQualityResult
    link_structure: LinkStructureResult
    schema_markup: SchemaMarkupResult
    security: SecurityResult
    user_experience: UserExperienceResult
    overall_score: float
    grade: Grade
    recommendations: tuple[str, ...] = ()
    performance: PerformanceResult | None = None
