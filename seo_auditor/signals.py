# seo_auditor/signals.py
"""
Pure extraction of PageSignals from a rendered HTML document.

Both inspectors hand their HTML (plus whatever only a browser can measure:
inner text, computed font size, Web Vitals) to `extract_signals`, so every
DOM query lives here and can be exercised without a browser.

Also home to the boundary validation of the untyped performance payload
returned by the in-page measurement script.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping
from urllib.parse import urlparse

import tldextract
from bs4 import BeautifulSoup

from seo_auditor.models import LinkSummary, PageSignals, PerformanceSignals

log = logging.getLogger(__name__)

GENERIC_ANCHOR_TEXT = {"click here", "read more", "here"}
BREADCRUMB_SELECTOR = (
    "[itemtype*='BreadcrumbList'], nav[aria-label*='readcrumb'], .breadcrumb"
)
POPUP_SELECTOR = (
    "[class*='modal'][style*='display'], [class*='popup'][style*='display']"
)
INSECURE_RESOURCE_SELECTOR = (
    "img[src^='http://'], script[src^='http://'], link[href^='http://']"
)
NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
HEAD_TAGS = ["head", "title", "meta", "link", "base"]


# ---------- text helpers ----------


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def count_words(text: str) -> int:
    return len(text.split())


def count_sentences(text: str) -> int:
    """Sentence terminators in the text; may be 0."""
    return text.count(".") + text.count("!") + text.count("?")


def is_descriptive_anchor(text: str) -> bool:
    """Anchor text that says more than 'click here'. Expects non-empty text."""
    cleaned = text.strip()
    return cleaned.lower() not in GENERIC_ANCHOR_TEXT and len(cleaned) > 2


# ---------- link classification ----------


def _registrable_domain_or(host: str) -> str:
    """eTLD+1 via tldextract, or the host minus a leading 'www.'."""
    ext = tldextract.extract(host)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return host[4:] if host.startswith("www.") else host


def _same_site(host: str, page_host: str, use_registrable_domain: bool) -> bool:
    if host == page_host:
        return True
    if use_registrable_domain and host and page_host:
        return _registrable_domain_or(host) == _registrable_domain_or(page_host)
    return False


def classify_href(
    href: str, page_host: str, use_registrable_domain: bool = False
) -> str | None:
    """
    Returns "internal", "external", "relative" or None (fragment or unusable).

    - absolute http(s) and protocol-relative URLs compare hosts
    - root-relative paths ("/about") are internal
    - everything else that is not a fragment ("page.html", "mailto:...") is relative
    """
    href = href.strip()
    if not href or href.startswith("#"):
        return None
    lowered = href.lower()
    if lowered.startswith(("http://", "https://", "//")):
        try:
            host = (urlparse(href).hostname or "").lower()
        except ValueError:
            log.debug("Skipping malformed href: %s", href)
            return None
        if _same_site(host, page_host.lower(), use_registrable_domain):
            return "internal"
        return "external"
    if href.startswith("/"):
        return "internal"
    return "relative"


def summarize_links(
    anchors: Iterable[tuple[str, str]],
    page_url: str,
    use_registrable_domain: bool = False,
) -> LinkSummary:
    """Aggregate (href, text) pairs of every <a href> into a LinkSummary."""
    page_host = (urlparse(page_url).hostname or "").lower()
    counts = {"internal": 0, "external": 0, "relative": 0}
    with_text = 0
    descriptive = 0

    for href, text in anchors:
        if not href:
            continue
        if text.strip():
            with_text += 1
            if is_descriptive_anchor(text):
                descriptive += 1
        kind = classify_href(href, page_host, use_registrable_domain)
        if kind:
            counts[kind] += 1

    return LinkSummary(
        internal=counts["internal"],
        external=counts["external"],
        relative=counts["relative"],
        with_text=with_text,
        descriptive=descriptive,
    )


# ---------- performance payload ----------


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _as_count(value: Any) -> int:
    number = _as_float(value)
    return int(number) if number is not None else 0


def parse_performance_payload(raw: Mapping[str, Any] | None) -> PerformanceSignals:
    """
    Validate the loosely-typed dict produced by the in-page vitals script.
    Missing, non-numeric, negative or non-finite metrics become None
    (counts become 0); attribution keeps only string -> string entries.
    """
    if not raw:
        return PerformanceSignals()

    raw_attribution = raw.get("attribution")
    attribution: dict[str, str] = {}
    if isinstance(raw_attribution, Mapping):
        attribution = {
            str(k): v for k, v in raw_attribution.items() if isinstance(v, str) and v
        }

    perf = PerformanceSignals(
        lcp_ms=_as_float(raw.get("lcp_ms")),
        fcp_ms=_as_float(raw.get("fcp_ms")),
        cls=_as_float(raw.get("cls")),
        inp_ms=_as_float(raw.get("inp_ms")),
        ttfb_ms=_as_float(raw.get("ttfb_ms")),
        dom_content_loaded_ms=_as_float(raw.get("dom_content_loaded_ms")),
        dom_complete_ms=_as_float(raw.get("dom_complete_ms")),
        transfer_bytes=_as_count(raw.get("transfer_bytes")),
        resource_count=_as_count(raw.get("resource_count")),
        attribution=attribution,
    )
    log.debug("Parsed performance payload: %s", perf)
    return perf


# ---------- HTML extraction ----------


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.select_one(f"meta[name='{name}']")
    if tag is None:
        return ""
    content = tag.get("content") or ""
    return content if isinstance(content, str) else " ".join(content)


def _visible_text(soup: BeautifulSoup) -> str:
    root = soup.body
    strip = NON_CONTENT_TAGS
    if root is None:
        # body-less fragment: everything except head content
        root = soup
        strip = NON_CONTENT_TAGS + HEAD_TAGS
    for tag in root.find_all(strip):
        tag.decompose()
    return root.get_text(" ")


def extract_signals(
    html: str,
    url: str,
    *,
    load_time_ms: float,
    body_text: str | None = None,
    font_size: str | None = None,
    has_robots_txt: bool = False,
    has_sitemap: bool = False,
    performance: PerformanceSignals | None = None,
    status_code: int = 200,
    use_registrable_domain: bool = False,
) -> PageSignals:
    """
    Build the immutable signal snapshot for one page.

    `body_text` should be the browser's innerText of <body>; without it the
    text is recovered from the HTML with scripts and styles removed.
    """
    soup = BeautifulSoup(html, "html.parser")
    parsed = urlparse(url)

    images = soup.find_all("img")
    images_with_alt = sum(1 for img in images if img.get("alt"))

    title_tag = soup.find("title")
    title = collapse_whitespace(title_tag.get_text()) if title_tag else ""

    anchors = [
        (str(a.get("href") or ""), a.get_text()) for a in soup.find_all("a", href=True)
    ]
    json_ld_blocks = tuple(
        tag.get_text() for tag in soup.select("script[type='application/ld+json']")
    )

    signals_kwargs: dict[str, Any] = dict(
        url=url,
        scheme=(parsed.scheme or "").lower(),
        host=(parsed.hostname or "").lower(),
        status_code=status_code,
        load_time_ms=float(load_time_ms),
        html_bytes=len(html.encode("utf-8")),
        image_count=len(images),
        images_with_alt=images_with_alt,
        script_count=len(soup.find_all("script")),
        stylesheet_count=len(soup.select("link[rel~='stylesheet']")),
        title=title,
        meta_description=_meta_content(soup, "description"),
        heading_counts=tuple(len(soup.find_all(f"h{level}")) for level in range(1, 7)),
        paragraph_count=len(soup.find_all("p")),
        has_viewport=soup.select_one("meta[name='viewport']") is not None,
        has_canonical=soup.select_one("link[rel~='canonical']") is not None,
        has_og_title=soup.select_one("meta[property='og:title']") is not None,
        has_og_description=soup.select_one("meta[property='og:description']") is not None,
        has_og_image=soup.select_one("meta[property='og:image']") is not None,
        has_twitter_card=soup.select_one("meta[name='twitter:card']") is not None,
        has_favicon=soup.select_one("link[rel*='icon']") is not None,
        has_lang_attribute=soup.select_one("html[lang]") is not None,
        has_breadcrumbs=soup.select_one(BREADCRUMB_SELECTOR) is not None,
        has_microdata=soup.select_one("[itemscope]") is not None,
        has_intrusive_popup=soup.select_one(POPUP_SELECTOR) is not None,
        has_robots_txt=has_robots_txt,
        has_sitemap=has_sitemap,
        links=summarize_links(anchors, url, use_registrable_domain),
        json_ld_blocks=json_ld_blocks,
        insecure_resource_count=len(soup.select(INSECURE_RESOURCE_SELECTOR)),
        font_size=font_size or None,
        performance=performance,
    )

    # Last: recovering text from the tree removes nodes.
    text = body_text if body_text is not None else _visible_text(soup)
    signals_kwargs["word_count"] = count_words(text)
    signals_kwargs["sentence_count"] = count_sentences(text)

    signals = PageSignals(**signals_kwargs)
    log.debug(
        "Extracted signals for %s: %d words, %d images, %d links",
        url,
        signals.word_count,
        signals.image_count,
        signals.links.internal + signals.links.external + signals.links.relative,
    )
    return signals
