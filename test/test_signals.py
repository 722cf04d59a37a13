import pytest

from seo_auditor.models import LinkSummary, PerformanceSignals
from seo_auditor.signals import (
    classify_href,
    count_sentences,
    count_words,
    extract_signals,
    is_descriptive_anchor,
    parse_performance_payload,
    summarize_links,
)

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>  Acme Widgets |   Hand-made widgets </title>
  <meta name="description" content="We make widgets.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta property="og:title" content="Acme">
  <meta property="og:description" content="Widgets">
  <meta property="og:image" content="https://acme.example/og.png">
  <meta name="twitter:card" content="summary">
  <link rel="canonical" href="https://acme.example/">
  <link rel="shortcut icon" href="/favicon.ico">
  <link rel="stylesheet" href="/site.css">
  <link rel="stylesheet" href="http://cdn.example/legacy.css">
  <script src="/app.js"></script>
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization"}</script>
</head>
<body>
  <nav aria-label="Breadcrumb"><a href="/">Home</a></nav>
  <h1>Widgets</h1>
  <h2>Why</h2>
  <h3>Details</h3>
  <p>We build widgets. They are great!</p>
  <p>Ask us anything?</p>
  <img src="/a.png" alt="A widget">
  <img src="/b.png" alt="">
  <img src="http://cdn.example/c.png">
  <a href="/about">About us</a>
  <a href="https://acme.example/contact">Contact</a>
  <a href="team.html">Our team</a>
  <a href="#top">Top</a>
  <a href="https://other.example/">click here</a>
  <a href="//cdn.example/docs">Docs</a>
  <a href="">Empty</a>
  <div class="newsletter-modal" style="display: block">Subscribe</div>
  <script>var x = "not text.";</script>
</body>
</html>
"""


def _extract(**kwargs):
    return extract_signals(PAGE, "https://acme.example/", load_time_ms=1234.0, **kwargs)


def test_extracts_head_signals():
    s = _extract()
    assert s.scheme == "https"
    assert s.host == "acme.example"
    assert s.is_https
    assert s.title == "Acme Widgets | Hand-made widgets"
    assert s.meta_description == "We make widgets."
    assert s.has_viewport and s.has_canonical and s.has_favicon and s.has_lang_attribute
    assert s.has_og_title and s.has_og_description and s.has_og_image
    assert s.has_twitter_card
    assert s.stylesheet_count == 2
    assert s.script_count == 3
    assert len(s.json_ld_blocks) == 1
    assert '"Organization"' in s.json_ld_blocks[0]


def test_extracts_body_signals():
    s = _extract()
    assert s.heading_counts == (1, 1, 1, 0, 0, 0)
    assert s.paragraph_count == 2
    assert s.image_count == 3
    assert s.images_with_alt == 1
    assert s.has_breadcrumbs is True
    assert s.has_microdata is False
    assert s.has_intrusive_popup is True
    # legacy.css and c.png
    assert s.insecure_resource_count == 2
    assert s.html_bytes == len(PAGE.encode("utf-8"))
    assert s.load_time_ms == 1234.0
    assert s.estimated_requests == 8


def test_extracts_links():
    s = _extract()
    assert s.links == LinkSummary(internal=3, external=2, relative=1, with_text=7, descriptive=6)


def test_text_recovered_without_scripts():
    s = _extract()
    assert s.word_count == 24
    assert s.sentence_count == 3


def test_browser_text_and_measurements_are_used_when_given():
    perf = PerformanceSignals(cls=0.01)
    s = _extract(
        body_text="One two. Three!",
        font_size="16px",
        has_robots_txt=True,
        performance=perf,
        status_code=203,
    )
    assert s.word_count == 3
    assert s.sentence_count == 2
    assert s.font_size == "16px"
    assert s.has_robots_txt is True
    assert s.has_sitemap is False
    assert s.performance is perf
    assert s.status_code == 203


def test_empty_font_size_is_unmeasured():
    assert _extract(font_size="").font_size is None


def test_bare_document():
    s = extract_signals("<p>hello</p>", "http://plain.example", load_time_ms=0)
    assert s.scheme == "http"
    assert s.title == ""
    assert s.heading_counts == (0, 0, 0, 0, 0, 0)
    assert s.links == LinkSummary()
    assert s.word_count == 1
    assert s.sentence_count == 0


def test_bodyless_document_does_not_count_head_words():
    html = "<html><head><title>Acme Widgets Home</title></head><p>one two</p></html>"
    s = extract_signals(html, "https://acme.example/", load_time_ms=0)
    assert s.title == "Acme Widgets Home"
    assert s.word_count == 2


def test_microdata_is_detected():
    html = '<div itemscope itemtype="https://schema.org/BreadcrumbList"></div>'
    s = extract_signals(html, "https://acme.example/", load_time_ms=0)
    assert s.has_microdata is True
    assert s.has_breadcrumbs is True


@pytest.mark.parametrize(
    "href, expected",
    [
        ("/about", "internal"),
        ("https://acme.example/x", "internal"),
        ("HTTPS://ACME.EXAMPLE/x", "internal"),
        ("https://other.example", "external"),
        ("//other.example/x", "external"),
        ("//acme.example/x", "internal"),
        ("page.html", "relative"),
        ("mailto:team@acme.example", "relative"),
        ("#frag", None),
        ("   ", None),
    ],
)
def test_classify_href(href, expected):
    assert classify_href(href, "acme.example") == expected


def test_registrable_domain_mode_treats_subdomains_as_internal():
    href = "https://blog.acme.co.uk/post"
    assert classify_href(href, "www.acme.co.uk") == "external"
    assert classify_href(href, "www.acme.co.uk", use_registrable_domain=True) == "internal"


def test_summarize_links_skips_empty_hrefs():
    summary = summarize_links([("", "Nothing"), ("/a", ""), ("/b", "read more")], "https://acme.example/")
    assert summary == LinkSummary(internal=2, with_text=1, descriptive=0)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Click Here", False),
        ("  read more ", False),
        ("here", False),
        ("Go", False),
        ("FAQ", True),
        ("Pricing plans", True),
    ],
)
def test_is_descriptive_anchor(text, expected):
    assert is_descriptive_anchor(text) is expected


def test_word_and_sentence_counts():
    assert count_words("  one\ttwo\nthree  ") == 3
    assert count_sentences("Wait... what?! No.") == 6


def test_parse_performance_payload_validates_fields():
    perf = parse_performance_payload(
        {
            "lcp_ms": 1234.5,
            "fcp_ms": "800",
            "cls": -1,
            "inp_ms": None,
            "ttfb_ms": float("nan"),
            "dom_complete_ms": True,
            "transfer_bytes": 2048.7,
            "resource_count": "12",
            "attribution": {"lcp": "img.hero", "cls": None, "inp": 5},
        }
    )
    assert perf.lcp_ms == 1234.5
    assert perf.fcp_ms == 800.0
    assert perf.cls is None
    assert perf.inp_ms is None
    assert perf.ttfb_ms is None
    assert perf.dom_complete_ms is None
    assert perf.transfer_bytes == 2048
    assert perf.resource_count == 12
    assert perf.attribution == {"lcp": "img.hero"}


@pytest.mark.parametrize("raw", [None, {}])
def test_parse_performance_payload_empty(raw):
    assert parse_performance_payload(raw) == PerformanceSignals()


def test_parse_performance_payload_ignores_non_mapping_attribution():
    assert parse_performance_payload({"cls": 0.1, "attribution": ["x"]}).attribution == {}
