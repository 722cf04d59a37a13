# example.py
# A small example demonstrating how to use the seo_auditor
# library to audit a page and print a per-category breakdown.

import asyncio
import logging

from seo_auditor import InspectionError, audit_url

# --- Configuration ---
# You can enable logging to see the inspector's progress and decisions.
# This is helpful for debugging.
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# The page you want to audit.
TARGET_URL = "https://www.python.org/"

CATEGORIES = [
    ("Technical SEO", "technical_seo"),
    ("On-Page SEO", "on_page_seo"),
    ("Content Quality", "content_quality"),
    ("Link Structure", "link_structure"),
    ("Schema Markup", "schema_markup"),
    ("Security", "security"),
    ("User Experience", "user_experience"),
]


async def main():
    """
    Main function to run the audit and print the results.
    """
    print(f"[*] Starting audit for: {TARGET_URL}\n")

    try:
        # This is the primary API call. It renders the page in Chromium,
        # measures Web Vitals, probes robots.txt and sitemap.xml and scores
        # everything. Pass renderer="httpx" to skip the browser.
        result = await audit_url(TARGET_URL)
    except InspectionError as e:
        print(f"\n[!] The page could not be loaded: {e}")
        return

    print("\n--- AUDIT COMPLETE ---")
    print(f"Overall Score: {result.overall_score:.2f} (Grade: {result.grade})")

    print("\n--- Categories ---")
    for heading, attr in CATEGORIES:
        category = getattr(result, attr)
        print(f"{heading:<16} {category.score:>5.0f}  ({len(category.issues)} issues)")

    if result.performance is not None:
        perf = result.performance
        print(f"\nPerformance (not part of the overall score): {perf.score:.2f}")
        for name, value, rating in [
            ("LCP", perf.lcp_ms, perf.lcp_rating),
            ("CLS", perf.cls, perf.cls_rating),
            ("INP", perf.inp_ms, perf.inp_rating),
        ]:
            shown = "not captured" if value is None else f"{value:.3f}".rstrip("0").rstrip(".")
            print(f"  {name}: {shown} ({rating or '-'})")

    if result.recommendations:
        print("\n--- Top Recommendations ---")
        for rec in result.recommendations[:10]:
            print(f"- {rec}")


if __name__ == "__main__":
    # The library is async, so we use asyncio.run() to start it.
    asyncio.run(main())
