# seo_auditor/cli.py
# Defines the command-line interface using argparse.

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import IO, Sequence

from seo_auditor import __version__
from seo_auditor.api import audit_url
from seo_auditor.cache import OS_DEFAULT, CacheConfig, ProbeCache
from seo_auditor.errors import InspectionError
from seo_auditor.report import render_json, render_markdown
from seo_auditor.ui import (
    render_audit_header,
    render_category_section,
    render_error,
    render_recommendations_section,
    render_score_line,
)

log = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments common to both 'audit' and 'report' commands."""
    parser.add_argument("url", help="The page URL to audit.")

    inspect_group = parser.add_argument_group("inspection arguments")
    inspect_group.add_argument(
        "--static",
        action="store_true",
        help="Fetch the HTML with httpx instead of rendering it in a browser "
        "(no JavaScript, no Web Vitals).",
    )
    inspect_group.add_argument(
        "--no-performance",
        action="store_true",
        help="Skip Web Vitals measurement.",
    )
    inspect_group.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        default=None,
        help="Navigation timeout in seconds (default: from config, 30).",
    )


def _human_bytes(n: int) -> str:
    # Compact human-readable bytes
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    v = float(n)
    while v >= 1024 and i < len(units) - 1:
        v /= 1024.0
        i += 1
    # max 2 decimals, strip trailing zeros
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return f"{s} {units[i]}"


def _init_probe_cache(cache_dir: str | None, os_default: bool) -> ProbeCache:
    cfg = CacheConfig()
    if os_default:
        cfg.directory = OS_DEFAULT
    if cache_dir:
        cfg.directory = cache_dir
    return ProbeCache(cfg)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Audit a web page for SEO, content, security and performance.",
        prog="seo_auditor",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging output to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- audit ---
    audit_parser = subparsers.add_parser(
        "audit", help="Audit a page and print a summary with recommendations."
    )
    _add_common_args(audit_parser)

    # --- report ---
    report_parser = subparsers.add_parser(
        "report", help="Audit a page and write the full report."
    )
    _add_common_args(report_parser)
    report_parser.add_argument(
        "--format",
        dest="report_format",
        choices=["markdown", "json"],
        default="markdown",
        help="Report format (default: markdown).",
    )
    report_parser.add_argument(
        "--output",
        metavar="FILEPATH",
        default=None,
        help="Write the report to this file instead of stdout.",
    )

    # --- cache ---
    cache_parser = subparsers.add_parser(
        "cache", help="Manage the on-disk robots.txt/sitemap.xml probe cache."
    )
    cache_parser.add_argument(
        "--dir",
        dest="cache_dir",
        metavar="PATH",
        default=None,
        help="Cache directory to operate on (defaults to library default).",
    )
    cache_parser.add_argument(
        "--os-default",
        dest="cache_os_default",
        action="store_true",
        help="Use the OS-specific default cache directory.",
    )
    cache_sub = cache_parser.add_subparsers(dest="cache_cmd", required=True)
    cache_sub.add_parser("clear", help="Wipe the entire cache directory.")
    cache_sub.add_parser("stats", help="Show total items and size on disk.")
    cache_inspect = cache_sub.add_parser(
        "inspect", help="Dump the cached probe outcome for a specific URL."
    )
    cache_inspect.add_argument("url", help="The exact probed URL (e.g. https://example.com/robots.txt).")
    return parser


def _run_cache_command(args: argparse.Namespace, stdout: IO[str]) -> int:
    pc = _init_probe_cache(args.cache_dir, args.cache_os_default)
    try:
        if args.cache_cmd == "clear":
            pc.clear_all()
            print(f"Cache cleared at: {pc.directory or '(disabled)'}", file=stdout)
            return 0

        if args.cache_cmd == "stats":
            st = pc.stats()
            bytes_on_disk = int(st.get("bytes", 0))
            out = {
                "directory": st.get("directory", ""),
                "items": int(st.get("items", 0)),
                "bytes": bytes_on_disk,
                "human_bytes": _human_bytes(bytes_on_disk),
            }
            print(json.dumps(out, indent=2), file=stdout)
            return 0

        # inspect
        data = pc.get(args.url)
        if data is None:
            print("Cache miss", file=stdout)
            return 2
        print(json.dumps(data, indent=2), file=stdout)
        return 0
    finally:
        pc.close()


async def async_main(
    argv: Sequence[str] | None = None, stdout: IO[str] | None = None
) -> int:
    """Async entry point for the command-line interface."""
    stdout = stdout or sys.stdout

    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "cache":
        return _run_cache_command(args, stdout)

    api_kwargs = {
        "renderer": "httpx" if args.static else None,
        "collect_performance": False if args.no_performance else None,
        "navigation_timeout": args.timeout,
    }

    if args.command == "audit":
        render_audit_header(args.url, file=stdout)
    try:
        result = await audit_url(args.url, **api_kwargs)  # type: ignore[arg-type]
    except InspectionError as e:
        log.debug("Inspection failed", exc_info=True)
        render_error(str(e), file=stdout)
        return 1

    if args.command == "audit":
        render_score_line(result, file=stdout)
        render_category_section(result, file=stdout)
        render_recommendations_section(result.recommendations, file=stdout)
        return 0

    # args.command == "report"
    text = render_json(result) if args.report_format == "json" else render_markdown(result)
    if args.output is None:
        stdout.write(text if text.endswith("\n") else text + "\n")
        return 0
    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    print(f"Report written to {args.output}", file=stdout)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Synchronous wrapper for the CLI entry point."""
    return asyncio.run(async_main(argv))


if __name__ == "__main__":
    sys.exit(main())
