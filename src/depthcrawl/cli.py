"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from depthcrawl.core import DEFAULT_MAX_DEPTH, DEFAULT_USER_AGENT, CrawlStats, run_crawl
from depthcrawl.errors import CrawlError

DEFAULT_START_URL = "https://www.meesho.com/"


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages fetched:          {stats.pages_fetched}\n")
    sys.stderr.write(f"Links followed:         {stats.links_followed}\n")
    sys.stderr.write(f"Deepest level fetched:  {stats.deepest_level}\n")
    sys.stderr.write("\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recursively crawl every link from a start URL down to a maximum depth."
    )
    parser.add_argument(
        "start_url",
        nargs="?",
        default=DEFAULT_START_URL,
        help=f"Start URL (default: {DEFAULT_START_URL})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest level to fetch; the start URL is level 1 (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--quiet", action="store_true", help="Hide progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    args = build_parser().parse_args(argv)

    try:
        stats = run_crawl(
            [args.start_url],
            args.max_depth,
            timeout_s=args.timeout,
            user_agent=args.user_agent,
            verbose=not args.quiet,
        )
    except CrawlError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1

    if not args.quiet:
        print_summary(stats)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
