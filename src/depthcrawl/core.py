"""
Core crawling logic: depth-bounded concurrent traversal.
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional, Sequence, Union

import requests

from depthcrawl.errors import FetchError
from depthcrawl.links import get_links, parse_address

DEFAULT_MAX_DEPTH = 2
DEFAULT_USER_AGENT = "depthcrawl/1.0"

# Blocking fetch collaborator: address in, page body out
Fetch = Callable[[str], Union[str, bytes]]


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_fetched: int = 0
    links_followed: int = 0
    deepest_level: int = 0

    def record_page(self, depth: int, links: int) -> None:
        """Record one fetched page and the number of links it yielded."""
        self.pages_fetched += 1
        self.links_followed += links
        self.deepest_level = max(self.deepest_level, depth)


def fetch_page(session: requests.Session, url: str, timeout_s: Optional[float] = None) -> str:
    """
    Fetch a page body over HTTP(S).

    Raises:
        FetchError: on transport failure or a non-success status code.
    """
    try:
        resp = session.get(url, timeout=timeout_s, allow_redirects=True)
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e

    if not resp.ok:
        raise FetchError(url, f"HTTP {resp.status_code}", resp.status_code)
    return resp.text


def print_level(current: int, max_depth: int, frontier: Sequence[str]) -> None:
    """Print the depth and frontier of a level to stderr."""
    sys.stderr.write(f"Current depth: {current}, max depth: {max_depth}\n")
    sys.stderr.write(f"Crawling: {list(frontier)}\n")
    sys.stderr.flush()


def print_line(message: str) -> None:
    """Print a single progress line to stderr."""
    sys.stderr.write(message + "\n")
    sys.stderr.flush()


async def crawl(
    frontier: Sequence[str],
    current: int,
    max_depth: int,
    *,
    fetch: Fetch,
    stats: Optional[CrawlStats] = None,
    verbose: bool = True,
) -> None:
    """
    Crawl every address in `frontier` concurrently, recursing on the links
    found until `current` exceeds `max_depth`.

    One task is spawned per address, with no concurrency cap and no
    deduplication. All tasks of a level are awaited before the level
    returns; none is cancelled when a sibling fails. The first failure in
    frontier order is then re-raised.

    Args:
        frontier: Absolute addresses to fetch at this level.
        current: Depth of this level (the seed level is 1).
        max_depth: Deepest level that is still fetched.
        fetch: Blocking callable returning the body of an address. It runs
               in a worker thread.
        stats: Optional statistics accumulator.
        verbose: Whether to print progress information.
    """
    if current > max_depth:
        if verbose:
            print_line("Reached max depth")
        return

    if verbose:
        print_level(current, max_depth, frontier)

    tasks = [
        asyncio.create_task(_traverse(url, current, max_depth, fetch, stats, verbose))
        for url in frontier
    ]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    for result in results:
        if isinstance(result, BaseException):
            raise result


async def _traverse(
    url: str,
    current: int,
    max_depth: int,
    fetch: Fetch,
    stats: Optional[CrawlStats],
    verbose: bool,
) -> None:
    """Fetch one address, extract its links and crawl them one level deeper."""
    if verbose:
        print_line(f"Getting: {url}")

    body = await asyncio.to_thread(fetch, url)
    links = get_links(url, body)

    if stats is not None:
        stats.record_page(current, len(links))
    if verbose:
        print_line(f"Following: {links}")

    await crawl(links, current + 1, max_depth, fetch=fetch, stats=stats, verbose=verbose)


def run_crawl(
    seeds: Sequence[str],
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    fetch: Optional[Fetch] = None,
    timeout_s: Optional[float] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    verbose: bool = True,
) -> CrawlStats:
    """
    Crawl from the seed addresses down to `max_depth` and return statistics.

    Args:
        seeds: Absolute start addresses, crawled at depth 1.
        max_depth: Deepest level that is fetched.
        fetch: Fetch collaborator. Defaults to `fetch_page` over a
               `requests.Session`.
        timeout_s: HTTP request timeout in seconds (None waits indefinitely).
        user_agent: User-Agent header for the default session.
        verbose: Whether to print progress information.

    Raises:
        CrawlError: the first failure encountered anywhere in the crawl.
    """
    frontier: List[str] = [parse_address(seed) for seed in seeds]
    stats = CrawlStats()

    session: Optional[requests.Session] = None
    if fetch is None:
        session = requests.Session()
        session.headers["User-Agent"] = user_agent
        fetch = partial(fetch_page, session, timeout_s=timeout_s)

    try:
        asyncio.run(crawl(frontier, 1, max_depth, fetch=fetch, stats=stats, verbose=verbose))
    finally:
        if session is not None:
            session.close()

    return stats
