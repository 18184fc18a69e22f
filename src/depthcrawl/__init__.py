"""
Depth-bounded web crawler that recursively follows every link from a start URL,
fetching each discovered page concurrently until a maximum depth is reached.
"""
from depthcrawl.core import crawl, run_crawl, fetch_page, CrawlStats
from depthcrawl.errors import CrawlError, FetchError, MalformedLink
from depthcrawl.links import get_links

__version__ = "1.0.0"
__all__ = [
    "crawl",
    "run_crawl",
    "fetch_page",
    "get_links",
    "CrawlStats",
    "CrawlError",
    "FetchError",
    "MalformedLink",
]
