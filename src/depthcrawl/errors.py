"""
Exceptions raised by the crawler.
"""
from __future__ import annotations

from typing import Optional


class CrawlError(Exception):
    """Base class for failures that abort a crawl."""


class FetchError(CrawlError):
    """A page could not be fetched (transport failure or non-2xx status)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class MalformedLink(CrawlError):
    """An href is neither a valid absolute nor a valid relative reference."""

    def __init__(self, link: str, reason: str = "") -> None:
        self.link = link
        self.reason = reason
        message = f"Malformed link found: {link}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
