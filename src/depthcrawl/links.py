"""
Link extraction and address resolution.
"""
from __future__ import annotations

import re
from typing import List, Optional, Union
from urllib.parse import unquote, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, SoupStrainer
from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from depthcrawl.errors import MalformedLink

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)

# Schemes whose addresses must carry a host
HOST_SCHEMES: frozenset[str] = frozenset(("http", "https", "ws", "wss", "ftp"))

# Characters a host may not contain, before or after percent-decoding
FORBIDDEN_HOST_CHARS: frozenset[str] = frozenset(" #%/:<>?@[\\]^|\x7f")

BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def domain_root(base: str) -> str:
    """Return `base` with its path, query and fragment cleared."""
    parts = urlsplit(base)
    return urlunsplit((parts.scheme, parts.netloc, "/", "", ""))


def _has_forbidden_char(host: str) -> bool:
    return any(c in FORBIDDEN_HOST_CHARS or c < " " for c in host)


def check_host(address: str, raw: str) -> None:
    """
    Validate the host of an address that uses a host-based scheme.

    Raises MalformedLink for an empty host, a bad percent-escape or a
    forbidden host character. Other schemes (mailto:, data:, ...) pass.
    """
    parsed = urlsplit(address)
    if parsed.scheme.lower() not in HOST_SCHEMES:
        return

    try:
        parse_url(address)
    except LocationParseError as e:
        raise MalformedLink(raw, str(e)) from e

    host = parsed.hostname
    if not host:
        raise MalformedLink(raw, "empty host")
    if "[" in parsed.netloc:
        return  # IPv6 literal, bracket syntax checked by urlsplit
    if BAD_ESCAPE_RE.search(host):
        raise MalformedLink(raw, "invalid percent-escape in host")
    if _has_forbidden_char(host) or _has_forbidden_char(unquote(host)):
        raise MalformedLink(raw, "forbidden character in host")


def parse_absolute(raw: str) -> Optional[str]:
    """
    Parse a raw href as an absolute address.

    Returns None when `raw` is a relative reference that needs a base.
    Raises MalformedLink when `raw` cannot be parsed at all.
    """
    link = raw.strip()
    try:
        parsed = urlsplit(link)
        parsed.port  # validates the port range
    except ValueError as e:
        raise MalformedLink(raw, str(e)) from e

    if not parsed.scheme:
        return None
    check_host(link, raw)
    return link


def parse_address(raw: str) -> str:
    """Parse a seed address; relative addresses are rejected."""
    address = parse_absolute(raw)
    if address is None:
        raise MalformedLink(raw, "relative address without a base")
    return address


def extract_hrefs(body: Union[str, bytes]) -> List[str]:
    """Extract every href value from <a> tags, in document order."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    soup = BeautifulSoup(body, "lxml", parse_only=LINK_STRAINER)
    return [a["href"] for a in soup.find_all("a", href=True)]


def get_links(base: str, body: Union[str, bytes]) -> List[str]:
    """
    Return the absolute addresses linked from a page.

    Relative hrefs are resolved against the domain root of `base`
    (scheme, host and port only), not against the page's own path.
    Duplicates are kept. A single malformed href fails the whole call.
    """
    root = domain_root(base)
    links: List[str] = []
    for href in extract_hrefs(body):
        address = parse_absolute(href)
        if address is None:
            address = urljoin(root, href.strip())
            check_host(address, href)
        links.append(address)
    return links
