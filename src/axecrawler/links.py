"""Link normalization, filtering and extraction for the crawl frontier.

Every function here is pure: given the same inputs it returns the same
result and touches no shared state, so each predicate can be tested
against literal URL strings.
"""

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Set
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

from axecrawler.constants import (
    ATTACHMENT_MARKER,
    CANONICAL_SCHEME,
    MEDIA_EXTENSIONS_PATTERN,
    ROOT_RELATIVE_PATTERN,
    UPLOADS_DIRECTORY_PATTERN,
)
from axecrawler.fetcher import FetchResult

logger = logging.getLogger(__name__)

MEDIA_EXTENSIONS_RE = re.compile(MEDIA_EXTENSIONS_PATTERN, re.IGNORECASE)
UPLOADS_DIRECTORY_RE = re.compile(UPLOADS_DIRECTORY_PATTERN)
ROOT_RELATIVE_RE = re.compile(ROOT_RELATIVE_PATTERN)
HOST_LABEL_RE = re.compile(
    r"^[a-z0-9\u00a1-\uffff]([a-z0-9\u00a1-\uffff-]{0,61}[a-z0-9\u00a1-\uffff])?$",
    re.IGNORECASE,
)
TLD_RE = re.compile(r"^([a-z\u00a1-\uffff]{2,63}|xn--[a-z0-9-]{2,59})$", re.IGNORECASE)
EXPLICIT_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
DUPLICATE_SLASHES_RE = re.compile(r"/{2,}")


@dataclass(frozen=True)
class FilterConfig:
    """Crawl-time filtering policy. A whitelist, when set, overrides ignore."""

    domain: str
    ignore: Optional[str] = None
    whitelist: Optional[str] = None


# =============================================================================
# Set helpers
# =============================================================================

def union_of(*link_sets: Iterable[str]) -> Set[str]:
    """Combine any number of link sets into a new set."""
    combined: Set[str] = set()
    for links in link_sets:
        combined.update(links)
    return combined


def difference_of(links: Iterable[str], seen: Iterable[str]) -> Set[str]:
    """Return the links not present in ``seen`` as a new set."""
    return set(links).difference(seen)


# =============================================================================
# LinkNormalizer
# =============================================================================

def normalize_link(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolve an anchor reference into a canonical absolute URL.

    Relative references resolve against the scheme and host of ``base_url``
    (not its path). ``https`` is rewritten to ``http`` so each page has a
    single key in the visited set; this ignores sites whose http and https
    variants serve different content. Repeated slashes in the path are
    collapsed and fragments dropped.

    References with an explicit non-http scheme (``mailto:``, ``tel:``,
    ``javascript:``) are returned unchanged for the link filter to reject.

    Args:
        base_url: URL the page content was fetched from
        href: Raw href attribute value, or None

    Returns:
        Absolute URL string, or None if the reference cannot be resolved
    """
    if not isinstance(href, str):
        return None
    href = href.strip()
    if not href:
        return None

    if EXPLICIT_SCHEME_RE.match(href) and not href.lower().startswith(("http:", "https:")):
        return href

    base = urlparse(base_url)
    if not base.scheme or not base.netloc:
        return None

    try:
        resolved = urlparse(urljoin(f"{base.scheme}://{base.netloc}/", href))
    except ValueError:
        return None

    if resolved.scheme not in ("http", "https") or not resolved.netloc:
        return None

    path = DUPLICATE_SLASHES_RE.sub("/", resolved.path)
    return urlunparse((
        CANONICAL_SCHEME,
        resolved.netloc,
        path,
        resolved.params,
        resolved.query,
        "",
    ))


# =============================================================================
# LinkFilter sub-predicates
# =============================================================================

def _is_valid_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    labels = host.rstrip(".").split(".")
    if len(labels) < 2:
        return False
    if not all(HOST_LABEL_RE.match(label) for label in labels[:-1]):
        return False
    return bool(TLD_RE.match(labels[-1]))


def is_valid_url(url: str) -> bool:
    """Check that a string parses as an absolute http(s) URL with a real host."""
    if not isinstance(url, str) or not url:
        return False
    if any(c.isspace() or (c.isascii() and not c.isprintable()) for c in url):
        return False
    try:
        parsed = urlparse(url)
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        return False
    return _is_valid_host(parsed.hostname)


def not_media(url: str) -> bool:
    """Reject binary assets, timestamped upload folders and attachment links."""
    path = urlparse(url).path
    return (
        not UPLOADS_DIRECTORY_RE.search(path)
        and ATTACHMENT_MARKER not in url
        and not MEDIA_EXTENSIONS_RE.search(path)
    )


def not_mailto(url: str) -> bool:
    return "mailto:" not in url.lower()


def match_domain(url: str, domain: str) -> bool:
    """True if the URL's host contains ``domain`` or the URL is root-relative."""
    if ROOT_RELATIVE_RE.match(url):
        return True
    netloc = urlparse(url).netloc.lower()
    return bool(domain) and domain.lower() in netloc


def matches_policy(
    url: str,
    ignore: Optional[str] = None,
    whitelist: Optional[str] = None,
) -> bool:
    """Apply the ignore/whitelist regex policy.

    When a whitelist is configured the URL must match it and ``ignore`` is
    not consulted at all.
    """
    if whitelist:
        return re.search(whitelist, url) is not None
    if ignore:
        return re.search(ignore, url) is None
    return True


class LinkFilter:
    """Composed predicate deciding whether a discovered URL enters the frontier.

    All five checks must pass: valid URL syntax, not a media asset, not a
    mailto link, same domain, and the ignore/whitelist policy.
    """

    def __init__(self, config: FilterConfig):
        self.config = config

    def __call__(self, url: str) -> bool:
        if not isinstance(url, str):
            return False
        return (
            is_valid_url(url)
            and not_media(url)
            and not_mailto(url)
            and match_domain(url, self.config.domain)
            and matches_policy(url, self.config.ignore, self.config.whitelist)
        )


# =============================================================================
# LinkExtractor
# =============================================================================

def extract_links(result: Optional[FetchResult], link_filter: LinkFilter) -> Set[str]:
    """Collect the filtered, normalized links found on one fetched page.

    A missing result or a non-success status contributes no links.

    Args:
        result: Fetched page, or None when the fetch failed
        link_filter: Predicate applied to every normalized link

    Returns:
        Deduplicated set of absolute URLs
    """
    if result is None or not result.ok:
        if result is not None:
            logger.debug(f"Website returned an error: {result.status} for {result.url}")
        return set()

    base_url = result.final_url or result.url
    soup = BeautifulSoup(result.body or "", "html.parser")

    links = set()
    for anchor in soup.find_all("a"):
        url = normalize_link(base_url, anchor.get("href"))
        if url is None:
            continue
        if link_filter(url):
            links.add(url)
    return links
