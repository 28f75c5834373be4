"""Breadth-first crawl frontier that discovers every reachable page of a domain."""

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Set
from urllib.parse import urlparse

from axecrawler.config import CrawlerConfig
from axecrawler.errors import FetchError, InvalidDomainError
from axecrawler.fetcher import FetchResult, PageFetcher
from axecrawler.links import (
    LinkFilter,
    difference_of,
    extract_links,
    is_valid_url,
    union_of,
)

logger = logging.getLogger(__name__)


class CrawlState(str, Enum):
    INIT = "init"
    SEEDING = "seeding"
    EXPANDING = "expanding"
    TERMINATED = "terminated"


class CrawlFrontier:
    """Discovers the pages of a domain level by level (BFS).

    Processes the site one depth round at a time:
    - Round 0: fetch the domain root
    - Round 1: fetch every new page linked from round 0
    - etc.

    All fetches of a round run concurrently; the visited set is only
    updated after the whole round has resolved, so fetches never race on
    it. The crawl stops when ``depth`` rounds have run or a round finds no
    new links. A page that fails to load contributes no links and does not
    stop the crawl.

    One instance owns its visited set and frontier for one crawl at a time.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: PageFetcher,
        link_filter: Optional[LinkFilter] = None,
    ):
        """Initialize the crawl frontier.

        Args:
            config: Finalized run configuration (domain, depth, filter policy)
            fetcher: Collaborator used to retrieve pages
            link_filter: Optional predicate overriding the configured filter
        """
        self.domain = config.domain
        self.depth = config.depth
        self.seed_url = config.seed_url
        self.fetcher = fetcher
        self.link_filter = link_filter or LinkFilter(config.filter_config)

        self.state = CrawlState.INIT
        self.rounds = 0
        self.fetch_count = 0
        self.failed_urls: Dict[str, str] = {}

        self._visited: Set[str] = set()
        self._frontier: Set[str] = set()

    @property
    def visited_urls(self) -> Set[str]:
        """Copy of every URL discovered so far."""
        return set(self._visited)

    def _validate_seed(self) -> None:
        if not is_valid_url(self.seed_url) or urlparse(self.seed_url).netloc != self.domain:
            logger.error(f"Invalid domain {self.domain!r}")
            raise InvalidDomainError(self.seed_url)

    async def crawl(self) -> Set[str]:
        """Crawl the domain and return every URL discovered within ``depth`` hops.

        Returns:
            Set of absolute URLs, always including the seed URL

        Raises:
            InvalidDomainError: If ``http://{domain}`` is not a valid URL
        """
        self.state = CrawlState.INIT
        self.rounds = 0
        self.fetch_count = 0
        self.failed_urls = {}
        self._validate_seed()

        self.state = CrawlState.SEEDING
        self._visited = {self.seed_url}
        self._frontier = {self.seed_url}

        if self.depth == 0:
            logger.debug(f"Depth 0, returning {self.seed_url} without crawling")
            self.state = CrawlState.TERMINATED
            return self.visited_urls

        logger.info(f"Crawling {self.seed_url} to depth of: {self.depth}")

        for level in range(self.depth):
            self.state = CrawlState.EXPANDING
            logger.debug(f"Crawling for links at DEPTH {level} ({len(self._frontier)} pages)")

            new_frontier = await self._expand(sorted(self._frontier))
            self.rounds += 1

            if not new_frontier:
                logger.debug(f"No new links found at DEPTH {level}, stopping early")
                break

            self._visited.update(new_frontier)
            self._frontier = new_frontier
            logger.debug(f"Found {len(new_frontier)} new links at DEPTH {level}")

        self.state = CrawlState.TERMINATED
        logger.info(f"Found {len(self._visited)} links within {self.domain}")
        return self.visited_urls

    async def _expand(self, frontier: List[str]) -> Set[str]:
        """Fetch one round of pages and return the links not yet visited."""
        results = await asyncio.gather(*(self._fetch(url) for url in frontier))
        new_links = union_of(*(extract_links(result, self.link_filter) for result in results))
        return difference_of(new_links, self._visited)

    async def _fetch(self, url: str) -> Optional[FetchResult]:
        self.fetch_count += 1
        try:
            return await self.fetcher.fetch(url)
        except FetchError as e:
            self.failed_urls[url] = str(e)
            logger.debug(f"Skipping links from {url}: {e}")
            return None
