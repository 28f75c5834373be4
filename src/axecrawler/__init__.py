"""Crawl a domain and test its pages with the axe-core accessibility engine."""

__version__ = "0.1.0"

from axecrawler.config import (
    CrawlerConfig,
    ViewPort,
    DEFAULT_VIEWPORTS,
    build_config,
    parse_viewports_arg,
    settings,
)
from axecrawler.crawler import CrawlFrontier, CrawlState
from axecrawler.errors import (
    AxeCrawlerError,
    BrowserStartError,
    FetchError,
    InvalidDomainError,
    PageTestError,
    SamplingConfigWarning,
)
from axecrawler.fetcher import FetchResult, HttpFetcher, PageFetcher
from axecrawler.links import FilterConfig, LinkFilter, extract_links, normalize_link
from axecrawler.sampler import select_sample
from axecrawler.queue_builder import TestCase, build_queue, num_to_check
from axecrawler.tester import AxeReport, PageTester, PlaywrightPageTester
from axecrawler.database import ResultStore
from axecrawler.runner import TestRunner
from axecrawler.reporters import HTMLReporter, JSONReporter

__all__ = [
    # Configuration
    "CrawlerConfig",
    "ViewPort",
    "DEFAULT_VIEWPORTS",
    "build_config",
    "parse_viewports_arg",
    "settings",
    # Crawl
    "CrawlFrontier",
    "CrawlState",
    "FetchResult",
    "HttpFetcher",
    "PageFetcher",
    "FilterConfig",
    "LinkFilter",
    "extract_links",
    "normalize_link",
    # Testing
    "select_sample",
    "TestCase",
    "build_queue",
    "num_to_check",
    "AxeReport",
    "PageTester",
    "PlaywrightPageTester",
    "ResultStore",
    "TestRunner",
    "HTMLReporter",
    "JSONReporter",
    # Errors
    "AxeCrawlerError",
    "BrowserStartError",
    "FetchError",
    "InvalidDomainError",
    "PageTestError",
    "SamplingConfigWarning",
]
