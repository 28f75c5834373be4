"""Shared fixtures for axe-crawler tests."""

from pathlib import Path
from typing import Dict, List

import pytest

from axecrawler.config import CrawlerConfig, ViewPort
from axecrawler.errors import FetchError
from axecrawler.fetcher import FetchResult
from axecrawler.tester import AxeReport

HTML_DIR = Path(__file__).parent / "html"

FIXTURE_DOMAIN = "test.test"
PAGE1 = "http://test.test"
PAGE2 = "http://test.test/page2.html"
PAGE3 = "http://test.test/page3.html"


class FakeFetcher:
    """Serves the pages in tests/html and records every requested URL."""

    def __init__(self, pages: Dict[str, str], failing: Dict[str, int] = None):
        self.pages = pages
        self.failing = failing or {}
        self.requested: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        if url in self.failing:
            raise FetchError(url, "Website returned an error", self.failing[url])
        if url not in self.pages:
            raise FetchError(url, "Not found", 404)
        return FetchResult(url=url, status=200, body=self.pages[url], final_url=url)


class FakeTester:
    """Page tester returning one violation and one pass per test case."""

    def __init__(self):
        self.tested = []

    async def test(self, test_case) -> AxeReport:
        self.tested.append(test_case)
        return AxeReport(
            url=test_case.url,
            view_port=test_case.view_port,
            violations=[sample_violation()],
            passes=[sample_pass()],
        )


def sample_violation():
    return {
        "id": "image-alt",
        "impact": "critical",
        "description": "Ensures <img> elements have alternate text",
        "nodes": [
            {
                "html": '<img src="logo.png">',
                "any": [{"message": "Element does not have an alt attribute"}],
                "all": [],
                "none": [{"message": "Element has no title attribute"}],
            }
        ],
    }


def sample_pass():
    return {
        "id": "html-has-lang",
        "impact": None,
        "description": "Ensures every HTML document has a lang attribute",
        "nodes": [{"html": '<html lang="en">', "any": [], "all": [], "none": []}],
    }


@pytest.fixture
def fixture_pages():
    return {
        PAGE1: (HTML_DIR / "page1.html").read_text(),
        PAGE2: (HTML_DIR / "page2.html").read_text(),
        PAGE3: (HTML_DIR / "page3.html").read_text(),
    }


@pytest.fixture
def fake_fetcher(fixture_pages):
    return FakeFetcher(fixture_pages)


@pytest.fixture
def fake_tester():
    return FakeTester()


@pytest.fixture
def view_ports():
    return [
        ViewPort(name="mobile", width=360, height=640),
        ViewPort(name="desktop", width=1440, height=900),
    ]


@pytest.fixture
def make_config(tmp_path, view_ports):
    """Build a CrawlerConfig for the fixture site writing reports under tmp_path."""
    def _make(**overrides):
        options = {
            "domain": FIXTURE_DOMAIN,
            "view_ports": view_ports,
            "output": str(tmp_path / "reports"),
        }
        options.update(overrides)
        return CrawlerConfig(**options)
    return _make


@pytest.fixture
def make_report(view_ports):
    """Build an AxeReport with one sample violation and one sample pass."""
    def _make(url, view_port=None, violations=None, passes=None):
        return AxeReport(
            url=url,
            view_port=view_port or view_ports[0],
            violations=[sample_violation()] if violations is None else violations,
            passes=[sample_pass()] if passes is None else passes,
        )
    return _make


@pytest.fixture
def failing_fetcher(fixture_pages):
    """Fetcher for the fixture site where page 2 returns a server error."""
    return FakeFetcher(fixture_pages, failing={PAGE2: 500})
