"""Exceptions raised across the crawl and test phases."""

from typing import Optional


class AxeCrawlerError(Exception):
    """Base class for axe-crawler errors."""


class InvalidDomainError(AxeCrawlerError, ValueError):
    """Raised when the seed URL built from the domain is not a valid URL."""
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid url: {url}")


class FetchError(AxeCrawlerError):
    """Raised by a page fetcher when a single page cannot be retrieved."""
    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message}: {url}")


class PageTestError(AxeCrawlerError):
    """Raised when the page tester fails on a test case. Fatal for the run."""
    def __init__(self, url: str, view_port: str, message: str):
        self.url = url
        self.view_port = view_port
        super().__init__(f"Error testing {url} at {view_port}: {message}")


class SamplingConfigWarning(UserWarning):
    """Issued when an out-of-range sampling rate is replaced by a full sample."""


class BrowserStartError(AxeCrawlerError):
    """Raised when the browser shared by the test phase cannot be launched."""
    def __init__(self, browser_type: str, message: str):
        self.browser_type = browser_type
        super().__init__(f"Could not launch {browser_type}: {message}")
