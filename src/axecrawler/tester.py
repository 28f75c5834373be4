"""
Page tester

Loads a page in a headless browser at a given viewport, injects the
axe-core engine and collects its violation and pass records.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from axecrawler.config import ViewPort
from axecrawler.constants import DEFAULT_AXE_SCRIPT_URL, DEFAULT_PAGE_LOAD_TIMEOUT_MS
from axecrawler.errors import BrowserStartError, PageTestError
from axecrawler.queue_builder import TestCase

logger = logging.getLogger(__name__)

AXE_RUN_SCRIPT = "() => axe.run()"


@dataclass
class AxeReport:
    """axe-core results for one url at one viewport."""
    url: str
    view_port: ViewPort
    violations: List[Dict[str, Any]] = field(default_factory=list)
    passes: List[Dict[str, Any]] = field(default_factory=list)


class PageTester(Protocol):
    """Runs the accessibility audit for a single test case."""

    async def test(self, test_case: TestCase) -> AxeReport:
        ...


class PlaywrightPageTester:
    """Runs axe-core inside Chromium pages driven by Playwright."""

    def __init__(
        self,
        axe_script_url: str = DEFAULT_AXE_SCRIPT_URL,
        timeout: int = DEFAULT_PAGE_LOAD_TIMEOUT_MS,
        headless: bool = True,
        browser_type: str = "chromium",
    ):
        """
        Initialize the page tester.

        Args:
            axe_script_url: URL of the axe-core build injected into each page
            timeout: Page load timeout in milliseconds
            headless: Run the browser without a visible window
            browser_type: Playwright browser engine (chromium, firefox, webkit)
        """
        self.axe_script_url = axe_script_url
        self.timeout = timeout
        self.headless = headless
        self.browser_type = browser_type
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "PlaywrightPageTester":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def start(self) -> None:
        """Launch the browser shared by every test case of a run."""
        if self._browser:
            return
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_type)
            self._browser = await launcher.launch(headless=self.headless)
        except PlaywrightError as e:
            await self.stop()
            raise BrowserStartError(self.browser_type, str(e)) from e
        logger.debug(f"Launched {self.browser_type} (headless={self.headless})")

    async def stop(self) -> None:
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def test(self, test_case: TestCase) -> AxeReport:
        """Audit one url at one viewport.

        Each test case runs in its own browser context sized to the viewport.

        Raises:
            PageTestError: If the page cannot be loaded or axe-core fails
        """
        url = test_case.url
        view_port = test_case.view_port

        if not self._browser:
            await self.start()

        context = None
        try:
            context = await self._browser.new_context(
                viewport={"width": view_port.width, "height": view_port.height}
            )
            page = await context.new_page()
            await page.goto(url, timeout=self.timeout, wait_until="load")
            logger.info(f"Testing {url} {view_port.name}")

            await page.add_script_tag(url=self.axe_script_url)
            results = await page.evaluate(AXE_RUN_SCRIPT)
            logger.debug(f"Results for {url} {view_port.name} received")
        except PlaywrightError as e:
            raise PageTestError(url, view_port.label, str(e)) from e
        finally:
            if context:
                await context.close()

        return AxeReport(
            url=url,
            view_port=view_port,
            violations=results.get("violations", []),
            passes=results.get("passes", []),
        )
