"""Turn the crawled URL set into test cases and run them."""

import asyncio
import logging
import random
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from axecrawler.config import CrawlerConfig
from axecrawler.database import ResultStore
from axecrawler.errors import PageTestError
from axecrawler.queue_builder import TestCase, build_queue, num_to_check
from axecrawler.reporters import HTMLReporter, JSONReporter
from axecrawler.sampler import select_sample
from axecrawler.tester import PageTester

logger = logging.getLogger(__name__)


class TestRunner:
    """Queues url x viewport test cases, runs them and writes the reports.

    Any failure of the page tester aborts the whole run: pending test cases
    are cancelled and the error is re-raised, so a partial report is never
    written silently.
    """
    __test__ = False  # not a pytest test class

    def __init__(
        self,
        config: CrawlerConfig,
        tester: PageTester,
        store: Optional[ResultStore],
        rng: Optional[random.Random] = None,
    ):
        """Initialize the test runner.

        Args:
            config: Finalized run configuration
            tester: Collaborator that audits one test case
            store: Result store receiving every report (None for a dry run)
            rng: Optional random source for sampling
        """
        self.config = config
        self.tester = tester
        self.store = store
        self.rng = rng
        self.completed = 0
        self._queue: List[TestCase] = []

    @property
    def test_cases(self) -> Tuple[TestCase, ...]:
        return tuple(self._queue)

    def queue(self, urls: Iterable[str]) -> List[TestCase]:
        """Prepare the test cases for a set of crawled urls.

        URLs are sorted, sampled, capped at ``check`` and expanded across the
        configured viewports.

        Args:
            urls: URLs discovered by the crawl

        Returns:
            Copy of the queued test cases
        """
        sampled = select_sample(sorted(urls), self.config.random, self.rng)
        total = num_to_check(self.config.check, len(sampled))
        logger.info(f"Total urls to test: {total}")

        self._queue = build_queue(sampled, self.config.check, self.config.view_ports)
        self.completed = 0
        return list(self._queue)

    async def run(self) -> int:
        """Run every queued test case with bounded concurrency.

        Returns:
            Number of test cases completed

        Raises:
            PageTestError: On the first failing test case
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrent)

        async def run_case(test_case: TestCase) -> None:
            async with semaphore:
                try:
                    report = await self.tester.test(test_case)
                except PageTestError:
                    raise
                except Exception as e:
                    raise PageTestError(test_case.url, test_case.view_port.label, str(e)) from e
            self.store.create(report)
            self.completed += 1

        tasks = [asyncio.create_task(run_case(test_case)) for test_case in self._queue]
        try:
            await asyncio.gather(*tasks)
        except PageTestError as e:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error(f"Error encountered testing pages: {e}")
            raise

        logger.info(f"Completed {self.completed} test cases")
        return self.completed

    def report(self) -> Tuple[Path, Path]:
        """Write the JSON and HTML reports.

        Returns:
            Paths of the JSON and HTML report files
        """
        logger.info("Saving JSON report")
        json_path = JSONReporter(self.config, self.store).write()

        logger.info("Saving HTML Report")
        html_path = HTMLReporter(self.config, self.store).write()
        return json_path, html_path
