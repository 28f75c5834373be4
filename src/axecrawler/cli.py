"""Command-line interface for axe-crawler."""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from axecrawler.config import CrawlerConfig, build_config, parse_viewports_arg
from axecrawler.crawler import CrawlFrontier
from axecrawler.database import ResultStore
from axecrawler.errors import AxeCrawlerError, InvalidDomainError
from axecrawler.fetcher import HttpFetcher, PageFetcher
from axecrawler.logging_config import get_logger, setup_logging
from axecrawler.runner import TestRunner
from axecrawler.tester import PageTester, PlaywrightPageTester

logger = get_logger(__name__)


async def run_audit(
    config: CrawlerConfig,
    fetcher: Optional[PageFetcher] = None,
    tester: Optional[PageTester] = None,
    store: Optional[ResultStore] = None,
) -> TestRunner:
    """Crawl the domain, test the queued pages and write the reports.

    Args:
        config: Finalized run configuration
        fetcher: Optional page fetcher (defaults to an HttpFetcher)
        tester: Optional page tester (defaults to a PlaywrightPageTester)
        store: Optional result store (defaults to one built from config)

    Returns:
        The TestRunner holding the queued test cases

    Raises:
        InvalidDomainError: If the domain does not form a valid URL
        BrowserStartError: If the browser cannot be launched
        PageTestError: If any page test fails
    """
    owns_fetcher = fetcher is None
    if owns_fetcher:
        fetcher = HttpFetcher(
            timeout=config.timeout,
            user_agent=config.user_agent,
            max_retries=config.max_retries,
        )
    try:
        urls = await CrawlFrontier(config, fetcher).crawl()
    finally:
        if owns_fetcher:
            await fetcher.close()

    owns_tester = tester is None
    if owns_tester:
        tester = PlaywrightPageTester(axe_script_url=config.axe_script_url)

    if config.dry_run:
        # No results are written, so an existing file store is left untouched
        runner = TestRunner(config, tester, store)
        runner.queue(urls)
        logger.info(f"Dry run: {len(urls)} urls found, nothing tested")
        for url in sorted(urls):
            logger.debug(f"Found {url}")
        return runner

    owns_store = store is None
    if owns_store:
        store = ResultStore(config.db_type, config.db_path)
    runner = TestRunner(config, tester, store)
    runner.queue(urls)

    try:
        if owns_tester:
            await tester.start()
        await runner.run()
        runner.report()
    finally:
        if owns_tester:
            await tester.stop()
        if owns_store:
            store.close()

    return runner


def _cli_options(args: argparse.Namespace) -> Dict[str, Any]:
    options = {
        "domain": args.domain,
        "depth": args.depth,
        "check": args.check,
        "random": args.random,
        "ignore": args.ignore,
        "whitelist": args.whitelist,
        "output": args.output,
        "db_type": args.db,
        "verbose": args.verbose,
        "quiet": args.quiet or None,
        "dry_run": args.dry_run or None,
    }
    if args.view_ports:
        options["viewPorts"] = parse_viewports_arg(args.view_ports)
    return options


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="axe-crawler",
        description="Crawl a domain and test its pages with the axe-core accessibility engine",
    )
    parser.add_argument("domain", help="Domain to crawl, without scheme (e.g. example.com)")
    parser.add_argument(
        "--depth",
        type=int,
        help="Levels of links to follow from the home page (default: 5)",
    )
    parser.add_argument(
        "--check",
        type=int,
        help="Maximum number of urls to test (default: all)",
    )
    parser.add_argument(
        "--random",
        type=float,
        help="Randomly sample this fraction of the crawled urls, between 0 and 1",
    )
    parser.add_argument("--ignore", help="Regular expression of urls to skip")
    parser.add_argument(
        "--whitelist",
        help="Regular expression urls must match; overrides --ignore",
    )
    parser.add_argument(
        "--viewPorts",
        dest="view_ports",
        help="Comma separated viewports as name:WIDTHxHEIGHT (e.g. mobile:360x640,desktop:1440x900)",
    )
    parser.add_argument(
        "--configFile",
        dest="config_file",
        help="JSON options file (default: ./.axe-crawler.json)",
    )
    parser.add_argument(
        "--output",
        help="Prefix of the report files (default: reports)",
    )
    parser.add_argument(
        "--db",
        choices=["memory", "file"],
        help="Where to keep results while testing (default: memory)",
    )
    parser.add_argument(
        "--verbose",
        choices=["debug", "info", "warning", "error"],
        help="Set logging verbosity (default: error)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Silence all logging",
    )
    parser.add_argument(
        "--dryRun",
        dest="dry_run",
        action="store_true",
        help="Crawl and queue urls without testing them",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Early logging so config errors are visible
    setup_logging(level="quiet" if args.quiet else (args.verbose or "error"), log_file=args.log_file)

    try:
        config = build_config(_cli_options(args), config_file=args.config_file)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}")
        sys.exit(1)

    setup_logging(level=config.verbose, log_file=args.log_file)

    try:
        asyncio.run(run_audit(config))
    except InvalidDomainError as e:
        print(f"Error: {args.domain} does not form a valid url ({e.url})")
        sys.exit(1)
    except AxeCrawlerError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
