"""Build the ordered list of url x viewport test cases."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from axecrawler.config import ViewPort


@dataclass(frozen=True)
class TestCase:
    """One url tested at one viewport."""
    __test__ = False  # not a pytest test class

    url: str
    view_port: ViewPort


def num_to_check(check: Optional[int], available: int) -> int:
    """Number of URLs to test: ``min(check, available)``, or all when unbounded."""
    if check is None:
        return available
    return min(check, available)


def build_queue(
    urls: Sequence[str],
    check: Optional[int],
    view_ports: Sequence[ViewPort],
) -> List[TestCase]:
    """Cap the URL list and expand it into test cases.

    Output is URL-major, viewport-minor: every viewport of the first URL,
    then every viewport of the second, and so on.

    Args:
        urls: Sampled URLs in crawl order
        check: Maximum number of URLs to keep (None = all)
        view_ports: Viewports to test each URL at, in order

    Returns:
        List of TestCase objects
    """
    kept = list(urls)[:num_to_check(check, len(urls))]
    return [
        TestCase(url=url, view_port=view_port)
        for url in kept
        for view_port in view_ports
    ]
