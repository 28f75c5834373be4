"""Random sub-sampling of crawled URLs."""

import random
from typing import List, Optional, Sequence


def select_sample(
    urls: Sequence[str],
    probability: float = 1.0,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Keep each URL independently with the given probability.

    With ``probability == 1`` the list is returned unchanged and no random
    numbers are drawn. Otherwise the expected size is ``p * N`` with standard
    deviation ``sqrt(p * N * (1 - p))``; order of the kept URLs is preserved.

    Args:
        urls: Candidate URLs in crawl order
        probability: Sampling rate in (0, 1]
        rng: Optional random source (defaults to the module generator)

    Returns:
        New list holding the sampled URLs
    """
    if probability >= 1:
        return list(urls)

    draw = (rng or random).random
    return [url for url in urls if draw() < probability]
