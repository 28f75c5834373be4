"""JSON report writer."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from axecrawler.config import CrawlerConfig
from axecrawler.constants import REPORT_TITLE
from axecrawler.database import ResultStore

logger = logging.getLogger(__name__)


def collect_reports(store: ResultStore) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Group stored results by url, then by result type and viewport.

    Returns:
        ``{url: {"violations": {view_port: [...]}, "passes": {view_port: [...]}}}``
        with urls in the order they were first stored
    """
    reports = {}
    for page in store.read("tested_pages"):
        url = page["url"]
        summary = store.read("summary", url=url)
        reports[url] = {
            result_type: {row["view_port"]: row["report"] for row in rows}
            for result_type, rows in summary.items()
        }
    return reports


class JSONReporter:
    """Writes every stored result to ``{output}.json``."""

    def __init__(self, config: CrawlerConfig, store: ResultStore):
        self.config = config
        self.store = store

    @property
    def path(self) -> Path:
        return Path(f"{self.config.output}.json")

    def write(self) -> Path:
        """Write the report file.

        Returns:
            Path of the written file
        """
        data = {
            "date": datetime.now().isoformat(),
            "title": f"{REPORT_TITLE} for {self.config.domain}",
            "reports": collect_reports(self.store),
        }

        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info(f"JSON report written to {path}")
        return path
