"""HTML report generator using Jinja2 templates."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from axecrawler.config import CrawlerConfig
from axecrawler.constants import REPORT_TITLE
from axecrawler.database import ResultStore

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_NAME = "report.html"


class HTMLReporter:
    """Renders stored results into ``{output}.html``.

    The page holds a summary table of distinct failing and passing rules per
    url, followed by detailed per-viewport lists of every rule with the
    DOM nodes it affected.
    """

    def __init__(self, config: CrawlerConfig, store: ResultStore, template_dir: Path = TEMPLATE_DIR):
        """Initialize the HTML reporter.

        Args:
            config: Run configuration (domain, output prefix, sampling rate)
            store: Result store to read from
            template_dir: Directory containing Jinja2 templates
        """
        self.config = config
        self.store = store
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["node_messages"] = self._node_messages
        self.env.filters["sample_percent"] = self._sample_percent

    @property
    def path(self) -> Path:
        return Path(f"{self.config.output}.html")

    def _node_messages(self, node: Dict[str, Any]) -> List[str]:
        """Check messages of an affected node, any/all/none in that order."""
        return [
            check.get("message", "")
            for key in ("any", "all", "none")
            for check in node.get(key) or []
        ]

    def _sample_percent(self, rate: float) -> int:
        return round(rate * 100)

    def _build_pages(self) -> List[Dict[str, Any]]:
        pages = []
        for page in self.store.read("tested_pages"):
            url = page["url"]
            summary = self.store.read("summary", url=url)
            pages.append({
                "url": url,
                "failing": self._descriptions(summary["violations"]),
                "passing": self._descriptions(summary["passes"]),
                "violations": summary["violations"],
                "passes": summary["passes"],
                "violation_count": sum(len(row["report"]) for row in summary["violations"]),
                "pass_count": sum(len(row["report"]) for row in summary["passes"]),
            })
        return pages

    def _descriptions(self, rows: List[Dict[str, Any]]) -> List[str]:
        seen = {}
        for row in rows:
            for result in row["report"]:
                seen.setdefault(result.get("description", ""), None)
        return list(seen)

    def render(self) -> str:
        pages = self._build_pages()
        template = self.env.get_template(TEMPLATE_NAME)
        return template.render(
            title=f"{REPORT_TITLE} for {self.config.domain}",
            generated_at=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            random=self.config.random,
            pages=pages,
            total_violations=sum(page["violation_count"] for page in pages),
            total_passes=sum(page["pass_count"] for page in pages),
        )

    def write(self) -> Path:
        """Render and write the report file.

        Returns:
            Path of the written file
        """
        html = self.render()

        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)

        logger.info(f"HTML report written to {path}")
        return path
