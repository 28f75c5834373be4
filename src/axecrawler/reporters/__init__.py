"""Report writers for stored axe-core results."""

from axecrawler.reporters.html_reporter import HTMLReporter
from axecrawler.reporters.json_reporter import JSONReporter, collect_reports

__all__ = ["HTMLReporter", "JSONReporter", "collect_reports"]
