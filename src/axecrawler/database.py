# src/axecrawler/database.py
"""SQLite result store for axe-core test results."""

import json
import sqlite3
from typing import Any, Dict, List, Optional
import logging

from axecrawler.config import settings
from axecrawler.tester import AxeReport

logger = logging.getLogger(__name__)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS axe_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS violations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    view_port TEXT NOT NULL,
    report TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS passes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    view_port TEXT NOT NULL,
    report TEXT NOT NULL
);
"""

RESULT_TABLES = ("violations", "passes")


class ResultStore:
    """Stores per-url, per-viewport axe-core results in SQLite.

    ``db_type="memory"`` keeps results for the lifetime of the process;
    ``db_type="file"`` writes them to ``db_path``. Tables are recreated on
    connect so every run starts from an empty store.
    """

    def __init__(self, db_type: str = "memory", db_path: Optional[str] = None):
        """Initialize the result store.

        Args:
            db_type: 'memory' or 'file'
            db_path: SQLite file path for 'file' stores. Defaults to settings.DB_PATH.

        Raises:
            TypeError: If db_type is not 'memory' or 'file'
        """
        if db_type == "memory":
            self.db_path = ":memory:"
        elif db_type == "file":
            self.db_path = db_path or settings.DB_PATH
        else:
            raise TypeError(f"Invalid SQLite database type: {db_type}")

        self.db_type = db_type
        self.conn: Optional[sqlite3.Connection] = None
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to SQLite result store: {self.db_path}")

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Result store connection closed.")

    def create_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("DROP TABLE IF EXISTS axe_results")
        for table in RESULT_TABLES:
            cursor.execute(f"DROP TABLE IF EXISTS {table}")
        cursor.executescript(CREATE_TABLES_SQL)
        self.conn.commit()

    def create(self, report: AxeReport) -> None:
        """Save the results of one test case.

        A url tested at several viewports is listed once in ``axe_results``.

        Args:
            report: Results for one url/viewport pair
        """
        view_port = report.view_port.label
        cursor = self.conn.cursor()
        cursor.execute("INSERT OR IGNORE INTO axe_results (url) VALUES (?)", (report.url,))
        cursor.execute(
            "INSERT INTO violations (url, view_port, report) VALUES (?, ?, ?)",
            (report.url, view_port, json.dumps(report.violations)),
        )
        cursor.execute(
            "INSERT INTO passes (url, view_port, report) VALUES (?, ?, ?)",
            (report.url, view_port, json.dumps(report.passes)),
        )
        self.conn.commit()
        logger.debug(f"Saved results for {report.url} {view_port}")

    def read(self, query: str, **params: Any) -> Any:
        """Run a named read query.

        Supported queries: ``tested_pages``, ``violations_summary(url)``,
        ``passes_summary(url)`` and ``summary(url)``.

        Raises:
            ValueError: For an unknown query name
        """
        queries = {
            "tested_pages": self.tested_pages,
            "violations_summary": self.violations_summary,
            "passes_summary": self.passes_summary,
            "summary": self.summary,
        }
        if query not in queries:
            raise ValueError(f"Unknown query: {query}")
        return queries[query](**params)

    def tested_pages(self) -> List[Dict[str, Any]]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT id, url FROM axe_results ORDER BY id")
        return [dict(row) for row in cursor.fetchall()]

    def _results_for(self, table: str, url: str) -> List[Dict[str, Any]]:
        cursor = self.conn.cursor()
        cursor.execute(
            f"SELECT url, view_port, report FROM {table} WHERE url = ? ORDER BY id",
            (url,),
        )
        return [
            {"url": row["url"], "view_port": row["view_port"], "report": json.loads(row["report"])}
            for row in cursor.fetchall()
        ]

    def violations_summary(self, url: str) -> List[Dict[str, Any]]:
        return self._results_for("violations", url)

    def passes_summary(self, url: str) -> List[Dict[str, Any]]:
        return self._results_for("passes", url)

    def summary(self, url: str) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "violations": self.violations_summary(url),
            "passes": self.passes_summary(url),
        }
