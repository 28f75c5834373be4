from dotenv import load_dotenv
from typing import Any, Dict, List, Literal, Optional
from pathlib import Path
import json
import logging
import os
import re
import warnings

from pydantic import BaseModel, ConfigDict, Field, field_validator

from axecrawler.constants import (
    DEFAULT_AXE_SCRIPT_URL,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CRAWL_DEPTH,
    DEFAULT_DB_FILE,
    DEFAULT_MAX_CONCURRENT_TESTS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_OUTPUT_PREFIX,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    DESKTOP_VIEWPORT,
    MOBILE_VIEWPORT,
    TABLET_HORIZONTAL_VIEWPORT,
    TABLET_VERTICAL_VIEWPORT,
)
from axecrawler.errors import SamplingConfigWarning
from axecrawler.links import FilterConfig

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)

VIEWPORT_ARG_PATTERN = re.compile(r"^(\w+):(\d+)x(\d+)$")


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    USER_AGENT = os.getenv("AXE_CRAWLER_USER_AGENT", DEFAULT_USER_AGENT)
    TIMEOUT = int(os.getenv("AXE_CRAWLER_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)))
    DB_PATH = os.getenv("AXE_CRAWLER_DB_PATH", DEFAULT_DB_FILE)
    AXE_SCRIPT_URL = os.getenv("AXE_SCRIPT_URL", DEFAULT_AXE_SCRIPT_URL)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "error")


settings = Settings()


class ViewPort(BaseModel):
    """A named browser window size used for testing."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Viewport name, unique within a run")
    width: int = Field(..., gt=0, description="Window width in pixels")
    height: int = Field(..., gt=0, description="Window height in pixels")

    @property
    def label(self) -> str:
        """Storage key for this viewport, e.g. ``mobile:360x640``."""
        return f"{self.name}:{self.width}x{self.height}"


DEFAULT_VIEWPORTS: List[ViewPort] = [
    ViewPort(name=name, width=width, height=height)
    for name, width, height in (
        MOBILE_VIEWPORT,
        TABLET_VERTICAL_VIEWPORT,
        TABLET_HORIZONTAL_VIEWPORT,
        DESKTOP_VIEWPORT,
    )
]


class CrawlerConfig(BaseModel):
    """
    Finalized, immutable configuration for one crawl-and-test run.

    Built once at startup from defaults, the JSON options file and the command
    line. The crawl core only ever sees a validated instance of this model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    domain: str = Field(..., min_length=1, description="Host under test, without scheme")
    depth: int = Field(default=DEFAULT_CRAWL_DEPTH, ge=0, description="Levels of links to follow")
    check: Optional[int] = Field(
        default=None,
        description="Maximum number of urls to test (None = all)"
    )
    random: float = Field(default=1.0, description="Sampling rate in (0, 1]")
    ignore: Optional[str] = Field(default=None, description="Regex of urls to skip")
    whitelist: Optional[str] = Field(
        default=None,
        description="Regex urls must match; overrides ignore when set"
    )
    view_ports: List[ViewPort] = Field(
        default_factory=lambda: list(DEFAULT_VIEWPORTS),
        alias="viewPorts",
    )
    output: str = Field(default=DEFAULT_OUTPUT_PREFIX, description="Report file prefix")
    db_type: Literal["memory", "file"] = Field(default="memory")
    db_path: str = Field(default=DEFAULT_DB_FILE)
    timeout: int = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    max_concurrent: int = Field(default=DEFAULT_MAX_CONCURRENT_TESTS, gt=0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    axe_script_url: str = Field(default=DEFAULT_AXE_SCRIPT_URL)
    verbose: str = Field(default="error")
    dry_run: bool = Field(default=False)

    @field_validator("domain", mode="before")
    @classmethod
    def _strip_domain(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("check", mode="before")
    @classmethod
    def _natural_or_unbounded(cls, value: Any) -> Optional[int]:
        if value is None or value is False:
            return None
        if value is True:
            logger.error(f"Invalid check value specified: {value}.  Checking all urls")
            return None
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            logger.error(f"Invalid check value specified: {value}.  Checking all urls")
            return None
        if number < 0 or number != float(value):
            logger.error(f"Invalid check value specified: {value}.  Checking all urls")
            return None
        return number

    @field_validator("random", mode="before")
    @classmethod
    def _correct_sampling_rate(cls, value: Any) -> float:
        if value is None or value is False or value is True:
            return 1.0
        try:
            rate = float(value)
        except (TypeError, ValueError):
            rate = float("nan")
        if not 0 < rate <= 1:
            message = f"Invalid random sampling rate specified: {value}.  Defaulting to 100%"
            logger.error(message)
            warnings.warn(message, SamplingConfigWarning, stacklevel=2)
            return 1.0
        return rate

    @field_validator("ignore", "whitelist", mode="before")
    @classmethod
    def _compile_check(cls, value: Any) -> Optional[str]:
        if value is None or value is False or value == "":
            return None
        try:
            re.compile(value)
        except (re.error, TypeError) as e:
            raise ValueError(f"Invalid regular expression {value!r}: {e}")
        return value

    @field_validator("view_ports", mode="after")
    @classmethod
    def _unique_names(cls, value: List[ViewPort]) -> List[ViewPort]:
        if not value:
            return list(DEFAULT_VIEWPORTS)
        names = [view.name for view in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate viewport names: {', '.join(duplicates)}")
        return value

    @property
    def seed_url(self) -> str:
        return f"http://{self.domain}"

    @property
    def filter_config(self) -> FilterConfig:
        """Crawl-time link filtering policy derived from this configuration."""
        return FilterConfig(
            domain=self.domain,
            ignore=self.ignore,
            whitelist=self.whitelist,
        )


def parse_viewports_arg(views: str) -> List[ViewPort]:
    """Parse a command line viewport list.

    Args:
        views: Comma separated ``name:WIDTHxHEIGHT`` entries,
               e.g. ``mobile:360x640,tablet:768x1024``

    Returns:
        List of ViewPort objects in the given order

    Raises:
        ValueError: If any entry does not match ``name:WIDTHxHEIGHT``
    """
    view_ports = []
    for view in views.split(","):
        view = view.strip()
        if not view:
            continue
        match = VIEWPORT_ARG_PATTERN.match(view)
        if not match:
            raise ValueError(f"Invalid viewports: {views}")
        name, width, height = match.groups()
        view_ports.append(ViewPort(name=name, width=int(width), height=int(height)))
    return view_ports


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Load options from a JSON configuration file.

    A missing or malformed file is reported and treated as empty.

    Args:
        path: Path to JSON configuration file (default ./.axe-crawler.json)

    Returns:
        Dictionary of options from the file
    """
    file_path = Path(path or DEFAULT_CONFIG_FILE)

    if not file_path.exists():
        logger.error("No config file found")
        return {}

    try:
        with open(file_path, 'r') as f:
            options = json.load(f)
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON config file {file_path}\n\nIgnoring JSON config file...")
        return {}

    if not isinstance(options, dict):
        logger.error(f"JSON config file {file_path} must hold an object.  Ignoring it...")
        return {}
    return options


def build_config(
    cli_opts: Optional[Dict[str, Any]] = None,
    config_file: Optional[str] = None,
) -> CrawlerConfig:
    """Merge defaults, JSON file options and command line options.

    Precedence is defaults < environment settings < JSON file < command line.
    ``dry_run`` forces ``check=0`` and defaults verbosity to ``debug``;
    ``quiet`` overrides any verbosity.

    Args:
        cli_opts: Options from the command line; ``None`` values are unset
        config_file: Path to JSON options file

    Returns:
        Validated CrawlerConfig
    """
    cli_opts = {k: v for k, v in (cli_opts or {}).items() if v is not None}
    quiet = cli_opts.pop("quiet", False)

    merged: Dict[str, Any] = {
        "user_agent": settings.USER_AGENT,
        "timeout": settings.TIMEOUT,
        "db_path": settings.DB_PATH,
        "axe_script_url": settings.AXE_SCRIPT_URL,
        "verbose": settings.LOG_LEVEL,
    }
    merged.update(load_config_file(config_file))

    if isinstance(merged.get("viewPorts"), str):
        merged["viewPorts"] = parse_viewports_arg(merged["viewPorts"])

    merged.update(cli_opts)

    if merged.get("dry_run"):
        merged["check"] = 0
        merged["verbose"] = cli_opts.get("verbose", "debug")
    if quiet:
        merged["verbose"] = "quiet"

    config = CrawlerConfig(**merged)
    logger.debug(f"Crawling with options: {config.model_dump()}")
    return config
