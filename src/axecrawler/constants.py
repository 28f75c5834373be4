# src/axecrawler/constants.py
"""Centralized constants for axe-crawler.

Defaults used across the crawl, queue and test phases. User-facing
configuration lives in config.py and CrawlerConfig.
"""

# =============================================================================
# Crawl Constants
# =============================================================================

# Levels of links followed from the domain root
DEFAULT_CRAWL_DEPTH = 5

# Scheme used for the seed URL and for every canonical URL in the visited set
CANONICAL_SCHEME = "http"

# Default request timeout in seconds
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Default maximum retries for transient fetch failures
DEFAULT_MAX_RETRIES = 2

# Base for exponential backoff calculation
EXPONENTIAL_BACKOFF_BASE = 2

# Initial backoff delay in seconds
INITIAL_BACKOFF_DELAY_SECONDS = 0.5

# Maximum backoff delay in seconds (cap for exponential growth)
MAX_BACKOFF_DELAY_SECONDS = 10.0

# Default concurrent browser pages during the test phase
DEFAULT_MAX_CONCURRENT_TESTS = 10

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; axe-crawler/1.0)"


# =============================================================================
# Link Filter Constants
# =============================================================================

# Binary assets and office documents that are never queued for testing
MEDIA_EXTENSIONS_PATTERN = (
    r"\.(exe|wmv|avi|flv|mov|mkv|mp..?|swf|ra.?|rm|as[fx]|m4[av]|smi.?"
    r"|doc|docx|ppt|pptx|pps|ppsx|xls|xlsx|jpg|jpeg|png|gif|svg|webp|pdf"
    r"|zip|rar|7z|tar|gz)$"
)

# WordPress-style timestamped upload directory, e.g. uploads/2017/04/
UPLOADS_DIRECTORY_PATTERN = r"uploads/\d{4}/\d{2}/"

ATTACHMENT_MARKER = "attachment_id"

ROOT_RELATIVE_PATTERN = r"^/\w+"


# =============================================================================
# Viewport Constants
# =============================================================================

MOBILE_VIEWPORT = ("mobile", 360, 640)
TABLET_VERTICAL_VIEWPORT = ("tablet_vertical", 768, 1024)
TABLET_HORIZONTAL_VIEWPORT = ("tablet_horizontal", 1024, 768)
DESKTOP_VIEWPORT = ("desktop", 1440, 900)


# =============================================================================
# Test Phase Constants
# =============================================================================

# axe-core build injected into every tested page
DEFAULT_AXE_SCRIPT_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"

# Page load timeout for the browser, milliseconds
DEFAULT_PAGE_LOAD_TIMEOUT_MS = 60000


# =============================================================================
# Output Constants
# =============================================================================

DEFAULT_CONFIG_FILE = "./.axe-crawler.json"

DEFAULT_OUTPUT_PREFIX = "reports"

DEFAULT_DB_FILE = "./axe-crawler.sqlite"

REPORT_TITLE = "aXe Accessibility Engine Report"
