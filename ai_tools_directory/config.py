"""Project configuration read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).parent
STATIC_DIR = PACKAGE_DIR / "static"

# Content source
CMS_GRAPHQL_URL = os.getenv("CMS_GRAPHQL_URL", "http://localhost:8080/graphql")
CMS_TIMEOUT = float(os.getenv("CMS_TIMEOUT", "10"))  # seconds

# Site
BASE_PATH = os.getenv("BASE_PATH", "").rstrip("/")
# Public root of the site. An explicit SITE_URL must already include BASE_PATH.
SITE_URL = os.getenv("SITE_URL", f"https://geekdroid.in{BASE_PATH}").rstrip("/")
SITE_NAME = os.getenv("SITE_NAME", "Geekdroid")
SITE_DESCRIPTION = "Discover and compare the best AI tools for your needs"

# Internal JSON API, used by the CLI
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000").rstrip("/")

# Listings
PAGE_SIZE = int(os.getenv("PAGE_SIZE", "20"))
HOME_PAGE_SIZE = int(os.getenv("HOME_PAGE_SIZE", "12"))
RELATED_TOOLS_LIMIT = 3
RELATED_TOOLS_POOL = 100
SEARCH_MIN_LENGTH = 3
SEARCH_MAX_LENGTH = 100
SEARCH_RESULTS = 10

# AdSense, disabled unless a client id is configured
ADSENSE_CLIENT = os.getenv("ADSENSE_CLIENT", "")
ADSENSE_SLOTS = {
    "home": os.getenv("ADSENSE_SLOT_HOME", ""),
    "listing": os.getenv("ADSENSE_SLOT_LISTING", ""),
    "tool_page": os.getenv("ADSENSE_SLOT_TOOL_PAGE", ""),
    "bookmarks": os.getenv("ADSENSE_SLOT_BOOKMARKS", ""),
}

# Web bookmarks ride in the session cookie; this caps their encoded size
# so the cookie stays under the 4KB browsers accept.
WEB_BOOKMARKS_MAX_BYTES = 2600

# Local bookmarks for the CLI
BOOKMARKS_FILE = Path(os.getenv("BOOKMARKS_FILE", "dev_cache/bookmarks.json"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Show failure details on error alerts
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"
SESSION_SECRET = os.getenv("SESSION_SECRET")
WEB_PORT = int(os.getenv("WEB_PORT", "8000"))
