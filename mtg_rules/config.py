"""
Configuration settings for the MTG keyword rules fetcher.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent  # Go up one level to workspace root
DATA_DIR = PROJECT_ROOT / "data"
CACHE_DIR = Path(os.environ.get("MTG_RULES_CACHE_DIR", str(Path.home() / ".mtg_rules" / "cache")))
CACHE_DB_PATH = CACHE_DIR / "rules_cache.db"
# Logs directory for per-run logs
LOGS_DIR = CACHE_DIR / "logs"

# Comprehensive Rules revision. The revision date doubles as the cache version tag.
RULES_VERSION = os.environ.get("MTG_RULES_VERSION", "20251114")
RULES_URL = os.environ.get(
    "MTG_RULES_URL",
    f"https://media.wizards.com/{RULES_VERSION[:4]}/downloads/MagicCompRules%20{RULES_VERSION}.txt",
)
# Bundled copy of the document; set MTG_RULES_LOCAL_PATH when the package is installed outside a checkout
LOCAL_RULES_PATH = Path(os.environ.get(
    "MTG_RULES_LOCAL_PATH",
    str(DATA_DIR / f"MagicCompRules {RULES_VERSION}.txt"),
))

# Pass-through proxies, tried in order. "{url}" receives the percent-encoded target.
PROXY_TEMPLATES = [
    "https://corsproxy.io/?{url}",
    "https://api.allorigins.win/raw?url={url}",
]

# Network configuration
FETCH_TIMEOUT = float(os.environ.get("MTG_RULES_FETCH_TIMEOUT", "15"))
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36'

# Content validation thresholds
MIN_CONTENT_LENGTH = 1000
STRICT_MIN_CONTENT_LENGTH = 50000  # the full document is never smaller than this
HTML_MARKERS = ["<!doctype", "<html"]

# Cache storage
CACHE_KEY = "mtg_rules_text"

# Sections parsed out of the document: keyword actions and keyword abilities
RECOGNIZED_SECTIONS = ("701", "702")
