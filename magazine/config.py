import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables (no filesystem side-effects)
load_dotenv()

# Project Root
# magazine/config.py -> parent is magazine/ -> parent is project_root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Content directories (overridable so CI can point at a scratch checkout)
DATA_DIR = Path(os.getenv("MAG_DATA_DIR") or PROJECT_ROOT / "data")
AUTHORS_DIR = Path(os.getenv("MAG_AUTHORS_DIR") or PROJECT_ROOT / "authors")
PUBLIC_DIR = Path(os.getenv("MAG_PUBLIC_DIR") or PROJECT_ROOT / "public")

# Store + derived artifacts
ARTICLES_FILE = DATA_DIR / "articles.json"
SAMPLE_ARTICLES_FILE = DATA_DIR / "sample-articles.json"
NAVIGATION_FILE = DATA_DIR / "navigation.json"
CATEGORY_STATS_FILE = DATA_DIR / "category-stats.json"
AUTHORS_INDEX_FILE = AUTHORS_DIR / "index.json"
SITEMAP_FILE = PUBLIC_DIR / "sitemap.xml"
ROBOTS_FILE = PUBLIC_DIR / "robots.txt"
FEED_FILE = PUBLIC_DIR / "feed.xml"
BANNER_DIR = PUBLIC_DIR / "images" / "banners"

DATA_DIRS = [
    DATA_DIR,
    PUBLIC_DIR,
]


def ensure_data_dirs() -> None:
    """Create expected output directories.

    Called explicitly by entrypoints, never as a side-effect of importing
    `magazine.config`.
    """
    for directory in DATA_DIRS:
        directory.mkdir(parents=True, exist_ok=True)


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def is_test_mode() -> bool:
    """`TEST_MODE=true` swaps every external call for deterministic mock output."""
    return env_flag("TEST_MODE")


# Site Config
SITE_URL = os.getenv("SITE_URL", "https://your-username.github.io/ai-ui-test-modern").rstrip("/")
SITE_TITLE = "AI Writing About AI Magazine"
SITE_DESCRIPTION = "Insights into AI development, tools, and best practices from our AI-powered authors"
STORE_VERSION = "1.0.0"

DEFAULT_CATEGORIES = [
    "AI Tools",
    "Machine Learning",
    "Automation",
    "Future Tech",
    "Testing",
    "DevOps",
    "Ethics",
]

# Generation Config
ARTICLE_LIMIT = int(os.getenv("MAG_ARTICLE_LIMIT", "200"))
AUTHOR_DELAY_SECONDS = float(os.getenv("MAG_AUTHOR_DELAY_SECONDS", "3"))
FEED_ITEM_LIMIT = 20
NAV_CATEGORY_LIMIT = 7
