"""Post-build checks: the written feed and sitemap match the store they came from."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import feedparser

from magazine.config import FEED_FILE, FEED_ITEM_LIMIT, SITEMAP_FILE
from magazine.models import ArticlesData
from magazine.site.sitemap import expected_url_count

logger = logging.getLogger(__name__)

SITEMAP_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


def count_feed_items(path: Path) -> int:
    feed = feedparser.parse(path.read_text(encoding="utf-8"))
    if feed.bozo:
        logger.warning("Feed %s is not well-formed: %s", path, feed.get("bozo_exception"))
    return len(feed.entries)


def count_sitemap_urls(path: Path) -> int:
    root = ET.parse(path).getroot()
    return len(root.findall(f"{SITEMAP_NS}url"))


def validate_outputs(
    data: ArticlesData,
    *,
    feed_path: Path = FEED_FILE,
    sitemap_path: Path = SITEMAP_FILE,
    feed_limit: int = FEED_ITEM_LIMIT,
) -> list[str]:
    """Return a list of problems (empty when the artifacts are consistent)."""
    errors: list[str] = []

    if not feed_path.exists():
        errors.append(f"Feed not found: {feed_path}")
    else:
        expected = min(feed_limit, len(data.articles))
        found = count_feed_items(feed_path)
        if found != expected:
            errors.append(f"Feed has {found} items, expected {expected}")

    if not sitemap_path.exists():
        errors.append(f"Sitemap not found: {sitemap_path}")
    else:
        expected = expected_url_count(data.categories, data.articles)
        try:
            found = count_sitemap_urls(sitemap_path)
        except ET.ParseError as e:
            errors.append(f"Sitemap is not valid XML: {e}")
        else:
            if found != expected:
                errors.append(f"Sitemap has {found} URLs, expected {expected}")

    return errors
