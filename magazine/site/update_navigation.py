"""Regenerate navigation data, category statistics and the RSS feed.

Run:
    python -m magazine.site.update_navigation
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv

from magazine.config import ARTICLES_FILE, CATEGORY_STATS_FILE, FEED_FILE, NAVIGATION_FILE, SITE_URL
from magazine.site.feed import generate_rss_feed
from magazine.site.navigation import generate_navigation_data
from magazine.site.stats import generate_category_stats
from magazine.store import load_articles_or_empty, write_json_document

logger = logging.getLogger(__name__)


def update_navigation(
    *,
    articles_file: Path = ARTICLES_FILE,
    navigation_file: Path = NAVIGATION_FILE,
    stats_file: Path = CATEGORY_STATS_FILE,
    feed_file: Path = FEED_FILE,
    base_url: str = SITE_URL,
) -> dict[str, Any]:
    """Write navigation.json, category-stats.json and feed.xml; return the stats."""
    data = load_articles_or_empty(articles_file)
    articles = data.articles
    if not articles:
        logger.warning("No articles found, generating empty navigation data")
    logger.info("Processing %s articles", len(articles))

    category_stats = generate_category_stats(articles)
    navigation = generate_navigation_data(category_stats)
    feed = generate_rss_feed(articles, base_url=base_url)

    write_json_document(navigation_file, navigation)
    write_json_document(stats_file, category_stats)
    feed_file.parent.mkdir(parents=True, exist_ok=True)
    feed_file.write_text(feed, encoding="utf-8")

    logger.info(
        "Statistics: %s categories, %s authors, %s total articles",
        len(category_stats["categories"]),
        len(category_stats["authors"]),
        category_stats["totalArticles"],
    )
    return category_stats


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Update navigation.json, category-stats.json and feed.xml from articles.json.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--articles-file", type=Path, default=ARTICLES_FILE)
    p.add_argument("--site-url", default=SITE_URL)
    return p


def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)

    logger.info("Starting navigation and content updates...")
    try:
        update_navigation(articles_file=args.articles_file, base_url=args.site_url)
    except OSError as e:
        logger.error("Navigation update failed: %s", e)
        sys.exit(1)
    logger.info("Navigation and content update completed")


if __name__ == "__main__":
    main()
