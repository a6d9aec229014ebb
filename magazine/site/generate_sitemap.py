"""Regenerate sitemap.xml and robots.txt from the article store.

Run:
    SITE_URL=https://example.github.io/magazine python -m magazine.site.generate_sitemap
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from magazine.config import ARTICLES_FILE, ROBOTS_FILE, SITE_URL, SITEMAP_FILE
from magazine.site.sitemap import generate_robots_txt, generate_sitemap
from magazine.store import load_articles_or_empty

logger = logging.getLogger(__name__)


def write_sitemap(
    *,
    articles_file: Path = ARTICLES_FILE,
    sitemap_file: Path = SITEMAP_FILE,
    robots_file: Path = ROBOTS_FILE,
    base_url: str = SITE_URL,
) -> int:
    """Write both files; return the number of articles included."""
    data = load_articles_or_empty(articles_file)
    logger.info("Found %s articles, %s categories", len(data.articles), len(data.categories))

    sitemap_file.parent.mkdir(parents=True, exist_ok=True)
    sitemap_file.write_text(generate_sitemap(data.articles, data.categories, base_url=base_url), encoding="utf-8")
    logger.info("Sitemap saved to: %s", sitemap_file)

    robots_file.parent.mkdir(parents=True, exist_ok=True)
    robots_file.write_text(generate_robots_txt(base_url=base_url), encoding="utf-8")
    logger.info("Generated robots.txt")
    return len(data.articles)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Generate sitemap.xml and robots.txt from articles.json.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--articles-file", type=Path, default=ARTICLES_FILE)
    p.add_argument("--site-url", default=SITE_URL)
    return p


def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)

    logger.info("Starting sitemap generation...")
    try:
        count = write_sitemap(articles_file=args.articles_file, base_url=args.site_url)
    except OSError as e:
        logger.error("Sitemap generation failed: %s", e)
        sys.exit(1)
    logger.info("Generated sitemap with %s articles", count)


if __name__ == "__main__":
    main()
