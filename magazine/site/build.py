"""Static site build runner.

Regenerates every derived artifact from `data/articles.json` and then, if
configured, hands off to the site's own build command:
1. navigation.json, category-stats.json, feed.xml
2. sitemap.xml, robots.txt
3. consistency check of feed/sitemap against the store
4. optional external build (e.g. `npm run build`)
"""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import subprocess
import sys
from typing import Sequence

from dotenv import load_dotenv

from magazine.config import ARTICLES_FILE, FEED_FILE, SITEMAP_FILE, ensure_data_dirs
from magazine.site.generate_sitemap import write_sitemap
from magazine.site.update_navigation import update_navigation
from magazine.site.validate import validate_outputs
from magazine.store import load_articles_or_empty

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Regenerate navigation, feed and sitemap, then run the site build command.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--skip-navigation", action="store_true", help="Skip navigation/stats/feed generation.")
    p.add_argument("--skip-sitemap", action="store_true", help="Skip sitemap.xml/robots.txt generation.")
    p.add_argument("--skip-validate", action="store_true", help="Skip the feed/sitemap consistency check.")
    p.add_argument(
        "--build-command",
        default=os.getenv("MAG_SITE_BUILD_COMMAND"),
        help="Command that builds the static site afterwards (e.g. 'npm run build').",
    )
    return p


def run_build_command(command: str) -> None:
    logger.info("Building static site: %s", command)
    subprocess.run(shlex.split(command), check=True)


def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    ensure_data_dirs()

    try:
        if not args.skip_navigation:
            logger.info("=== Step 1: navigation and metadata ===")
            update_navigation()

        if not args.skip_sitemap:
            logger.info("=== Step 2: sitemap and SEO files ===")
            write_sitemap()

        if not args.skip_validate and not (args.skip_navigation or args.skip_sitemap):
            logger.info("=== Step 3: validate outputs ===")
            errors = validate_outputs(load_articles_or_empty(ARTICLES_FILE), feed_path=FEED_FILE, sitemap_path=SITEMAP_FILE)
            if errors:
                for e in errors:
                    logger.error("%s", e)
                sys.exit(1)
            logger.info("Validation passed")

        if args.build_command:
            logger.info("=== Step 4: static site build ===")
            run_build_command(args.build_command)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error("Build failed: %s", e)
        sys.exit(1)

    logger.info("Static site build completed successfully")


if __name__ == "__main__":
    main()
