"""sitemap.xml and robots.txt for the static site."""

from __future__ import annotations

import html
from datetime import datetime
from typing import Sequence

from magazine.config import SITE_URL
from magazine.models import Article
from magazine.utils import parse_timestamp, slugify, utc_now

# (path, priority, changefreq)
STATIC_PAGES = [
    ("", "1.0", "daily"),
    ("/about/", "0.8", "weekly"),
    ("/articles/", "0.9", "daily"),
    ("/categories/", "0.8", "weekly"),
]
CATEGORY_PRIORITY = "0.7"
ARTICLE_PRIORITY = "0.6"


def _url_entry(loc: str, lastmod: str, changefreq: str, priority: str) -> str:
    return "\n".join(
        [
            "  <url>",
            f"    <loc>{html.escape(loc, quote=False)}</loc>",
            f"    <lastmod>{lastmod}</lastmod>",
            f"    <changefreq>{changefreq}</changefreq>",
            f"    <priority>{priority}</priority>",
            "  </url>",
        ]
    )


def expected_url_count(categories: Sequence[str], articles: Sequence[Article]) -> int:
    return len(STATIC_PAGES) + len(categories) + len(articles)


def generate_sitemap(
    articles: Sequence[Article],
    categories: Sequence[str],
    *,
    base_url: str = SITE_URL,
    now: datetime | None = None,
) -> str:
    """Static pages, one URL per declared category, one per article."""
    base_url = base_url.rstrip("/")
    today = (now or utc_now()).date().isoformat()
    entries = [_url_entry(f"{base_url}{path}", today, freq, prio) for path, prio, freq in STATIC_PAGES]

    for category in categories:
        entries.append(
            _url_entry(f"{base_url}/categories/{slugify(category)}/", today, "weekly", CATEGORY_PRIORITY)
        )

    for article in articles:
        updated = parse_timestamp(article.updated_at) or parse_timestamp(article.published_at)
        lastmod = updated.date().isoformat() if updated else today
        entries.append(_url_entry(f"{base_url}/articles/{article.id}/", lastmod, "weekly", ARTICLE_PRIORITY))

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *entries,
            "</urlset>",
        ]
    ) + "\n"


def generate_robots_txt(*, base_url: str = SITE_URL) -> str:
    return f"User-agent: *\nAllow: /\n\nSitemap: {base_url.rstrip('/')}/sitemap.xml\n"
