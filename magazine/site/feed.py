"""RSS 2.0 feed (`public/feed.xml`) for the latest articles."""

from __future__ import annotations

import html
from datetime import datetime
from email.utils import format_datetime
from typing import Sequence

from magazine.config import FEED_ITEM_LIMIT, SITE_DESCRIPTION, SITE_TITLE, SITE_URL
from magazine.models import Article
from magazine.utils import parse_timestamp, utc_now


def _esc(text: str | None, *, quote: bool = False) -> str:
    return html.escape(text or "", quote=quote)


def rfc822_date(dt: datetime) -> str:
    return format_datetime(dt, usegmt=True)


def article_url(base_url: str, article_id: str) -> str:
    return f"{base_url.rstrip('/')}/articles/{article_id}/"


def generate_rss_feed(
    articles: Sequence[Article],
    *,
    base_url: str = SITE_URL,
    limit: int = FEED_ITEM_LIMIT,
    now: datetime | None = None,
) -> str:
    """Feed of the first `limit` articles in store order (the store is newest-first)."""
    base_url = base_url.rstrip("/")
    now = now or utc_now()
    items = []
    for article in list(articles)[: max(0, limit)]:
        published = parse_timestamp(article.published_at) or now
        link = article_url(base_url, article.id)
        author = article.author.name if article.author else ""
        items.append(
            "\n".join(
                [
                    "    <item>",
                    f"      <title>{_esc(article.title)}</title>",
                    f"      <description>{_esc(article.excerpt)}</description>",
                    f"      <link>{_esc(link)}</link>",
                    f"      <guid>{_esc(link)}</guid>",
                    f"      <pubDate>{rfc822_date(published)}</pubDate>",
                    f"      <category>{_esc(article.category)}</category>",
                    f"      <author>{_esc(author)}</author>",
                    "    </item>",
                ]
            )
        )

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "  <channel>",
            f"    <title>{_esc(SITE_TITLE)}</title>",
            f"    <description>{_esc(SITE_DESCRIPTION)}</description>",
            f"    <link>{_esc(base_url)}</link>",
            "    <language>en-us</language>",
            "    <managingEditor>editor@ai-writing-about-ai.com (AI Editorial Team)</managingEditor>",
            "    <webMaster>webmaster@ai-writing-about-ai.com (Web Team)</webMaster>",
            f"    <lastBuildDate>{rfc822_date(now)}</lastBuildDate>",
            f'    <atom:link href="{_esc(base_url + "/feed.xml", quote=True)}" rel="self" type="application/rss+xml"/>',
            *items,
            "  </channel>",
            "</rss>",
        ]
    ) + "\n"
