"""Category and author statistics derived from the article store."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from magazine.models import Article
from magazine.utils import parse_timestamp, slugify, to_iso, utc_now

UNCATEGORIZED = "Uncategorized"
UNKNOWN_AUTHOR_ID = "unknown"
UNKNOWN_AUTHOR_NAME = "Unknown Author"

CATEGORY_DESCRIPTIONS = {
    "AI Tools": "Discover the latest AI-powered development tools and how they enhance productivity.",
    "Machine Learning": "Deep dive into MLOps, model deployment, and machine learning best practices.",
    "Testing": "Explore AI-driven testing strategies and automation techniques.",
    "DevOps": "Learn about intelligent automation and AI in CI/CD pipelines.",
    "Future Tech": "Insights into emerging AI technologies and their ethical implications.",
    "Automation": "Streamline your workflows with smart automation solutions.",
    "Ethics": "Navigate the ethical considerations of AI development and deployment.",
}


def category_description(category: str) -> str:
    return CATEGORY_DESCRIPTIONS.get(category, f"Articles about {category} in AI development.")


def _is_newer(candidate: str, current: str) -> bool:
    new, old = parse_timestamp(candidate), parse_timestamp(current)
    return new is not None and old is not None and new > old


def generate_category_stats(articles: Sequence[Article], *, now: datetime | None = None) -> dict[str, Any]:
    """Per-category and per-author counts with the latest article of each.

    Both lists are ordered by count, descending; ties keep first-seen order.
    """
    categories: dict[str, dict[str, Any]] = {}
    authors: dict[str, dict[str, Any]] = {}

    for article in articles:
        category = article.category or UNCATEGORIZED
        author_id = (article.author.id if article.author else None) or UNKNOWN_AUTHOR_ID
        author_name = (article.author.name if article.author else None) or UNKNOWN_AUTHOR_NAME

        cat = categories.setdefault(
            category,
            {
                "name": category,
                "count": 0,
                "slug": slugify(category),
                "latestArticle": None,
                "description": category_description(category),
            },
        )
        cat["count"] += 1
        latest = cat["latestArticle"]
        if latest is None or _is_newer(article.published_at, latest["publishedAt"]):
            cat["latestArticle"] = {
                "id": article.id,
                "title": article.title,
                "publishedAt": article.published_at,
                "author": article.author.to_json_dict() if article.author else None,
            }

        auth = authors.setdefault(
            author_id,
            {"id": author_id, "name": author_name, "count": 0, "latestArticle": None},
        )
        auth["count"] += 1
        latest = auth["latestArticle"]
        if latest is None or _is_newer(article.published_at, latest["publishedAt"]):
            auth["latestArticle"] = {
                "id": article.id,
                "title": article.title,
                "publishedAt": article.published_at,
            }

    return {
        "categories": sorted(categories.values(), key=lambda c: c["count"], reverse=True),
        "authors": sorted(authors.values(), key=lambda a: a["count"], reverse=True),
        "totalArticles": len(articles),
        "lastUpdated": to_iso(now or utc_now()),
    }
