"""Read-side helpers the site pages use to pick articles out of the store."""

from __future__ import annotations

from datetime import datetime, timezone

from magazine.models import Article, ArticlesData
from magazine.utils import parse_timestamp

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _published(article: Article) -> datetime:
    return parse_timestamp(article.published_at) or _EPOCH


def _newest_first(articles: list[Article]) -> list[Article]:
    return sorted(articles, key=_published, reverse=True)


def _take(articles: list[Article], limit: int | None) -> list[Article]:
    return articles if limit is None else articles[: max(0, limit)]


def get_featured_articles(data: ArticlesData, limit: int = 4) -> list[Article]:
    """Featured articles first, topped up with the most recent non-featured ones."""
    featured = [a for a in data.articles if a.featured]
    if len(featured) < limit:
        recent = _newest_first([a for a in data.articles if not a.featured])
        featured.extend(recent[: limit - len(featured)])
    return featured[:limit]


def get_article_by_id(data: ArticlesData, id_or_slug: str) -> Article | None:
    for article in data.articles:
        if article.id == id_or_slug or article.slug == id_or_slug:
            return article
    return None


def get_articles_by_category(data: ArticlesData, category: str, limit: int | None = None) -> list[Article]:
    wanted = category.lower()
    return _take([a for a in data.articles if (a.category or "").lower() == wanted], limit)


def get_categories_with_counts(data: ArticlesData) -> list[dict[str, int | str]]:
    """Counts for the declared categories only; undeclared article categories are ignored."""
    counts: dict[str, int] = {name: 0 for name in data.categories}
    for article in data.articles:
        if article.category in counts:
            counts[article.category] += 1
    return [{"name": name, "count": count} for name, count in counts.items()]


def search_articles(data: ArticlesData, query: str) -> list[Article]:
    term = query.lower()

    def _matches(article: Article) -> bool:
        author_name = article.author.name if article.author else ""
        return (
            term in article.title.lower()
            or term in article.excerpt.lower()
            or term in article.content.lower()
            or any(term in tag.lower() for tag in article.tags)
            or term in author_name.lower()
        )

    return [a for a in data.articles if _matches(a)]


def get_articles_by_author(data: ArticlesData, author_id: str, limit: int | None = None) -> list[Article]:
    return _take([a for a in data.articles if a.author and a.author.id == author_id], limit)


def get_recent_articles(data: ArticlesData, limit: int = 10) -> list[Article]:
    return _newest_first(list(data.articles))[: max(0, limit)]


def format_date(value: str) -> str:
    """`2025-01-05T10:00:00Z` -> `January 5, 2025` (input returned as-is if unparseable)."""
    dt = parse_timestamp(value)
    if dt is None:
        return value
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def format_reading_time(minutes: int) -> str:
    return f"{minutes} min read"
