"""Author loader + article store (`data/articles.json`).

The store is a single denormalized JSON document that is read, fully
rewritten, and closed within one run. New articles are prepended, the list is
de-duplicated by article id, and capped to the most recent `ARTICLE_LIMIT`
records.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from magazine.config import (
    ARTICLE_LIMIT,
    ARTICLES_FILE,
    AUTHORS_DIR,
    DEFAULT_CATEGORIES,
    SAMPLE_ARTICLES_FILE,
    STORE_VERSION,
)
from magazine.models import Article, ArticlesData, AuthorProfile, StoreMetadata
from magazine.utils import to_iso, utc_now

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when an on-disk document exists but cannot be read."""


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(path)


def default_articles_data(now: datetime | None = None) -> ArticlesData:
    stamp = to_iso(now or utc_now())
    return ArticlesData(
        articles=[],
        metadata=StoreMetadata(
            last_updated=stamp,
            total_articles=0,
            version=STORE_VERSION,
            last_generation_date=stamp,
            new_articles_added=0,
            articles_limit_reached=False,
        ),
        categories=list(DEFAULT_CATEGORIES),
    )


# --- Authors -------------------------------------------------------------------


def load_authors(authors_dir: Path = AUTHORS_DIR) -> list[AuthorProfile]:
    """Load author profiles in `index.json` order.

    A missing index yields no authors. Individual profiles that are missing or
    malformed are logged and skipped.
    """
    index_path = authors_dir / "index.json"
    if not index_path.exists():
        logger.warning("Authors index not found at %s", index_path)
        return []

    try:
        index = _load_json(index_path)
    except (OSError, json.JSONDecodeError) as e:
        raise StoreError(f"Cannot read authors index {index_path}: {e}") from e
    if not isinstance(index, dict):
        raise StoreError(f"Authors index {index_path} must be a JSON object")

    authors: list[AuthorProfile] = []
    for ref in index.get("authors") or []:
        if not isinstance(ref, dict) or not ref.get("id"):
            logger.warning("Skipping malformed authors index entry: %r", ref)
            continue
        author_id = ref["id"]
        rel_path = ref.get("profilePath") or f"profiles/{author_id}.json"
        profile_path = authors_dir / rel_path
        try:
            authors.append(AuthorProfile.model_validate(_load_json(profile_path)))
        except FileNotFoundError:
            logger.warning("Author profile missing for %s: %s", author_id, profile_path)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Invalid author profile %s: %s", profile_path, e)
    return authors


# --- Articles ------------------------------------------------------------------


def load_articles(path: Path = ARTICLES_FILE) -> ArticlesData:
    """Load the store; a missing file yields the default (empty) document."""
    if not path.exists():
        logger.info("Articles file not found at %s, starting from an empty store", path)
        return default_articles_data()
    try:
        return ArticlesData.model_validate(_load_json(path))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise StoreError(f"Cannot read articles store {path}: {e}") from e


def load_articles_or_empty(path: Path = ARTICLES_FILE) -> ArticlesData:
    """Read-only variant for the artifact builders: any failure degrades to an empty store."""
    if not path.exists():
        logger.warning("Articles file not found at %s", path)
        return ArticlesData()
    try:
        return load_articles(path)
    except StoreError as e:
        logger.error("Error loading articles: %s", e)
        return ArticlesData()


def load_site_data(
    path: Path = ARTICLES_FILE,
    sample_path: Path = SAMPLE_ARTICLES_FILE,
) -> ArticlesData:
    """Data the site renders from: the store, else the sample store, else defaults."""
    for candidate in (path, sample_path):
        if candidate.exists():
            try:
                return load_articles(candidate)
            except StoreError as e:
                logger.error("Error loading articles: %s", e)
                return ArticlesData(metadata=StoreMetadata(last_updated=to_iso(utc_now())))
    return default_articles_data()


def dedupe_by_id(articles: Sequence[Article]) -> list[Article]:
    """Keep the first occurrence of every article id, preserving order."""
    seen: set[str] = set()
    out: list[Article] = []
    for article in articles:
        if article.id in seen:
            continue
        seen.add(article.id)
        out.append(article)
    return out


def merge_articles(
    data: ArticlesData,
    new_articles: Sequence[Article],
    *,
    limit: int = ARTICLE_LIMIT,
    now: datetime | None = None,
) -> ArticlesData:
    """Prepend `new_articles`, de-duplicate by id and cap the list at `limit`.

    Merging the same batch twice yields the same article list: the new copies
    stay at the front and the older duplicates are dropped.
    """
    stamp = to_iso(now or utc_now())
    merged = dedupe_by_id([*new_articles, *data.articles])

    meta = data.metadata
    meta.total_articles = len(merged)
    meta.last_updated = stamp
    meta.last_generation_date = stamp
    meta.new_articles_added = len(new_articles)
    if meta.articles_limit_reached is None:
        meta.articles_limit_reached = False

    if len(merged) > limit:
        merged = merged[:limit]
        meta.total_articles = limit
        meta.articles_limit_reached = True

    data.articles = merged
    return data


def save_articles(data: ArticlesData, path: Path = ARTICLES_FILE) -> None:
    _write_json(path, data.to_json_dict())


def write_json_document(path: Path, payload: Any) -> None:
    """Write a derived JSON artifact (navigation, stats) atomically."""
    _write_json(path, payload)
