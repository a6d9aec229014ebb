"""Small helpers shared by the generator and the site builders."""

from __future__ import annotations

import re
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a trailing `Z`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str | None) -> datetime | None:
    """Best-effort parse of an ISO 8601 timestamp (or date) into aware UTC."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def slugify(text: str, max_length: int | None = None) -> str:
    """Lowercase, drop anything outside `[a-z0-9 -]`, turn whitespace runs into `-`."""
    slug = re.sub(r"[^a-z0-9\s-]", "", (text or "").lower())
    slug = re.sub(r"\s+", "-", slug)
    if max_length is not None:
        slug = slug[: max(0, max_length)]
    return slug


def word_count(text: str) -> int:
    return len([w for w in re.split(r"\s+", text or "") if w])
