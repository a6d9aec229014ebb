"""Builders shared by the test modules (no network, no real providers)."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

from magazine.models import Article, AuthorProfile, AuthorSnapshot

AUTHOR_PROFILES: list[dict[str, Any]] = [
    {
        "id": "maya-chen",
        "name": "Maya Chen",
        "title": "Senior AI Tools Engineer",
        "specialization": "AI-Powered Development Tools",
        "bio": "Maya builds developer tooling.",
        "agentPrompt": "You are Maya Chen, a pragmatic tools engineer.",
        "expertise": ["Code completion engines", "IDE integrations", "Developer productivity metrics", "Extra"],
        "researchInterests": {"searchTerms": ["AI code completion", "AI pair programming", "IDE agents", "ignored"]},
    },
    {
        "id": "sofia-andersson",
        "name": "Sofia Andersson",
        "title": "DevOps Lead",
        "specialization": "CI/CD Pipeline Automation & Workflow Intelligence",
        "bio": "Sofia automates pipelines.",
        "agentPrompt": "You are Sofia Andersson.",
        "expertise": ["Pipeline optimization"],
        "researchInterests": {"searchTerms": ["DevOps automation"]},
    },
]


def make_author(index: int = 0, **overrides: Any) -> AuthorProfile:
    return AuthorProfile.model_validate({**AUTHOR_PROFILES[index], **overrides})


def make_article(article_id: str, **overrides: Any) -> Article:
    fields: dict[str, Any] = {
        "id": article_id,
        "title": f"Title {article_id}",
        "slug": f"title-{article_id}",
        "excerpt": f"Excerpt for {article_id}",
        "content": f"# Title {article_id}\n\nBody text.",
        "author": AuthorSnapshot(id="maya-chen", name="Maya Chen"),
        "published_at": "2025-09-15T10:00:00.000Z",
        "updated_at": "2025-09-16T10:00:00.000Z",
        "category": "AI Tools",
        "tags": ["AI"],
        "reading_time": 3,
    }
    fields.update(overrides)
    return Article(**fields)


def write_authors(authors_dir: Path, profiles: list[dict[str, Any]] | None = None) -> None:
    profiles = AUTHOR_PROFILES if profiles is None else profiles
    (authors_dir / "profiles").mkdir(parents=True, exist_ok=True)
    index = {"authors": [{"id": p["id"], "profilePath": f"profiles/{p['id']}.json"} for p in profiles]}
    (authors_dir / "index.json").write_text(json.dumps(index), encoding="utf-8")
    for p in profiles:
        (authors_dir / "profiles" / f"{p['id']}.json").write_text(json.dumps(p), encoding="utf-8")


class FakeImages:
    def __init__(self, url: str | None = "https://images.example/banner.png", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def generate(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(url=self.url)])


class FakeImageClient:
    def __init__(self, **kwargs: Any) -> None:
        self.images = FakeImages(**kwargs)


class FailingChatModel:
    """Stands in for a chat model whose provider call always errors."""

    def __init__(self, message: str = "provider exploded") -> None:
        self.message = message
        self.calls = 0

    def invoke(self, _input: object) -> Any:
        self.calls += 1
        raise RuntimeError(self.message)
