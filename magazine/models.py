"""Typed records for the magazine's JSON documents.

The on-disk documents use camelCase keys (they are also read by the site's
page templates), so every model maps snake_case attributes onto camelCase
aliases. Unknown keys are kept so a load/save round-trip never drops data
written by other tools.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Authors -----------------------------------------------------------------


class ResearchInterests(_Record):
    search_terms: list[str] = Field(default_factory=list)


class AuthorProfile(_Record):
    """Full persona loaded from `authors/profiles/<id>.json`."""

    id: str
    name: str
    title: str = ""
    specialization: str = ""
    bio: str = ""
    agent_prompt: str = ""
    expertise: list[str] = Field(default_factory=list)
    research_interests: ResearchInterests = Field(default_factory=ResearchInterests)
    gender: str | None = None
    personality: dict[str, Any] | None = None
    writing_style: dict[str, Any] | None = None

    @property
    def search_terms(self) -> list[str]:
        return list(self.research_interests.search_terms)

    def snapshot(self) -> "AuthorSnapshot":
        return AuthorSnapshot(
            id=self.id,
            name=self.name,
            title=self.title,
            bio=self.bio,
            avatar=f"/authors/images/{self.id}.png",
        )


class AuthorSnapshot(_Record):
    """Author fields denormalized into each article."""

    id: str
    name: str
    title: str = ""
    bio: str = ""
    avatar: str = ""


# --- Research ------------------------------------------------------------------


class ResearchFinding(_Record):
    """One candidate source article returned by the research prompt."""

    title: str = Field(description="Title of the source article.")
    url: str | None = Field(default=None, description="URL of the source article, if known.")
    source: str = Field(default="", description="Publication or blog name.")
    summary: str = Field(default="", description="2-3 sentence summary.")
    relevance: int | None = Field(default=None, description="Relevance to the author's specialization, 1-10.")
    publish_date: str | None = Field(default=None, description="Estimated publication date (ISO 8601).")

    research_query: str | None = None
    research_date: str | None = None
    relevance_score: int = 5


class ResearchFindings(_Record):
    articles: list[ResearchFinding] = Field(description="Relevant recent articles found for the query.")


class TrendingTopics(_Record):
    topics: list[str] = Field(description="Short, practical AI development topics.")


# --- Articles ------------------------------------------------------------------


class BannerImage(_Record):
    url: str
    description: str = ""
    generated_at: str = ""
    model: str = ""
    error: str | None = None
    local_path: str | None = None


class SourceArticle(_Record):
    url: str | None = None
    title: str
    publish_date: str | None = None
    summary: str = ""
    author: str = ""
    relevance_score: int | None = None
    research_date: str | None = None
    research_query: str | None = None


class ArticleMetadata(_Record):
    word_count: int = 0
    generation_prompt: str = ""
    generated_by: str = ""
    generation_date: str = ""
    based_on_source: bool | None = None
    source_relevance: int | None = None


class Article(_Record):
    id: str
    title: str
    slug: str = ""
    excerpt: str = ""
    content: str = ""
    source_article: SourceArticle | None = None
    banner_image: BannerImage | None = None
    author: AuthorSnapshot | None = None
    published_at: str = ""
    updated_at: str = ""
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    reading_time: int = 0
    featured: bool = False
    metadata: ArticleMetadata = Field(default_factory=ArticleMetadata)


class StoreMetadata(_Record):
    last_updated: str = ""
    total_articles: int = 0
    version: str = "1.0.0"
    last_generation_date: str | None = None
    new_articles_added: int | None = None
    articles_limit_reached: bool | None = None


class ArticlesData(_Record):
    """The whole `articles.json` document."""

    articles: list[Article] = Field(default_factory=list)
    metadata: StoreMetadata = Field(default_factory=StoreMetadata)
    categories: list[str] = Field(default_factory=list)
