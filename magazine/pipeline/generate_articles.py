"""Daily article generator.

For each author persona: research recent articles in their area, pick the most
relevant one, draft an opinion piece in the author's voice, render a banner,
and prepend the results to `data/articles.json`.

Authors are processed sequentially with a fixed delay between them. A failure
for one author is logged and the batch moves on; missing credentials outside
test mode abort the run with exit code 1.

Run:
    python -m magazine.pipeline.generate_articles
    TEST_MODE=true python -m magazine.pipeline.generate_articles
"""

from __future__ import annotations

import argparse
import logging
import math
import random
import re
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Sequence

from dotenv import load_dotenv
from langchain_core.prompts import ChatPromptTemplate

from magazine.config import (
    ARTICLE_LIMIT,
    ARTICLES_FILE,
    AUTHOR_DELAY_SECONDS,
    AUTHORS_DIR,
    BANNER_DIR,
    PUBLIC_DIR,
    env_flag,
    is_test_mode,
)
from magazine.llm.factory import message_text
from magazine.models import Article, ArticleMetadata, AuthorProfile, ResearchFinding, SourceArticle
from magazine.pipeline import banner as banner_mod
from magazine.pipeline import llm_config
from magazine.pipeline.research import (
    generate_trending_topics,
    mock_source_for,
    research_articles_for_author,
    select_best_source,
)
from magazine.store import StoreError, load_articles, load_authors, merge_articles, save_articles
from magazine.utils import slugify, to_iso, utc_now, word_count

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
FEATURED_PROBABILITY = 0.3
MAX_TAGS = 8

CATEGORY_MAP = {
    "AI-Powered Development Tools": "AI Tools",
    "Machine Learning Operations": "Machine Learning",
    "AI-Driven Testing & Automation": "Testing",
    "Emerging AI Technologies & Ethics": "Future Tech",
    "CI/CD Pipeline Automation & Workflow Intelligence": "DevOps",
}
DEFAULT_CATEGORY = "AI Tools"

COMMON_TAGS = [
    "AI", "Machine Learning", "Automation", "DevOps", "Testing",
    "Python", "JavaScript", "React", "Node.js", "Docker", "Kubernetes",
    "GitHub", "VS Code", "OpenAI", "TensorFlow", "PyTorch",
]
TITLE_STOPWORDS = {"About", "From", "With", "That", "This", "What", "When", "Where", "Why", "How"}


@dataclass(frozen=True)
class GenerationResult:
    status: str  # created|skipped|failed
    author_id: str
    article_id: str | None = None
    reason: str | None = None


@dataclass
class GenerationClients:
    """External services used in production mode."""

    research_llm: Any
    writer_llm: Any
    image_prompt_llm: Any
    topics_llm: Any
    image_client: Any
    image_model: str = "dall-e-2"
    image_size: str = "1024x1024"


def build_clients() -> GenerationClients:
    """Instantiate every production client up front so missing keys fail fast (ValueError)."""
    return GenerationClients(
        research_llm=llm_config.get_research_llm(),
        writer_llm=llm_config.get_writer_llm(),
        image_prompt_llm=llm_config.get_image_prompt_llm(),
        topics_llm=llm_config.get_topics_llm(),
        image_client=llm_config.get_image_client(),
        image_model=llm_config.image_model(),
        image_size=llm_config.image_size(),
    )


# --- Derived fields ------------------------------------------------------------


def category_for(specialization: str) -> str:
    """Site category for an author specialization (exact match only)."""
    return CATEGORY_MAP.get(specialization, DEFAULT_CATEGORY)


def mock_category_for(specialization: str) -> str:
    """Keyword-based category used by test-mode articles."""
    if "Tools" in specialization:
        return "AI Tools"
    if "Machine Learning" in specialization:
        return "Machine Learning"
    if "Testing" in specialization:
        return "Testing"
    if "Ethics" in specialization:
        return "Future Tech"
    return "DevOps"


def extract_title(content: str, fallback: str) -> str:
    match = re.search(r"^#\s+(.+)$", content, flags=re.MULTILINE)
    return match.group(1).strip() if match else fallback


def make_excerpt(content: str, title: str) -> str:
    """First substantial non-heading paragraph, cut to 200 chars."""
    for paragraph in content.split("\n\n"):
        if not paragraph.startswith("#") and len(paragraph.strip()) > 50:
            return paragraph.strip()[:200] + "..."
    return title[:150] + "..."


def reading_time_minutes(words: int) -> int:
    return math.ceil(words / WORDS_PER_MINUTE)


def make_article_id(now: datetime, author_id: str, slug: str) -> str:
    return f"{now.strftime('%Y%m%d')}-{author_id}-{slug[:30]}"


def generate_tags(content: str, expertise: Sequence[str], source: ResearchFinding | None = None) -> list[str]:
    """Up to eight tags from expertise, the source title, and well-known tech names in the body."""
    tags: dict[str, None] = {}

    for exp in expertise[:3]:
        tags[" ".join(exp.split()[:2])] = None

    if source is not None:
        tags["Research-Based"] = None
        tags["Industry Analysis"] = None
        title_words = [
            w for w in source.title.split()
            if len(w) > 4 and w[:1].isupper() and w not in TITLE_STOPWORDS
        ]
        for word in title_words[:2]:
            tags[word] = None

    lowered = content.lower()
    for tag in COMMON_TAGS:
        if tag.lower() in lowered:
            tags[tag] = None

    return list(tags)[:MAX_TAGS]


def _source_record(source: ResearchFinding, now: datetime) -> SourceArticle:
    return SourceArticle(
        url=source.url,
        title=source.title,
        publish_date=source.publish_date or to_iso(now),
        summary=source.summary,
        author=source.source,
        relevance_score=source.relevance_score,
        research_date=source.research_date,
        research_query=source.research_query,
    )


# --- Production generation -----------------------------------------------------

_ARTICLE_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", "You are {name}, {title}. {bio}"),
        (
            "user",
            """{agent_prompt}

You have found this recent article that aligns with your expertise:

**Source Article:**
Title: "{source_title}"
Source: {source_name}
Published: {source_published}
Summary: {source_summary}
{source_url_line}

**Your Task:**
Write a research-based opinion article that:

1. **References the source article** - Properly cite and discuss the key points
2. **Provides your expert analysis** - Share your professional perspective on the developments
3. **Adds valuable insights** - Go beyond the source with your expertise in {specialization}
4. **Makes it practical** - Include actionable advice, implementation tips, or best practices
5. **Engages the audience** - Write in your characteristic style while being informative

**Article Structure:**
- Compelling title that reflects both the source topic and your perspective
- Introduction that references the source article and your take on it
- Main content with your analysis, insights, and practical guidance
- Conclusion with your recommendations or predictions

**Requirements:**
- 1600-2400 words
- Reference the source article throughout
- Include practical examples or code snippets where relevant
- Use your characteristic writing style and tone
- End with actionable takeaways

Today is {today}. Focus on how this development affects the current landscape of {specialization}.""",
        ),
    ]
)


def draft_article(author: AuthorProfile, source: ResearchFinding, *, llm: Any, now: datetime) -> str:
    messages = _ARTICLE_PROMPT.format_messages(
        name=author.name,
        title=author.title,
        bio=author.bio,
        agent_prompt=author.agent_prompt,
        source_title=source.title,
        source_name=source.source,
        source_published=(source.publish_date or "").split("T")[0] or "Recently",
        source_summary=source.summary,
        source_url_line=f"URL: {source.url}" if source.url else "",
        specialization=author.specialization,
        today=now.date().isoformat(),
    )
    content = message_text(llm.invoke(messages))
    if not content:
        raise ValueError("writer model returned an empty article")
    return content


def generate_article_for_author(
    author: AuthorProfile,
    *,
    clients: GenerationClients,
    now: datetime | None = None,
    rng: random.Random | None = None,
    download_banners: bool = False,
    banner_dir: Path = BANNER_DIR,
    public_dir: Path = PUBLIC_DIR,
) -> Article | None:
    """Research, draft and illustrate one article. Returns None when no source qualifies."""
    now = now or utc_now()
    rng = rng or random.Random()

    search_terms = author.search_terms
    if not search_terms:
        logger.info("No search terms for %s, using trending topics", author.name)
        search_terms = generate_trending_topics(llm=clients.topics_llm, now=now)

    findings = research_articles_for_author(author, llm=clients.research_llm, search_terms=search_terms, now=now)
    source = select_best_source(author, findings)
    if source is None:
        return None

    logger.info("Generating opinion article for %s based on source material", author.name)
    content = draft_article(author, source, llm=clients.writer_llm, now=now)

    title = extract_title(content, f"{author.name}'s Take on: {source.title}")
    slug = slugify(title, max_length=60)
    words = word_count(content)
    article_id = make_article_id(now, author.id, slug)

    logger.info("Generating banner image for %r", title)
    description = banner_mod.generate_image_description(title, author, llm=clients.image_prompt_llm)
    banner = banner_mod.generate_banner_image(
        description,
        article_id,
        client=clients.image_client,
        model=clients.image_model,
        size=clients.image_size,
        now=now,
    )
    if download_banners:
        banner = banner_mod.download_banner(banner, banner_dir / f"{article_id}.png", public_dir=public_dir)
    logger.info("Generated banner image: %s", banner.model)

    stamp = to_iso(now)
    return Article(
        id=article_id,
        title=title,
        slug=slug,
        excerpt=make_excerpt(content, title),
        content=content,
        source_article=_source_record(source, now),
        banner_image=banner,
        author=author.snapshot(),
        published_at=stamp,
        updated_at=stamp,
        category=category_for(author.specialization),
        tags=generate_tags(content, author.expertise, source),
        reading_time=reading_time_minutes(words),
        featured=rng.random() < FEATURED_PROBABILITY,
        metadata=ArticleMetadata(
            word_count=words,
            generation_prompt=f"Research-based article on: {source.title}",
            generated_by="GPT-4",
            generation_date=stamp,
            based_on_source=True,
            source_relevance=source.relevance_score,
        ),
    )


def generate_for_authors(
    authors: Sequence[AuthorProfile],
    *,
    clients: GenerationClients,
    delay_seconds: float = AUTHOR_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    now: datetime | None = None,
    rng: random.Random | None = None,
    download_banners: bool = False,
) -> tuple[list[Article], list[GenerationResult]]:
    """Generate one article per author, isolating failures per author."""
    articles: list[Article] = []
    results: list[GenerationResult] = []

    for index, author in enumerate(authors):
        logger.info("Generating research-based article for %s...", author.name)
        try:
            article = generate_article_for_author(
                author,
                clients=clients,
                now=now,
                rng=rng,
                download_banners=download_banners,
            )
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to generate article for %s: %s", author.name, e)
            results.append(GenerationResult(status="failed", author_id=author.id, reason=str(e)))
        else:
            if article is None:
                logger.warning("Skipped %s - no suitable source found", author.name)
                results.append(GenerationResult(status="skipped", author_id=author.id, reason="No source article"))
            else:
                articles.append(article)
                results.append(GenerationResult(status="created", author_id=author.id, article_id=article.id))
                logger.info("Generated: %r (source relevance %s/10)", article.title, article.metadata.source_relevance)

        if delay_seconds > 0 and index < len(authors) - 1:
            sleep(delay_seconds)

    return articles, results


# --- Test mode -----------------------------------------------------------------


def _mock_content(author: AuthorProfile, title: str, source: ResearchFinding) -> str:
    return f"""# {title}

## Introduction

I recently came across an interesting article from {source.source} about "{source.title}". This development caught my attention because it directly impacts our field of {author.specialization}.

## Analysis

{source.summary}

This is a mock article generated for testing purposes. In production, this would contain a full AI-generated analysis of the source material.

## My Perspective

Based on my experience in {author.specialization}, I see several key implications:

- Point 1 about the practical applications
- Point 2 about the technical challenges
- Point 3 about the industry impact

## Conclusion

This development represents an important step forward in our field. Teams should consider how these changes might affect their current workflows and plan accordingly.

**Source:** [{source.title}]({source.url}) - {source.source}"""


def generate_mock_articles(authors: Sequence[AuthorProfile], *, now: datetime | None = None) -> list[Article]:
    """One deterministic article per author; no external calls."""
    now = now or utc_now()
    stamp = to_iso(now)
    articles: list[Article] = []

    for index, author in enumerate(authors):
        source = mock_source_for(author, now=now)
        title = f"{author.name}'s Analysis: {source.title}"
        slug = slugify(title)
        first_word = author.specialization.split(" ")[0] if author.specialization else "AI"
        articles.append(
            Article(
                id=make_article_id(now, author.id, slug),
                title=title,
                slug=slug,
                excerpt=(
                    f"A comprehensive analysis of recent developments in {author.specialization.lower()}, "
                    f"based on {source.source}'s latest announcement."
                ),
                content=_mock_content(author, title, source),
                source_article=_source_record(source, now),
                banner_image=banner_mod.mock_banner(title, now=now),
                author=author.snapshot(),
                published_at=stamp,
                updated_at=stamp,
                category=mock_category_for(author.specialization),
                tags=["Research-Based", "Industry Analysis", first_word],
                reading_time=4,
                featured=index < 2,
                metadata=ArticleMetadata(
                    word_count=300,
                    generation_prompt=f"Research-based article on: {source.title}",
                    generated_by="Mock Generator",
                    generation_date=stamp,
                    based_on_source=True,
                    source_relevance=source.relevance_score,
                ),
            )
        )
    return articles


# --- CLI -----------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Generate one research-based article per author and update articles.json.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--test-mode", action="store_true", help="Generate mock articles (same as TEST_MODE=true).")
    p.add_argument("--author-delay", type=float, default=AUTHOR_DELAY_SECONDS, help="Seconds to wait between authors.")
    p.add_argument("--limit", type=int, default=ARTICLE_LIMIT, help="Max articles kept in the store.")
    p.add_argument("--articles-file", type=Path, default=ARTICLES_FILE)
    p.add_argument("--authors-dir", type=Path, default=AUTHORS_DIR)
    return p


def main(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    test_mode = bool(args.test_mode) or is_test_mode()

    logger.info("Starting AI Writing About AI Magazine article generation...")

    clients: GenerationClients | None = None
    if not test_mode:
        try:
            clients = build_clients()
        except ValueError as e:
            logger.error("%s", e)
            logger.info("Set TEST_MODE=true to run in test mode with mock articles")
            sys.exit(1)
        logger.info("LLM clients initialized")

    try:
        authors = load_authors(args.authors_dir)
        data = load_articles(args.articles_file)
    except StoreError as e:
        logger.error("Article generation failed: %s", e)
        sys.exit(1)

    logger.info("Loaded %s authors", len(authors))
    logger.info("Current articles: %s", len(data.articles))

    if clients is None:
        logger.info("Running in test mode - generating mock articles")
        new_articles = generate_mock_articles(authors)
    else:
        new_articles, results = generate_for_authors(
            authors,
            clients=clients,
            delay_seconds=args.author_delay,
            download_banners=env_flag("MAG_DOWNLOAD_BANNERS"),
        )
        failed = [r for r in results if r.status == "failed"]
        logger.info(
            "Generation summary: created=%s skipped=%s failed=%s",
            len(new_articles),
            len([r for r in results if r.status == "skipped"]),
            len(failed),
        )

    if not new_articles:
        logger.warning("No articles were generated")
        return

    merge_articles(data, new_articles, limit=args.limit)
    save_articles(data, args.articles_file)

    logger.info("Successfully generated %s new articles", len(new_articles))
    logger.info("Total articles: %s", len(data.articles))
    if data.metadata.articles_limit_reached:
        logger.info("Article limit of %s reached; oldest articles were dropped", args.limit)


if __name__ == "__main__":
    main()
