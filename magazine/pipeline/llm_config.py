"""Article pipeline LLM configuration helpers.

Environment variables (comma-separated; primary + fallbacks):
- MAG_RESEARCH_MODELS
- MAG_WRITER_MODELS
- MAG_IMAGE_PROMPT_MODELS
- MAG_TOPIC_MODELS

Shared knobs:
- MAG_LLM_TIMEOUT_SECONDS (default: 120)
- MAG_LLM_MAX_ATTEMPTS / MAG_LLM_INITIAL_BACKOFF_SECONDS /
  MAG_LLM_MAX_BACKOFF_SECONDS / MAG_LLM_JITTER_RATIO

Image generation:
- MAG_IMAGE_MODEL (default: dall-e-2)
- MAG_IMAGE_SIZE (default: 1024x1024)
"""

from __future__ import annotations

import os
from typing import Any

from magazine.llm.factory import RetryConfig, build_chat_runnable, create_image_client, parse_model_list

DEFAULT_MODELS = ["gpt-4", "gpt-4o"]


def _timeout_seconds() -> int:
    return int(os.getenv("MAG_LLM_TIMEOUT_SECONDS", "120"))


def _retry_cfg() -> RetryConfig:
    return RetryConfig(
        max_attempts=int(os.getenv("MAG_LLM_MAX_ATTEMPTS", "3")),
        initial_backoff_seconds=float(os.getenv("MAG_LLM_INITIAL_BACKOFF_SECONDS", "1.0")),
        max_backoff_seconds=float(os.getenv("MAG_LLM_MAX_BACKOFF_SECONDS", "20.0")),
        jitter_ratio=float(os.getenv("MAG_LLM_JITTER_RATIO", "0.2")),
    )


def _build(env_var: str, *, temperature: float, max_tokens: int) -> Any:
    return build_chat_runnable(
        model_names=parse_model_list(os.getenv(env_var), default=DEFAULT_MODELS),
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=_timeout_seconds(),
        retry=_retry_cfg(),
    )


def get_research_llm() -> Any:
    """LLM for `research.research_articles_for_author` (structured findings)."""
    return _build("MAG_RESEARCH_MODELS", temperature=0.3, max_tokens=1500)


def get_writer_llm() -> Any:
    """LLM that drafts the article body in the author's voice."""
    return _build("MAG_WRITER_MODELS", temperature=0.7, max_tokens=4000)


def get_image_prompt_llm() -> Any:
    """LLM that describes a text-free banner image for an article."""
    return _build("MAG_IMAGE_PROMPT_MODELS", temperature=0.7, max_tokens=200)


def get_topics_llm() -> Any:
    """LLM for trending-topic ideas (used when an author has no search terms)."""
    return _build("MAG_TOPIC_MODELS", temperature=0.8, max_tokens=500)


def image_model() -> str:
    return os.getenv("MAG_IMAGE_MODEL", "dall-e-2")


def image_size() -> str:
    return os.getenv("MAG_IMAGE_SIZE", "1024x1024")


def get_image_client() -> Any:
    return create_image_client(timeout=float(_timeout_seconds()))
