"""LLM factory utilities for the magazine pipeline.

Centralizes:
- mapping model names -> provider + required API key env var
- instantiating provider-specific LangChain chat models
- ordered model lists (primary + fallbacks) parsed from env vars
- retry/backoff for transient failures (rate limits, timeouts, 5xx)
- the OpenAI client used for banner image generation

Pipeline modules declare *which* models to try and call the factory; none of
them instantiate a provider class directly.
"""

from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional, Sequence, TypeAlias

from langchain_anthropic import ChatAnthropic
from langchain_fireworks import ChatFireworks
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from openai import OpenAI

ModelRegistry: TypeAlias = Mapping[str, Mapping[str, str]]


DEFAULT_MODEL_REGISTRY: dict[str, dict[str, str]] = {
    # OpenAI
    "gpt-4": {"provider": "openai", "env_var": "OPENAI_API_KEY"},
    "gpt-4o": {"provider": "openai", "env_var": "OPENAI_API_KEY"},
    "gpt-4o-mini": {"provider": "openai", "env_var": "OPENAI_API_KEY"},
    "gpt-4.1": {"provider": "openai", "env_var": "OPENAI_API_KEY"},
    "gpt-4.1-mini": {"provider": "openai", "env_var": "OPENAI_API_KEY"},
    # Anthropic
    "claude-sonnet-4-5": {"provider": "anthropic", "env_var": "ANTHROPIC_API_KEY"},
    "claude-haiku-4-5": {"provider": "anthropic", "env_var": "ANTHROPIC_API_KEY"},
    # Google Gemini
    "gemini-2.5-pro": {"provider": "google_genai", "env_var": "GOOGLE_API_KEY"},
    "gemini-2.5-flash": {"provider": "google_genai", "env_var": "GOOGLE_API_KEY"},
    # Fireworks
    "accounts/fireworks/models/deepseek-v3p1": {"provider": "fireworks", "env_var": "FIREWORKS_API_KEY"},
    "accounts/fireworks/models/gpt-oss-120b": {"provider": "fireworks", "env_var": "FIREWORKS_API_KEY"},
}

# Older identifiers still found in author configs and env files.
MODEL_ALIASES: dict[str, str] = {
    "gpt-4-turbo": "gpt-4o",
    "gemini-flash-latest": "gemini-2.5-flash",
    "claude-sonnet-4-5-20250929": "claude-sonnet-4-5",
    "claude-haiku-4-5-20251001": "claude-haiku-4-5",
}

IMAGE_MODEL_ENV_VAR = "OPENAI_API_KEY"


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for transient model call failures."""

    max_attempts: int = 3
    initial_backoff_seconds: float = 1.0
    max_backoff_seconds: float = 20.0
    jitter_ratio: float = 0.2


def parse_model_list(raw: str | None, *, default: Sequence[str]) -> list[str]:
    """Parse a comma-separated model list into a de-duplicated ordered list."""
    parts = [p.strip() for p in (raw or "").split(",")]
    models = [p for p in parts if p] or list(default)

    seen: set[str] = set()
    out: list[str] = []
    for m in models:
        if m not in seen:
            seen.add(m)
            out.append(m)
    return out


def _infer_provider(model_name: str) -> str | None:
    name = (model_name or "").lower()
    if name.startswith(("gpt", "o1", "o3", "o4")):
        return "openai"
    if "claude" in name:
        return "anthropic"
    if "gemini" in name:
        return "google_genai"
    if name.startswith("accounts/fireworks/models/"):
        return "fireworks"
    return None


def resolve_model(model_name: str, *, registry: ModelRegistry | None = None) -> tuple[str, str, str | None]:
    """Return `(canonical_name, provider, env_var)` for a model name."""
    canonical = MODEL_ALIASES.get(model_name, model_name)
    entry = (registry or DEFAULT_MODEL_REGISTRY).get(canonical, {})
    provider = entry.get("provider") or _infer_provider(canonical)
    if provider is None:
        raise ValueError(
            f"Unknown provider for model '{model_name}'. "
            "Supported providers: openai, anthropic, google_genai, fireworks"
        )
    return canonical, provider, entry.get("env_var")


def require_api_key(env_var: str, what: str) -> str:
    value = os.getenv(env_var)
    if not value:
        raise ValueError(f"Missing API key for {what}. Set {env_var}.")
    return value


def create_chat_model(
    *,
    model_name: str,
    registry: ModelRegistry | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    timeout: int | None = None,
    extra_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> Any:
    """Create a provider-specific LangChain chat model instance."""
    canonical, provider, env_var = resolve_model(model_name, registry=registry)
    api_key = require_api_key(env_var, f"model '{canonical}'") if env_var else None

    kwargs: dict[str, Any] = dict(extra_kwargs or {})
    if temperature is not None:
        kwargs["temperature"] = temperature
    if timeout is not None:
        kwargs["timeout"] = timeout

    if provider == "openai":
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if api_key is not None:
            kwargs["api_key"] = api_key
        return ChatOpenAI(model=canonical, **kwargs)

    if provider == "anthropic":
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if api_key is not None:
            kwargs["api_key"] = api_key
        return ChatAnthropic(model_name=canonical, **kwargs)  # type: ignore[call-arg]

    if provider == "google_genai":
        if max_tokens is not None:
            kwargs["max_output_tokens"] = max_tokens
        if api_key is not None:
            kwargs["google_api_key"] = api_key
        return ChatGoogleGenerativeAI(model=canonical, **kwargs)

    if provider == "fireworks":
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if api_key is not None:
            kwargs["api_key"] = api_key
        return ChatFireworks(model=canonical, **kwargs)

    raise ValueError(f"Unsupported provider '{provider}' for model '{model_name}'.")


def create_chat_models(model_names: Sequence[str], **kwargs: Any) -> list[Any]:
    """Create multiple chat models (ordered) for primary + fallbacks."""
    if not model_names:
        raise ValueError("model_names must be non-empty.")
    return [create_chat_model(model_name=m, **kwargs) for m in model_names]


def _is_retryable_exception(e: Exception) -> bool:
    """Provider-agnostic detection of transient failures."""
    msg = str(e).lower()
    transient_markers = (
        "rate limit",
        "too many requests",
        "429",
        "500",
        "502",
        "503",
        "504",
        "timed out",
        "timeout",
        "overloaded",
        "temporarily unavailable",
        "service unavailable",
        "connection reset",
        "connection aborted",
    )
    return any(m in msg for m in transient_markers)


def _compute_backoff(attempt: int, cfg: RetryConfig) -> float:
    base = min(cfg.initial_backoff_seconds * (2 ** max(0, attempt - 1)), cfg.max_backoff_seconds)
    jitter = base * cfg.jitter_ratio * (random.random() * 2 - 1)
    return max(0.0, base + jitter)


def retryable_invoke(runnable: Any, input: Any, *, retry: RetryConfig | None = None) -> Any:
    """Invoke a runnable with retry/backoff on transient failures."""
    cfg = retry or RetryConfig()
    for attempt in range(1, cfg.max_attempts + 1):
        try:
            return runnable.invoke(input)
        except Exception as e:  # noqa: BLE001
            if attempt >= cfg.max_attempts or not _is_retryable_exception(e):
                raise
            time.sleep(_compute_backoff(attempt, cfg))
    raise RuntimeError("retryable_invoke made no attempts (max_attempts < 1).")


class RetryingChatModel:
    """Chat model (with fallbacks) whose `.invoke()` retries transient failures."""

    def __init__(self, inner: Any, retry: RetryConfig) -> None:
        self._inner = inner
        self.retry = retry

    def invoke(self, inp: Any, **kwargs: Any) -> Any:
        target = self._inner.bind(**kwargs) if kwargs else self._inner
        return retryable_invoke(target, inp, retry=self.retry)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._inner, name)


def build_chat_runnable(
    *,
    model_names: Sequence[str],
    registry: ModelRegistry | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    timeout: int | None = None,
    retry: RetryConfig | None = None,
    extra_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> Any:
    """Primary model with LangChain fallbacks, optionally wrapped with retries."""
    models = create_chat_models(
        model_names,
        registry=registry,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
        extra_kwargs=extra_kwargs,
    )
    runnable = models[0].with_fallbacks(models[1:]) if len(models) > 1 else models[0]
    if retry is None:
        return runnable
    return RetryingChatModel(runnable, retry)


def message_text(message: Any) -> str:
    """Plain text of a chat response (string content or a list of content blocks)."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text") or ""))
        return "".join(parts).strip()
    return str(content).strip()


def create_image_client(*, timeout: float | None = None) -> OpenAI:
    """OpenAI SDK client for the image generation endpoint."""
    api_key = require_api_key(IMAGE_MODEL_ENV_VAR, "image generation")
    kwargs: dict[str, Any] = {"api_key": api_key}
    if timeout is not None:
        kwargs["timeout"] = timeout
    base_url = os.getenv("OPENAI_BASE_URL")
    if base_url:
        kwargs["base_url"] = base_url
    return OpenAI(**kwargs)
