"""Shared LLM utilities (providers, model registry, factories).

Pipelines import from here instead of instantiating provider classes so that
a batch run can switch providers through env vars alone.
"""

from .factory import (  # noqa: F401
    ModelRegistry,
    RetryConfig,
    build_chat_runnable,
    create_chat_model,
    create_chat_models,
    create_image_client,
    message_text,
    parse_model_list,
    retryable_invoke,
)
