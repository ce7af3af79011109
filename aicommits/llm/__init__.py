"""LLM Client Package"""

from typing import Any

from aicommits.llm.base import (
    APIError,
    HostUnreachableError,
    LLMClient,
    LLMError,
    LLMResponse,
    RequestTimeoutError,
    deduplicate_messages,
    sanitize_message,
)
from aicommits.llm.openai import (
    AUTH_STRATEGIES,
    DEFAULT_URL,
    AuthMode,
    OpenAIClient,
    create_chat_completion,
)


def get_client(config: dict[str, Any]) -> LLMClient:
    """Get an LLM client for a validated config."""
    return OpenAIClient(config)


def generate_commit_message(config: dict[str, Any], diff: str) -> list[str]:
    """One request, returning the sanitized, deduplicated candidates."""
    return get_client(config).generate(diff).messages


__all__ = [
    "APIError",
    "AUTH_STRATEGIES",
    "AuthMode",
    "DEFAULT_URL",
    "HostUnreachableError",
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "OpenAIClient",
    "RequestTimeoutError",
    "create_chat_completion",
    "deduplicate_messages",
    "generate_commit_message",
    "get_client",
    "sanitize_message",
]
