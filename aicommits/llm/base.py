"""LLM Base Classes and Shared Code"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

STATUS_PAGE = "https://status.openai.com"

TRAILING_PERIOD = re.compile(r'(\w)\.$')


def sanitize_message(message: str) -> str:
    """Trim, join onto one line and drop a single trailing period."""
    message = message.strip().replace('\n', '').replace('\r', '')
    return TRAILING_PERIOD.sub(r'\1', message)


def deduplicate_messages(messages: list[str]) -> list[str]:
    """Collapse duplicates, keeping first-seen order."""
    return list(dict.fromkeys(messages))


@dataclass
class LLMResponse:
    """Structured response from any LLM provider."""
    messages: list[str] = field(default_factory=list)
    model: str = ""
    tokens_used: int = 0


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class RequestTimeoutError(LLMError):
    """The request did not complete within the configured timeout."""

    def __init__(self, timeout: int):
        self.timeout = timeout
        super().__init__(
            f"Time out error: request took over {timeout}ms. Try increasing the `timeout` config, "
            f"or checking the OpenAI API status {STATUS_PAGE}"
        )


class HostUnreachableError(LLMError):
    """The API host name could not be resolved."""

    def __init__(self, host: str, syscall: str = "getaddrinfo"):
        self.host = host
        self.syscall = syscall
        super().__init__(f"Error connecting to {host} ({syscall}). Are you connected to the internet?")


class APIError(LLMError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, reason: str, body: str = ""):
        self.status = status
        self.reason = reason
        self.body = body

        message = f"API Error: {status} - {reason}"
        if body:
            message += f"\n\n{body}"
        if status == 500:
            message += f"\n\nCheck the API status: {STATUS_PAGE}"
        super().__init__(message)


class LLMClient(ABC):
    """Abstract base for LLM clients."""

    @abstractmethod
    def generate(self, diff: str) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
