"""OpenAI Chat Completion Client (direct API key or Azure deployment)"""

import json
import socket
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

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
from aicommits.prompts import generate_prompt

DEFAULT_URL = "https://api.openai.com/v1/chat/completions"


class AuthMode(Enum):
    DIRECT = "direct"
    GATEWAY = "gateway"


@dataclass(frozen=True)
class AuthStrategy:
    """Where the endpoint and key come from, and how the key is sent."""
    key_setting: str
    url_setting: Optional[str]
    headers: Callable[[str], dict[str, str]]


AUTH_STRATEGIES = {
    AuthMode.DIRECT: AuthStrategy(
        key_setting='OPENAI_KEY',
        url_setting=None,
        headers=lambda key: {'Authorization': f'Bearer {key}'},
    ),
    AuthMode.GATEWAY: AuthStrategy(
        key_setting='AZURE_OPENAI_KEY',
        url_setting='AZURE_OPENAI_ENDPOINT',
        headers=lambda key: {'api-key': key},
    ),
}


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Hand 3xx answers back as HTTPError instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def _https_post(
    url: str,
    headers: dict[str, str],
    payload: dict,
    timeout: int,
    proxy: Optional[str] = None,
) -> tuple[int, str, str]:
    """
    POST a JSON body and buffer the full response.

    Redirects are not followed: a 3xx comes back like any other non-2xx
    answer, so the credential header never reaches another location.

    Args:
        timeout: Milliseconds
        proxy: Tunnel through this proxy; environment proxies are ignored

    Returns:
        (status, reason, body) for any HTTP answer, 2xx or not
    """
    data = json.dumps(payload).encode('utf-8')
    req = urllib.request.Request(
        url,
        data=data,
        method='POST',
        headers={
            **headers,
            'Content-Type': 'application/json',
            'Content-Length': str(len(data)),
        },
    )
    proxies = {'http': proxy, 'https': proxy} if proxy else {}
    opener = urllib.request.build_opener(
        urllib.request.ProxyHandler(proxies),
        _NoRedirectHandler(),
    )

    try:
        with opener.open(req, timeout=timeout / 1000) as response:
            return response.status, response.reason, response.read().decode('utf-8')
    except urllib.error.HTTPError as e:
        # HTTPError must come before URLError (it's a subclass)
        try:
            body = e.read().decode('utf-8', errors='replace')
        except socket.timeout:
            raise RequestTimeoutError(timeout)
        finally:
            e.close()
        return e.code, e.reason, body
    except urllib.error.URLError as e:
        if isinstance(e.reason, socket.timeout):
            raise RequestTimeoutError(timeout)
        if isinstance(e.reason, socket.gaierror):
            # With a proxy, the name that failed to resolve is the proxy's
            target = proxy or url
            raise HostUnreachableError(urllib.parse.urlsplit(target).hostname or target)
        raise
    except socket.timeout:
        raise RequestTimeoutError(timeout)


def create_chat_completion(
    mode: AuthMode,
    url: str,
    api_key: str,
    payload: dict,
    timeout: int,
    proxy: Optional[str] = None,
) -> dict:
    """Send one chat completion request and return the decoded response."""
    headers = AUTH_STRATEGIES[mode].headers(api_key)
    status, reason, body = _https_post(url, headers, payload, timeout, proxy)

    if not 200 <= status <= 299:
        raise APIError(status, reason, body)

    try:
        completion = json.loads(body)
    except json.JSONDecodeError:
        raise LLMError(f"Invalid response from the API: {body[:200]}")
    if not isinstance(completion, dict):
        raise LLMError(f"Invalid response from the API: {body[:200]}")
    return completion


def _choice_contents(completion: dict) -> list[str]:
    """Pull the message text out of each choice; missing or empty text is skipped."""
    choices = completion.get('choices') or []
    if not isinstance(choices, list):
        raise LLMError("Invalid response from the API: `choices` is not a list")

    contents = []
    for choice in choices:
        message = choice.get('message') if isinstance(choice, dict) else None
        content = message.get('content') if isinstance(message, dict) else None
        if content is None:
            continue
        if not isinstance(content, str):
            raise LLMError("Invalid response from the API: message content is not text")
        if content:
            contents.append(content)
    return contents


class OpenAIClient(LLMClient):
    """Chat completion client driven by a validated config."""

    TEMPERATURE = 0.7
    MAX_TOKENS = 200

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.mode = AuthMode.GATEWAY if config['USE_AZURE'] else AuthMode.DIRECT
        strategy = AUTH_STRATEGIES[self.mode]
        self.url = config[strategy.url_setting] if strategy.url_setting else DEFAULT_URL
        self.api_key = config[strategy.key_setting]
        self.model = config['model']

    @property
    def name(self) -> str:
        if self.mode is AuthMode.GATEWAY:
            return f"Azure OpenAI ({self.model})"
        return f"OpenAI ({self.model})"

    def build_payload(self, diff: str) -> dict:
        config = self.config
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": generate_prompt(config['locale'], config['max-length'], config['type']),
                },
                {"role": "user", "content": diff},
            ],
            "temperature": self.TEMPERATURE,
            "top_p": 1,
            "frequency_penalty": 0,
            "presence_penalty": 0,
            "max_tokens": self.MAX_TOKENS,
            "stream": False,
            "n": config['generate'],
        }

    def generate(self, diff: str) -> LLMResponse:
        completion = create_chat_completion(
            self.mode,
            self.url,
            self.api_key,
            self.build_payload(diff),
            self.config['timeout'],
            self.config.get('proxy'),
        )

        contents = _choice_contents(completion)
        messages = deduplicate_messages([sanitize_message(c) for c in contents])
        usage = completion.get('usage')

        return LLMResponse(
            messages=messages,
            model=completion.get('model', self.model),
            tokens_used=usage.get('total_tokens', 0) if isinstance(usage, dict) else 0,
        )
