"""Model client shared by the gateway operations.

Two providers are supported, picked by ``settings.llm_provider``:

- ``openai``: POST ``{llm_base_url}/chat/completions`` with a bearer key;
  the reply is ``choices[0].message.content``. Works with any
  OpenAI-compatible endpoint.
- ``anthropic``: the Messages API through ``AsyncAnthropic``; ``system``
  messages become the ``system`` parameter.
"""

from __future__ import annotations

import logging

import httpx
from anthropic import APIError, AsyncAnthropic

from aqar.config import settings
from aqar.errors import LLMError

logger = logging.getLogger(__name__)

_client: AsyncAnthropic | None = None


def _get_client() -> AsyncAnthropic:
    global _client
    if _client is None:
        _client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
    return _client


async def _call_chat_completions(
    messages: list[dict[str, str]],
    model: str,
    temperature: float,
    max_tokens: int | None,
    transport: httpx.AsyncBaseTransport | None,
) -> str:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.llm_api_key}",
    }
    body: dict = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if max_tokens is not None:
        body["max_tokens"] = max_tokens

    url = f"{settings.llm_base_url.rstrip('/')}/chat/completions"
    try:
        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds, transport=transport) as client:
            response = await client.post(url, headers=headers, json=body)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        raise LLMError(f"chat completion request failed: {exc}") from exc

    try:
        content = response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise LLMError(f"unexpected chat completion body: {exc}") from exc

    if not isinstance(content, str) or not content:
        raise LLMError("chat completion returned no text content")
    return content


async def _call_anthropic(
    messages: list[dict[str, str]],
    model: str,
    temperature: float,
    max_tokens: int | None,
    client: AsyncAnthropic | None,
) -> str:
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    conversation = [m for m in messages if m["role"] != "system"]

    kwargs: dict = {
        "model": model,
        "max_tokens": max_tokens or settings.llm_max_tokens,
        "temperature": temperature,
        "messages": conversation,
    }
    if system:
        kwargs["system"] = system

    try:
        response = await (client or _get_client()).messages.create(**kwargs)
    except APIError as exc:
        raise LLMError(f"Claude request failed: {exc}") from exc

    text = "".join(block.text for block in response.content if block.type == "text")
    if not text:
        raise LLMError("Claude returned no text content")
    return text


async def call_chat(
    messages: list[dict[str, str]],
    model: str,
    temperature: float,
    max_tokens: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    client: AsyncAnthropic | None = None,
) -> str:
    """Send a conversation to the configured provider and return the reply text.

    Args:
        messages: role/content pairs, e.g. ``[{"role": "user", "content": "..."}]``
        model: model name (fast or rich variant from settings)
        temperature: sampling temperature for this call
        max_tokens: optional reply cap
        transport: httpx transport for the chat-completions provider (tests)
        client: ``AsyncAnthropic`` for the anthropic provider (tests)

    Raises:
        LLMError: transport failure, error status, unknown provider, or a
            reply without text.
    """
    match settings.llm_provider:
        case "openai":
            text = await _call_chat_completions(messages, model, temperature, max_tokens, transport)
        case "anthropic":
            text = await _call_anthropic(messages, model, temperature, max_tokens, client)
        case other:
            raise LLMError(f"unsupported LLM provider: {other}")

    logger.debug("%s reply: model=%s chars=%d", settings.llm_provider, model, len(text))
    return text
