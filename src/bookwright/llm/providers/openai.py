"""OpenAI provider: streamed chat completions through ``AsyncOpenAI``."""

import logging
import os
from collections.abc import AsyncIterator
from typing import Any

from bookwright.llm.providers.base import (
    ConfigurationError,
    LLMProvider,
    StreamChunk,
    StreamComplete,
)

logger = logging.getLogger(__name__)


def _extract_usage_tokens(usage: Any) -> tuple[int | None, int | None]:
    """Prompt/completion token counts from an SDK object or a plain dict."""
    if usage is None:
        return None, None
    if isinstance(usage, dict):
        tokens_in = usage.get("prompt_tokens", usage.get("input_tokens"))
        tokens_out = usage.get("completion_tokens", usage.get("output_tokens"))
    else:
        tokens_in = getattr(usage, "prompt_tokens", None)
        if tokens_in is None:
            tokens_in = getattr(usage, "input_tokens", None)
        tokens_out = getattr(usage, "completion_tokens", None)
        if tokens_out is None:
            tokens_out = getattr(usage, "output_tokens", None)
    return (
        int(tokens_in) if tokens_in is not None else None,
        int(tokens_out) if tokens_out is not None else None,
    )


class OpenAIProvider(LLMProvider):
    """Requires an API key, passed in or taken from ``OPENAI_API_KEY``."""

    provider_name = "openai"

    def __init__(self, model: str = "gpt-4o-mini", api_key: str | None = None) -> None:
        super().__init__(model=model, api_key=api_key)
        logger.info("OpenAIProvider initialized (model=%s)", model)

    def _resolve_api_key(self) -> str | None:
        return self.api_key or os.environ.get("OPENAI_API_KEY")

    def ensure_configured(self) -> None:
        if not self._resolve_api_key():
            raise ConfigurationError(
                "OpenAI API key required. Set OPENAI_API_KEY or add "
                "llm.openai_api_key to settings.json."
            )

    def _get_async_client(self) -> Any:
        from openai import AsyncOpenAI

        self.ensure_configured()
        return AsyncOpenAI(api_key=self._resolve_api_key())

    async def _open_stream(
        self, prompt: str, model: str, system: str
    ) -> AsyncIterator[StreamChunk | StreamComplete]:
        client = self._get_async_client()
        messages = [{"role": "user", "content": prompt}]
        if system:
            messages.insert(0, {"role": "system", "content": system})

        stream = await client.chat.completions.create(
            model=model,
            messages=messages,
            stream=True,
            stream_options={"include_usage": True},
        )

        pieces: list[str] = []
        usage: Any = None
        async for chunk in stream:
            # The final chunk carries usage and no choices
            if getattr(chunk, "usage", None):
                usage = chunk.usage
            if not chunk.choices:
                continue
            text = chunk.choices[0].delta.content
            if text:
                pieces.append(text)
                yield StreamChunk(text=text)

        tokens_in, tokens_out = _extract_usage_tokens(usage)
        yield StreamComplete(
            full_text="".join(pieces), tokens_in=tokens_in, tokens_out=tokens_out
        )
