"""Anthropic provider built on the Claude Agent SDK.

Book prompts need no tools, so every query runs with an empty tool list and
the SDK is used purely as a streaming text source.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
    query,
)

from bookwright.llm.providers.base import LLMProvider, StreamChunk, StreamComplete

logger = logging.getLogger(__name__)


def _extract_token_usage(message: ResultMessage) -> tuple[int | None, int | None]:
    """Input/output token counts from a result message's usage, if reported."""
    usage: Any = getattr(message, "usage", None)
    if usage is None:
        return None, None
    if isinstance(usage, dict):
        tokens_in = usage.get("input_tokens")
        tokens_out = usage.get("output_tokens")
    else:
        tokens_in = getattr(usage, "input_tokens", None)
        tokens_out = getattr(usage, "output_tokens", None)
    return (
        int(tokens_in) if tokens_in is not None else None,
        int(tokens_out) if tokens_out is not None else None,
    )


class AnthropicProvider(LLMProvider):
    """Authenticates with Claude web auth by default, or with an API key."""

    provider_name = "anthropic"

    def __init__(
        self,
        model: str = "claude-sonnet-4-5",
        api_key: str | None = None,
        use_web_auth: bool = True,
    ) -> None:
        super().__init__(model=model, api_key=api_key)
        self.use_web_auth = use_web_auth
        logger.info(
            "AnthropicProvider initialized (model=%s, web_auth=%s)",
            model,
            use_web_auth,
        )

    def _env_config(self) -> dict[str, str]:
        """Environment overrides passed to the SDK subprocess."""
        if self.use_web_auth:
            # An empty key makes the SDK fall back to web auth
            return {"ANTHROPIC_API_KEY": ""}
        if self.api_key:
            return {"ANTHROPIC_API_KEY": self.api_key}
        return {}

    async def _open_stream(
        self, prompt: str, model: str, system: str
    ) -> AsyncIterator[StreamChunk | StreamComplete]:
        options = ClaudeAgentOptions(
            allowed_tools=[],
            system_prompt=system or None,
            model=model,
            env=self._env_config(),
        )

        pieces: list[str] = []
        result: ResultMessage | None = None
        async for message in query(prompt=prompt, options=options):
            if isinstance(message, AssistantMessage):
                for block in message.content:
                    if isinstance(block, TextBlock) and block.text:
                        pieces.append(block.text)
                        yield StreamChunk(text=block.text)
            elif isinstance(message, ResultMessage):
                result = message

        if result is None:
            yield StreamComplete(full_text="".join(pieces))
            return
        tokens_in, tokens_out = _extract_token_usage(result)
        logger.debug("Query finished, cost $%.4f", result.total_cost_usd or 0.0)
        yield StreamComplete(
            full_text="".join(pieces),
            cost_usd=result.total_cost_usd,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
        )
