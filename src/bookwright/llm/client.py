"""Model client for book generation.

``BookClient`` implements the orchestration layer's model-client contract on
top of an :class:`~bookwright.llm.providers.base.LLMProvider`. The model for
each call is chosen from the run's tier.
"""

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from bookwright.llm.metrics import MetricsCollector
from bookwright.llm.prompts import (
    BOOK_SYSTEM_PROMPT,
    render_chapter_prompt,
    render_outline_prompt,
    render_title_prompt,
)
from bookwright.llm.providers.base import LLMProvider, StreamChunk
from bookwright.models import GenerationTier, OutlineNode, WorkflowParams

if TYPE_CHECKING:
    from bookwright.config.settings import Settings

logger = logging.getLogger(__name__)


def get_provider(settings: "Settings") -> LLMProvider:
    """Build the provider configured in ``settings``."""
    if settings.llm_provider == "anthropic":
        from bookwright.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(
            model=settings.fast_model,
            api_key=settings.anthropic_api_key,
            use_web_auth=settings.use_web_auth,
        )

    from bookwright.llm.providers.openai import OpenAIProvider

    return OpenAIProvider(
        model=settings.fast_model,
        api_key=settings.openai_api_key,
    )


def clean_title(text: str) -> str:
    """Trim whitespace and one layer of surrounding quotes."""
    title = text.strip()
    if len(title) >= 2 and title[0] == title[-1] and title[0] in "\"'":
        title = title[1:-1].strip()
    return title


class BookClient:
    """Streams outlines and chapters, and completes titles."""

    def __init__(
        self,
        provider: LLMProvider,
        models: dict[GenerationTier, str],
        metrics_collector: MetricsCollector | None = None,
    ) -> None:
        self.provider = provider
        self.models = models
        self.metrics = metrics_collector or MetricsCollector()

    @classmethod
    def from_settings(cls, settings: "Settings | None" = None) -> "BookClient":
        """Create a client from persisted settings."""
        if settings is None:
            from bookwright.config.settings import settings as global_settings

            settings = global_settings
        models = {
            GenerationTier.FAST: settings.fast_model,
            GenerationTier.QUALITY: settings.quality_model,
        }
        logger.info(
            "BookClient using %s (fast=%s, quality=%s)",
            settings.llm_provider,
            models[GenerationTier.FAST],
            models[GenerationTier.QUALITY],
        )
        return cls(get_provider(settings), models)

    def model_for(self, params: WorkflowParams) -> str:
        return self.models[params.tier]

    def ensure_configured(self) -> None:
        self.provider.ensure_configured()

    async def _stream(
        self,
        prompt: str,
        params: WorkflowParams,
        phase: str,
        task_id: str | None = None,
    ) -> AsyncIterator[str]:
        async for result in self.provider.stream_text(
            prompt,
            model=self.model_for(params),
            system=BOOK_SYSTEM_PROMPT,
            metrics_collector=self.metrics,
            phase=phase,
            task_id=task_id,
        ):
            if isinstance(result, StreamChunk) and result.text:
                yield result.text

    def generate_outline(self, params: WorkflowParams) -> AsyncIterator[str]:
        return self._stream(render_outline_prompt(params), params, "outline")

    async def generate_title(
        self, params: WorkflowParams, outline: OutlineNode
    ) -> str:
        text = await self.provider.complete(
            render_title_prompt(params, outline.serialize()),
            model=self.model_for(params),
            system=BOOK_SYSTEM_PROMPT,
            metrics_collector=self.metrics,
            phase="title",
        )
        return clean_title(text)

    def generate_chapter(
        self,
        params: WorkflowParams,
        title: str,
        outline_fragment: str,
        full_outline: str,
        preceding_content: str,
        task_id: str | None = None,
    ) -> AsyncIterator[str]:
        prompt = render_chapter_prompt(
            params, title, outline_fragment, full_outline, preceding_content
        )
        return self._stream(prompt, params, "chapter", task_id=task_id)
