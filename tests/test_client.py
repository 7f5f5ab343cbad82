"""Tests for BookClient and provider selection."""

import asyncio
import itertools
from collections.abc import AsyncIterator

import pytest

from bookwright.config.settings import settings
from bookwright.llm import BookClient, get_provider
from bookwright.llm.client import clean_title
from bookwright.llm.metrics import MetricsCollector
from bookwright.llm.providers.base import LLMProvider, StreamChunk, StreamComplete
from bookwright.llm.providers.openai import OpenAIProvider
from bookwright.models import GenerationTier, WorkflowParams, parse_outline
from bookwright.orchestration import TaskDriver, flatten_outline


class FakeProvider(LLMProvider):
    """Records calls and streams canned chunks."""

    provider_name = "fake"

    def __init__(self, chunks: list[str]) -> None:
        super().__init__(model="fake-default")
        self.chunks = chunks
        self.calls: list[dict[str, object]] = []

    async def _open_stream(
        self, prompt: str, model: str, system: str
    ) -> AsyncIterator[StreamChunk | StreamComplete]:
        self.calls.append({"prompt": prompt, "model": model, "system": system})
        for chunk in self.chunks:
            yield StreamChunk(text=chunk)
        yield StreamComplete(full_text="".join(self.chunks))


MODELS = {GenerationTier.FAST: "small-model", GenerationTier.QUALITY: "big-model"}


async def _drain(stream: AsyncIterator[str]) -> list[str]:
    return [text async for text in stream]


class TestBookClient:
    def test_outline_streams_text_with_fast_model(self) -> None:
        provider = FakeProvider(['{"A": ', "", '"a"}'])
        client = BookClient(provider, MODELS)
        params = WorkflowParams(subject="Tea")

        pieces = asyncio.run(_drain(client.generate_outline(params)))

        assert pieces == ['{"A": ', '"a"}']
        assert provider.calls[0]["model"] == "small-model"
        assert client.metrics.calls[0].phase == "outline"
        assert "Tea" in str(provider.calls[0]["prompt"])

    def test_quality_tier_selects_quality_model(self) -> None:
        provider = FakeProvider(["x"])
        client = BookClient(provider, MODELS)
        params = WorkflowParams(subject="Tea", tier=GenerationTier.QUALITY)

        asyncio.run(_drain(client.generate_chapter(params, "Ch1", "desc", "{}", "")))

        assert provider.calls[0]["model"] == "big-model"
        assert client.metrics.calls[0].phase == "chapter"

    def test_title_is_cleaned(self) -> None:
        provider = FakeProvider(['  "The ', 'Tea Book"\n'])
        client = BookClient(provider, MODELS)
        outline = parse_outline('{"A": "a"}')
        params = WorkflowParams(subject="Tea")

        title = asyncio.run(client.generate_title(params, outline))

        assert title == "The Tea Book"
        assert client.metrics.calls[0].phase == "title"
        assert '"A": "a"' in str(provider.calls[0]["prompt"])

    def test_chapter_prompt_carries_context(self) -> None:
        provider = FakeProvider(["x"])
        client = BookClient(provider, MODELS)
        params = WorkflowParams(subject="Tea")

        asyncio.run(
            _drain(
                client.generate_chapter(
                    params, "Brewing", "How to brew", "{full}", "Chapter: Intro\nhi"
                )
            )
        )

        prompt = str(provider.calls[0]["prompt"])
        assert "Brewing" in prompt
        assert "How to brew" in prompt
        assert "{full}" in prompt
        assert "Chapter: Intro\nhi" in prompt

    def test_driver_attributes_chapter_usage_to_tasks(self) -> None:
        provider = FakeProvider(["Some ", "chapter text"])
        client = BookClient(provider, MODELS)
        params = WorkflowParams(subject="Tea")
        outline = parse_outline('{"Ch1": "a", "Ch2": "b"}')
        tasks = flatten_outline(outline, itertools.count(1))
        driver = TaskDriver(client)
        driver.load(params, outline, tasks)

        driver.enable_auto_run()
        status = asyncio.run(driver.run())

        assert status.all_done
        per_task = client.metrics.by_task()
        assert set(per_task) == {"Ch1-1", "Ch2-2"}
        assert per_task["Ch1-1"].calls == 1
        assert client.metrics.by_phase()["chapter"].calls == 2

    def test_metrics_collector_is_shared(self) -> None:
        metrics = MetricsCollector()
        client = BookClient(FakeProvider([]), MODELS, metrics)
        assert client.metrics is metrics


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('"Quoted"', "Quoted"),
        ("'Single'", "Single"),
        ("  Plain  \n", "Plain"),
        ('"Mismatched\'', '"Mismatched\''),
        ('""Double""', '"Double"'),
    ],
)
def test_clean_title(raw: str, expected: str) -> None:
    assert clean_title(raw) == expected


class TestFromSettings:
    """Provider and model selection from settings."""

    def test_defaults_to_openai(self) -> None:
        client = BookClient.from_settings(settings)
        assert isinstance(client.provider, OpenAIProvider)
        assert client.models[GenerationTier.FAST] == "gpt-4o-mini"
        assert client.models[GenerationTier.QUALITY] == "gpt-4o"

    def test_configured_models_override_defaults(self) -> None:
        settings.fast_model = "gpt-4.1-mini"
        settings.quality_model = "gpt-4.1"
        client = BookClient.from_settings()
        assert client.models[GenerationTier.FAST] == "gpt-4.1-mini"
        assert client.models[GenerationTier.QUALITY] == "gpt-4.1"

    def test_anthropic_provider(self) -> None:
        settings.llm_provider = "anthropic"
        provider = get_provider(settings)
        assert provider.provider_name == "anthropic"
        assert provider.model == "claude-haiku-4-5"
