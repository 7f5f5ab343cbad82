"""Tests for LLM provider behavior."""

import asyncio
from collections.abc import AsyncIterator
from types import SimpleNamespace

import pytest

from bookwright.llm.metrics import MetricsCollector
from bookwright.llm.providers.base import (
    APIErrorType,
    ConfigurationError,
    StreamChunk,
    StreamComplete,
    classify_api_error,
    is_retryable_error,
    retry_delay,
    stream_with_retry,
)
from bookwright.llm.providers.openai import OpenAIProvider, _extract_usage_tokens


def _chunk(text: str | None, usage: object = None) -> SimpleNamespace:
    if text is None:
        return SimpleNamespace(choices=[], usage=usage)
    delta = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta)], usage=usage)


class FakeStream:
    def __init__(self, chunks: list[SimpleNamespace]) -> None:
        self._chunks = chunks

    def __aiter__(self) -> AsyncIterator[SimpleNamespace]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[SimpleNamespace]:
        for chunk in self._chunks:
            yield chunk


class FakeCompletions:
    def __init__(self, chunks: list[SimpleNamespace]) -> None:
        self.chunks = chunks
        self.calls: list[dict[str, object]] = []

    async def create(self, **kwargs: object) -> FakeStream:
        self.calls.append(kwargs)
        return FakeStream(self.chunks)


def _provider(chunks: list[SimpleNamespace]) -> tuple[OpenAIProvider, FakeCompletions]:
    completions = FakeCompletions(chunks)
    fake_client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    provider = OpenAIProvider(api_key="test-key")
    provider._get_async_client = lambda: fake_client  # type: ignore[method-assign]
    return provider, completions


async def _collect(
    stream: AsyncIterator[StreamChunk | StreamComplete],
) -> list[StreamChunk | StreamComplete]:
    return [item async for item in stream]


class TestOpenAIProvider:
    def test_stream_text_yields_chunks_then_complete(self) -> None:
        usage = SimpleNamespace(prompt_tokens=120, completion_tokens=30)
        provider, completions = _provider(
            [_chunk("Hello "), _chunk(""), _chunk("world"), _chunk(None, usage)]
        )
        metrics = MetricsCollector()

        results = asyncio.run(
            _collect(
                provider.stream_text(
                    "prompt",
                    model="gpt-4o",
                    system="system",
                    metrics_collector=metrics,
                    phase="chapter",
                    task_id="Ch1-1",
                )
            )
        )

        assert [r.text for r in results if isinstance(r, StreamChunk)] == [
            "Hello ",
            "world",
        ]
        final = results[-1]
        assert isinstance(final, StreamComplete)
        assert final.full_text == "Hello world"

        call = completions.calls[0]
        assert call["model"] == "gpt-4o"
        assert call["stream"] is True
        assert call["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "prompt"},
        ]

        recorded = metrics.calls[0]
        assert recorded.phase == "chapter"
        assert recorded.task_id == "Ch1-1"
        assert recorded.tokens_in == 120
        assert recorded.tokens_out == 30
        assert recorded.success is True

    def test_complete_returns_full_text(self) -> None:
        provider, _ = _provider([_chunk('"Title"')])
        assert asyncio.run(provider.complete("prompt")) == '"Title"'

    def test_ensure_configured_without_key_raises(self) -> None:
        provider = OpenAIProvider()
        with pytest.raises(ConfigurationError):
            provider.ensure_configured()

    def test_env_key_is_used(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        OpenAIProvider().ensure_configured()

    def test_failed_stream_records_error(self) -> None:
        class BrokenCompletions:
            async def create(self, **kwargs: object) -> FakeStream:
                raise ValueError("bad request")

        provider = OpenAIProvider(api_key="test-key")
        fake_client = SimpleNamespace(
            chat=SimpleNamespace(completions=BrokenCompletions())
        )
        provider._get_async_client = lambda: fake_client  # type: ignore[method-assign]
        metrics = MetricsCollector()

        with pytest.raises(ValueError):
            asyncio.run(_collect(provider.stream_text("p", metrics_collector=metrics)))
        assert metrics.calls[0].success is False
        assert metrics.calls[0].error == "bad request"


def test_extract_usage_tokens_variants() -> None:
    assert _extract_usage_tokens(None) == (None, None)
    assert _extract_usage_tokens(
        SimpleNamespace(input_tokens=5, output_tokens=7)
    ) == (5, 7)
    assert _extract_usage_tokens({"prompt_tokens": 3, "completion_tokens": 4}) == (3, 4)


class TestErrorClassification:
    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Error 429: Too Many Requests", APIErrorType.RATE_LIMITED),
            ("Service overloaded, try again later", APIErrorType.API_UNAVAILABLE),
            ("insufficient_quota for this key", APIErrorType.BUDGET_EXCEEDED),
            ("Invalid model name", APIErrorType.UNKNOWN),
        ],
    )
    def test_classify(self, message: str, expected: APIErrorType) -> None:
        assert classify_api_error(Exception(message)) == expected

    def test_status_code_wins_over_message(self) -> None:
        class StatusError(Exception):
            def __init__(self, message: str, status_code: int) -> None:
                super().__init__(message)
                self.status_code = status_code

        assert classify_api_error(StatusError("gateway", 503)) == (
            APIErrorType.API_UNAVAILABLE
        )
        assert classify_api_error(StatusError("insufficient_quota", 429)) == (
            APIErrorType.BUDGET_EXCEEDED
        )

    def test_retryable(self) -> None:
        assert is_retryable_error(APIErrorType.RATE_LIMITED)
        assert is_retryable_error(APIErrorType.API_UNAVAILABLE)
        assert not is_retryable_error(APIErrorType.BUDGET_EXCEEDED)
        assert not is_retryable_error(APIErrorType.UNKNOWN)

    def test_retry_delay_caps_at_last(self) -> None:
        assert [retry_delay(n) for n in (1, 2, 3, 4)] == [5, 15, 45, 45]


class TestStreamWithRetry:
    """Retries happen only before the first item reaches the caller."""

    def test_retries_transient_error_before_first_item(self) -> None:
        attempts: list[int] = []
        sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        async def open_stream() -> AsyncIterator[str]:
            attempts.append(1)
            if len(attempts) < 3:
                raise RuntimeError("503 Service Unavailable")
            yield "ok"

        async def run() -> list[str]:
            return [
                item
                async for item in stream_with_retry(
                    open_stream, label="test", sleep=fake_sleep
                )
            ]

        assert asyncio.run(run()) == ["ok"]
        assert len(attempts) == 3
        assert sleeps == [5, 15]

    def test_no_retry_after_first_item(self) -> None:
        attempts: list[int] = []
        received: list[str] = []

        async def fake_sleep(seconds: float) -> None:
            raise AssertionError("should not sleep")

        async def open_stream() -> AsyncIterator[str]:
            attempts.append(1)
            yield "partial"
            raise RuntimeError("rate limit exceeded")

        async def run() -> None:
            async for item in stream_with_retry(
                open_stream, label="test", sleep=fake_sleep
            ):
                received.append(item)

        with pytest.raises(RuntimeError):
            asyncio.run(run())
        assert attempts == [1]
        assert received == ["partial"]

    def test_non_retryable_error_raises_immediately(self) -> None:
        attempts: list[int] = []

        async def fake_sleep(seconds: float) -> None:
            raise AssertionError("should not sleep")

        async def open_stream() -> AsyncIterator[str]:
            attempts.append(1)
            raise ValueError("invalid prompt")
            yield ""

        async def run() -> None:
            async for _ in stream_with_retry(open_stream, label="t", sleep=fake_sleep):
                pass

        with pytest.raises(ValueError):
            asyncio.run(run())
        assert attempts == [1]

    def test_gives_up_after_max_retries(self) -> None:
        attempts: list[int] = []

        async def fake_sleep(seconds: float) -> None:
            pass

        async def open_stream() -> AsyncIterator[str]:
            attempts.append(1)
            raise RuntimeError("server overloaded")
            yield ""

        async def run() -> None:
            async for _ in stream_with_retry(open_stream, label="t", sleep=fake_sleep):
                pass

        with pytest.raises(RuntimeError):
            asyncio.run(run())
        assert len(attempts) == 4
