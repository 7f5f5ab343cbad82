"""Base class for LLM providers."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from bookwright.llm.metrics import LLMCall, MetricsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConfigurationError(Exception):
    """Raised when a provider is missing required configuration (e.g. API key)."""


@dataclass
class StreamChunk:
    """A chunk of streamed text from the LLM."""

    text: str


@dataclass
class StreamComplete:
    """Stream completion with metadata."""

    full_text: str
    cost_usd: float | None = None
    tokens_in: int | None = None
    tokens_out: int | None = None


class APIErrorType(Enum):
    RATE_LIMITED = "rate_limited"
    API_UNAVAILABLE = "api_unavailable"
    BUDGET_EXCEEDED = "budget_exceeded"
    UNKNOWN = "unknown"


# Lower-case message fragments. Quota errors arrive with a 429 status too, so
# budget wording is checked before the status code.
_BUDGET_MARKERS = (
    "insufficient_quota",
    "quota exceeded",
    "spending limit",
    "usage limit",
    "billing",
    "budget",
    "credit",
)

_TRANSIENT_MARKERS = {
    APIErrorType.RATE_LIMITED: (
        "rate limit",
        "rate_limit",
        "ratelimit",
        "too many requests",
        "throttl",
    ),
    APIErrorType.API_UNAVAILABLE: (
        "overloaded",
        "unavailable",
        "bad gateway",
        "gateway timeout",
        "temporarily",
        "try again later",
        "capacity",
    ),
}

_STATUS_TYPES = {
    429: APIErrorType.RATE_LIMITED,
    502: APIErrorType.API_UNAVAILABLE,
    503: APIErrorType.API_UNAVAILABLE,
    504: APIErrorType.API_UNAVAILABLE,
    529: APIErrorType.API_UNAVAILABLE,
}


def classify_api_error(error: Exception) -> APIErrorType:
    """Classify a provider error from its message and HTTP status, if any."""
    message = str(error).lower()
    if any(marker in message for marker in _BUDGET_MARKERS):
        return APIErrorType.BUDGET_EXCEEDED

    status = getattr(error, "status_code", None)
    if status in _STATUS_TYPES:
        return _STATUS_TYPES[status]

    for error_type, markers in _TRANSIENT_MARKERS.items():
        if any(marker in message for marker in markers):
            return error_type
    return APIErrorType.UNKNOWN


def is_retryable_error(error_type: APIErrorType) -> bool:
    return error_type in (APIErrorType.RATE_LIMITED, APIErrorType.API_UNAVAILABLE)


MAX_RETRIES = 3
# Seconds before each retry
RETRY_DELAYS = (5, 15, 45)


def retry_delay(attempt: int) -> int:
    """Seconds to wait before retry number ``attempt`` (1-based)."""
    return RETRY_DELAYS[min(attempt - 1, len(RETRY_DELAYS) - 1)]


async def stream_with_retry(
    open_stream: Callable[[], AsyncIterator[T]],
    *,
    label: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[T]:
    """Yield from ``open_stream()``, retrying transient errors.

    Retries only happen before anything has been yielded; once data has
    reached the caller, errors are propagated immediately.
    """
    last_error: Exception | None = None
    for attempt in range(MAX_RETRIES + 1):
        if attempt > 0:
            delay = retry_delay(attempt)
            logger.warning(
                "Retrying %s after %ds (attempt %d/%d): %s",
                label,
                delay,
                attempt + 1,
                MAX_RETRIES + 1,
                last_error,
            )
            await sleep(delay)

        has_yielded = False
        try:
            async for item in open_stream():
                has_yielded = True
                yield item
            return
        except Exception as e:
            last_error = e
            error_type = classify_api_error(e)
            if has_yielded or not is_retryable_error(error_type):
                raise
            logger.warning(
                "Transient API error (%s): %s. Will retry.", error_type.value, e
            )

    assert last_error is not None
    raise last_error


class LLMProvider(ABC):
    """A text-completion backend.

    Subclasses implement :meth:`_open_stream` for a single attempt. The base
    class adds retries for transient errors and records one
    :class:`~bookwright.llm.metrics.LLMCall` per logical call.
    """

    provider_name: str  # "anthropic" or "openai"

    def __init__(self, model: str, api_key: str | None = None) -> None:
        self.model = model
        self.api_key = api_key

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the provider cannot make calls."""

    @abstractmethod
    def _open_stream(
        self, prompt: str, model: str, system: str
    ) -> AsyncIterator[StreamChunk | StreamComplete]:
        """One attempt at a streamed completion, without retries."""

    async def stream_text(
        self,
        prompt: str,
        model: str | None = None,
        system: str = "",
        metrics_collector: MetricsCollector | None = None,
        phase: str = "unknown",
        task_id: str | None = None,
    ) -> AsyncIterator[StreamChunk | StreamComplete]:
        """Stream a single-prompt completion.

        Args:
            prompt: Fully rendered prompt.
            model: Model identifier; defaults to ``self.model``.
            system: System prompt.
            metrics_collector: Receives the call record when given.
            phase: ``outline``, ``title`` or ``chapter``.
            task_id: Chapter task id for chapter calls.

        Yields:
            StreamChunk for each text piece, then one StreamComplete.
        """
        model_id = model or self.model
        logger.info(
            "%s %s call: model=%s prompt=%d chars",
            self.provider_name,
            phase,
            model_id,
            len(prompt),
        )

        started = time.perf_counter()
        final: StreamComplete | None = None
        error: str | None = None
        try:
            async for result in stream_with_retry(
                lambda: self._open_stream(prompt, model_id, system),
                label=f"{self.provider_name} {phase}",
            ):
                if isinstance(result, StreamComplete):
                    final = result
                yield result
        except Exception as e:
            logger.exception("%s %s call failed", self.provider_name, phase)
            error = str(e) or type(e).__name__
            raise
        finally:
            if metrics_collector is not None:
                metrics_collector.record(
                    LLMCall(
                        phase=phase,
                        model=model_id,
                        latency_ms=int((time.perf_counter() - started) * 1000),
                        task_id=task_id,
                        cost_usd=final.cost_usd if final else None,
                        tokens_in=final.tokens_in if final else None,
                        tokens_out=final.tokens_out if final else None,
                        success=error is None,
                        error=error,
                    )
                )

    async def complete(
        self,
        prompt: str,
        model: str | None = None,
        system: str = "",
        metrics_collector: MetricsCollector | None = None,
        phase: str = "unknown",
        task_id: str | None = None,
    ) -> str:
        """Return the full text of a single-prompt completion."""
        pieces: list[str] = []
        final: str | None = None
        async for result in self.stream_text(
            prompt,
            model=model,
            system=system,
            metrics_collector=metrics_collector,
            phase=phase,
            task_id=task_id,
        ):
            if isinstance(result, StreamComplete):
                final = result.full_text
            else:
                pieces.append(result.text)
        return final if final is not None else "".join(pieces)
