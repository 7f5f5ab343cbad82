"""LLM clients for Bookwright."""
from __future__ import annotations

from .client import BookClient, get_provider
from .metrics import LLMCall, MetricsCollector
from .providers import (
    ConfigurationError,
    LLMProvider,
    StreamChunk,
    StreamComplete,
)

__all__ = [
    "BookClient",
    "ConfigurationError",
    "LLMCall",
    "LLMProvider",
    "MetricsCollector",
    "StreamChunk",
    "StreamComplete",
    "get_provider",
]
