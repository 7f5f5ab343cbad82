"""LLM provider implementations."""
from __future__ import annotations

from bookwright.llm.providers.base import (
    ConfigurationError,
    LLMProvider,
    StreamChunk,
    StreamComplete,
)

__all__ = [
    "ConfigurationError",
    "LLMProvider",
    "StreamChunk",
    "StreamComplete",
]
