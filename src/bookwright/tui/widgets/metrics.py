"""Metrics display widget for TUI.

Shows running cost and token totals in the header.
"""
from __future__ import annotations

from textual.reactive import reactive
from textual.widgets import Static

from bookwright.llm.metrics import MetricsCollector


def format_token_count(count: int) -> str:
    """Compact token count, e.g. 950 -> "950", 12_300 -> "12.3k"."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}k"
    return str(count)


class MetricsSummary(Static):
    """Shows running cost and tokens in the status bar."""

    DEFAULT_CSS = """
    MetricsSummary {
        width: auto;
        height: 1;
        padding: 0 1;
        color: $text-muted;
        background: transparent;
    }

    MetricsSummary.has-cost {
        color: $success;
    }
    """

    cost: reactive[float] = reactive(0.0)
    tokens_in: reactive[int] = reactive(0)
    tokens_out: reactive[int] = reactive(0)

    def render(self) -> str:
        parts: list[str] = []
        if self.cost > 0:
            parts.append(f"${self.cost:.2f}")
        if self.tokens_in or self.tokens_out:
            parts.append(
                f"{format_token_count(self.tokens_in)} in / "
                f"{format_token_count(self.tokens_out)} out"
            )
        return " · ".join(parts)

    def watch_cost(self, cost: float) -> None:
        self.set_class(cost > 0, "has-cost")

    def update_from(self, metrics: MetricsCollector) -> None:
        """Refresh totals from a metrics collector."""
        self.cost = metrics.total_cost
        self.tokens_in = metrics.total_tokens_in
        self.tokens_out = metrics.total_tokens_out
