"""Cost and token accounting for model calls.

Every provider call made during a run is recorded as an :class:`LLMCall`.
The collector lives only as long as the run; the TUI header and the
headless summary read their totals from it.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LLMCall:
    """One provider call.

    ``phase`` is ``outline``, ``title`` or ``chapter``; chapter calls carry
    the chapter task id. Cost and token counts are None when the provider
    does not report them.
    """

    phase: str
    model: str
    latency_ms: int
    task_id: str | None = None
    cost_usd: float | None = None
    tokens_in: int | None = None
    tokens_out: int | None = None
    success: bool = True
    error: str | None = None


@dataclass(slots=True)
class CallTotals:
    """Running totals over a group of calls."""

    calls: int = 0
    failures: int = 0
    cost_usd: float = 0.0
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0

    def add(self, call: LLMCall) -> None:
        self.calls += 1
        if not call.success:
            self.failures += 1
        self.cost_usd += call.cost_usd or 0.0
        self.tokens_in += call.tokens_in or 0
        self.tokens_out += call.tokens_out or 0
        self.latency_ms += call.latency_ms


class MetricsCollector:
    """Accumulates :class:`LLMCall` records for one book run."""

    def __init__(self) -> None:
        self._calls: list[LLMCall] = []
        self._totals = CallTotals()

    def record(self, call: LLMCall) -> None:
        self._calls.append(call)
        self._totals.add(call)
        logger.debug(
            "Recorded %s call on %s (task=%s, tokens=%s/%s, %dms)",
            call.phase,
            call.model,
            call.task_id,
            call.tokens_in,
            call.tokens_out,
            call.latency_ms,
        )

    @property
    def calls(self) -> list[LLMCall]:
        return list(self._calls)

    @property
    def total_calls(self) -> int:
        return self._totals.calls

    @property
    def total_cost(self) -> float:
        return self._totals.cost_usd

    @property
    def total_tokens_in(self) -> int:
        return self._totals.tokens_in

    @property
    def total_tokens_out(self) -> int:
        return self._totals.tokens_out

    def by_phase(self) -> dict[str, CallTotals]:
        """Totals per phase, in the order phases were first seen."""
        groups: dict[str, CallTotals] = {}
        for call in self._calls:
            groups.setdefault(call.phase, CallTotals()).add(call)
        return groups

    def by_task(self) -> dict[str, CallTotals]:
        """Totals per chapter task id; calls without a task are skipped."""
        groups: dict[str, CallTotals] = {}
        for call in self._calls:
            if call.task_id is not None:
                groups.setdefault(call.task_id, CallTotals()).add(call)
        return groups

    def summary_line(self) -> str:
        """One-line summary for the end of a headless run."""
        totals = self._totals
        line = (
            f"LLM calls: {totals.calls}, "
            f"tokens in/out: {totals.tokens_in}/{totals.tokens_out}"
        )
        if totals.cost_usd:
            line += f", cost: ${totals.cost_usd:.4f}"
        if totals.failures:
            line += f", failed calls: {totals.failures}"
        return line
