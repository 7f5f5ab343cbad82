"""Header bar: activity dot, stage breadcrumb, title and run metrics."""

from enum import Enum
from typing import Any

from rich.text import Text
from textual.app import ComposeResult, RenderResult
from textual.reactive import reactive
from textual.widgets import Header, Static
from textual.widgets._header import HeaderClockSpace, HeaderTitle

from bookwright.llm.metrics import MetricsCollector
from bookwright.models import STAGE_LABELS, STAGE_ORDER, WorkflowStage
from bookwright.tui.widgets.metrics import MetricsSummary


class Activity(Enum):
    IDLE = "idle"
    WRITING = "writing"
    ERROR = "error"


class StatusIcon(Static):
    """Dot that is green when idle, blinks yellow while writing, red on error."""

    DEFAULT_CSS = """
    StatusIcon {
        dock: left;
        padding: 0 1;
        width: 3;
        content-align: left middle;
        background: initial;
    }

    StatusIcon.idle {
        color: $success;
    }

    StatusIcon.writing {
        color: $warning;
    }

    StatusIcon.error {
        color: $error;
    }
    """

    activity: reactive[Activity] = reactive(Activity.IDLE)
    _lit: reactive[bool] = reactive(True)

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.add_class(Activity.IDLE.value)

    def on_mount(self) -> None:
        self.set_interval(0.5, self._blink)

    def render(self) -> RenderResult:
        return "●" if self._lit else " "

    def watch_activity(self, old: Activity, new: Activity) -> None:
        self.remove_class(old.value)
        self.add_class(new.value)
        self._lit = True

    def _blink(self) -> None:
        if self.activity == Activity.WRITING:
            self._lit = not self._lit


class StageIndicator(Static):
    """Breadcrumb of workflow stages with the current one highlighted."""

    DEFAULT_CSS = """
    StageIndicator {
        width: auto;
        height: 1;
        padding: 0 1;
        background: transparent;
    }
    """

    def __init__(self, stage: WorkflowStage, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.stage = stage

    def render(self) -> RenderResult:
        current = STAGE_ORDER.index(self.stage)
        crumbs = Text()
        for index, stage in enumerate(STAGE_ORDER):
            # Outline generation has no screen of its own
            if stage == WorkflowStage.GENERATING_OUTLINE:
                continue
            if crumbs:
                crumbs.append(" › ", style="dim")
            if index == current:
                style = "bold reverse"
            elif index < current:
                style = ""
            else:
                style = "dim"
            crumbs.append(STAGE_LABELS[stage], style=style)
        return crumbs


class StatusHeader(Header):
    """Header shared by every screen of the app."""

    DEFAULT_CSS = """
    StatusHeader {
        dock: top;
        width: 100%;
        background: $panel;
        color: $foreground;
        height: 1;
    }
    """

    def __init__(
        self, stage: WorkflowStage = WorkflowStage.COLLECTING_INPUT, **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self._stage = stage

    def compose(self) -> ComposeResult:
        yield StatusIcon(id="status-icon")
        yield StageIndicator(self._stage, id="stage-indicator")
        yield HeaderTitle()
        yield MetricsSummary(id="metrics-summary")
        yield HeaderClockSpace()

    def set_thinking(self, thinking: bool) -> None:
        icon = self.query_one("#status-icon", StatusIcon)
        icon.activity = Activity.WRITING if thinking else Activity.IDLE

    def set_error(self) -> None:
        self.query_one("#status-icon", StatusIcon).activity = Activity.ERROR

    def update_metrics(self, metrics: MetricsCollector) -> None:
        self.query_one("#metrics-summary", MetricsSummary).update_from(metrics)
