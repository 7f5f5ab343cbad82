"""Tests for the workflow stage state machine."""

import pytest

from bookwright.models import (
    STAGE_LABELS,
    VALID_TRANSITIONS,
    InvalidTransitionError,
    StageTracker,
    WorkflowStage,
)


class TestStageTable:
    """Tests for the stage transition table."""

    def test_all_stages_in_transition_table(self) -> None:
        for stage in WorkflowStage:
            assert stage in VALID_TRANSITIONS, f"{stage} missing from VALID_TRANSITIONS"
            assert stage in STAGE_LABELS

    def test_all_stages_reachable_from_input(self) -> None:
        reachable = {WorkflowStage.COLLECTING_INPUT}
        changed = True
        while changed:
            changed = False
            for stage, targets in VALID_TRANSITIONS.items():
                if stage in reachable and not targets <= reachable:
                    reachable |= targets
                    changed = True
        assert reachable == set(WorkflowStage)

    def test_every_stage_can_return_to_input(self) -> None:
        """Every stage except input itself can lead back to input."""
        for stage in WorkflowStage:
            if stage == WorkflowStage.COLLECTING_INPUT:
                continue
            assert WorkflowStage.COLLECTING_INPUT in VALID_TRANSITIONS[stage]

    def test_cannot_skip_outline_review(self) -> None:
        targets = VALID_TRANSITIONS[WorkflowStage.GENERATING_OUTLINE]
        assert WorkflowStage.GENERATING_CHAPTERS not in targets


class TestStageTracker:
    def test_starts_collecting_input(self) -> None:
        tracker = StageTracker()
        assert tracker.stage == WorkflowStage.COLLECTING_INPUT
        assert tracker.history == []

    def test_transition_records_history(self) -> None:
        tracker = StageTracker()
        tracker.transition(WorkflowStage.GENERATING_OUTLINE)
        tracker.transition(WorkflowStage.COLLECTING_INPUT, reason="outline failed")

        assert tracker.stage == WorkflowStage.COLLECTING_INPUT
        assert [h["to"] for h in tracker.history] == ["outline:generating", "input"]
        assert tracker.history[1]["reason"] == "outline failed"
        assert "reason" not in tracker.history[0]

    def test_invalid_transition_raises(self) -> None:
        tracker = StageTracker()
        with pytest.raises(InvalidTransitionError):
            tracker.transition(WorkflowStage.VIEW_RESULT)
        assert tracker.stage == WorkflowStage.COLLECTING_INPUT
