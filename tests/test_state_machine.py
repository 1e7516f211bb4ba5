"""Tests for task state rules."""

from datetime import date

import pytest

from taskminder.engine.state_machine import (
    apply_state_change,
    check_if_delayed,
    normalize_requested_state,
    selectable_states,
)
from taskminder.models.notification import Notification
from taskminder.models.task import Task, TaskState


class TestTaskStateLabels:
    """Test mapping between states and their display labels."""

    @pytest.mark.parametrize("state,label", [
        (TaskState.OPEN, "Open"),
        (TaskState.IN_PROGRESS, "In Progress"),
        (TaskState.POSTPONED, "Postponed"),
        (TaskState.COMPLETED, "Completed"),
        (TaskState.DELAYED, "Delayed"),
    ])
    def test_label_matches_persisted_text(self, state, label):
        """Test each state maps to its exact label and back."""
        assert state.label == label
        assert TaskState.from_label(label) == state

    def test_from_label_ignores_case(self):
        """Test that label matching is case-insensitive."""
        assert TaskState.from_label("in progress") == TaskState.IN_PROGRESS

    def test_unknown_or_missing_label_maps_to_open(self):
        """Test the OPEN fallback for bad input."""
        assert TaskState.from_label("Archived") == TaskState.OPEN
        assert TaskState.from_label("") == TaskState.OPEN
        assert TaskState.from_label(None) == TaskState.OPEN


class TestRequestedState:
    """Test handling of explicitly requested states."""

    def test_delayed_is_not_selectable(self):
        """Test that DELAYED is never offered to the user."""
        assert TaskState.DELAYED not in selectable_states()
        assert len(selectable_states()) == 4

    def test_delayed_request_becomes_open(self):
        """Test that asking for DELAYED yields OPEN."""
        assert normalize_requested_state(TaskState.DELAYED) == TaskState.OPEN
        assert normalize_requested_state(None) == TaskState.OPEN
        assert normalize_requested_state(TaskState.POSTPONED) == TaskState.POSTPONED


class TestCheckIfDelayed:
    """Test the automatic DELAYED transition."""

    def test_past_deadline_marks_delayed(self, sample_task):
        """Test that an open task past its deadline becomes delayed."""
        assert check_if_delayed(sample_task, date(2025, 1, 11)) is True
        assert sample_task.state == TaskState.DELAYED

    def test_deadline_today_is_not_delayed(self, sample_task):
        """Test that a task due today is not delayed yet."""
        assert check_if_delayed(sample_task, date(2025, 1, 10)) is False
        assert sample_task.state == TaskState.OPEN

    def test_is_idempotent(self, sample_task):
        """Test that applying the rule twice equals applying it once."""
        check_if_delayed(sample_task, date(2025, 2, 1))
        first = sample_task.state
        assert check_if_delayed(sample_task, date(2025, 2, 1)) is False
        assert sample_task.state == first == TaskState.DELAYED

    def test_completed_task_is_never_delayed(self, sample_task_base):
        """Test that a completed task keeps its state after the deadline."""
        task = Task(**{**sample_task_base, "state": TaskState.COMPLETED})
        assert check_if_delayed(task, date(2026, 1, 1)) is False
        assert task.state == TaskState.COMPLETED

    @pytest.mark.parametrize("state", [TaskState.IN_PROGRESS, TaskState.POSTPONED])
    def test_other_states_become_delayed(self, sample_task_base, state):
        """Test that every non-completed state is subject to the rule."""
        task = Task(**{**sample_task_base, "state": state})
        check_if_delayed(task, date(2025, 1, 11))
        assert task.state == TaskState.DELAYED


class TestApplyStateChange:
    """Test side effects of explicit state changes."""

    def _with_notifications(self, sample_task_base, *days):
        notifications = [
            Notification(id=i, message=f"n{i}", notification_date=day)
            for i, day in enumerate(days)
        ]
        return Task(**{**sample_task_base, "notifications": notifications})

    def test_completing_clears_notifications(self, sample_task_base):
        """Test that COMPLETED empties the notification list."""
        task = self._with_notifications(sample_task_base, date(2025, 1, 5), date(2025, 1, 9))
        apply_state_change(task, TaskState.COMPLETED, date(2025, 1, 1))
        assert task.state == TaskState.COMPLETED
        assert task.notifications == []

    def test_other_state_prunes_notifications_after_deadline(self, sample_task_base):
        """Test that a non-completed state drops notifications past the deadline."""
        task = self._with_notifications(sample_task_base, date(2025, 1, 5), date(2025, 1, 20))
        apply_state_change(task, TaskState.IN_PROGRESS, date(2025, 1, 1))
        assert task.state == TaskState.IN_PROGRESS
        assert [n.notification_date for n in task.notifications] == [date(2025, 1, 5)]

    def test_completed_task_can_be_reopened(self, sample_task_base):
        """Test that COMPLETED is not terminal for the state itself."""
        task = Task(**{**sample_task_base, "state": TaskState.COMPLETED})
        apply_state_change(task, TaskState.OPEN, date(2025, 1, 1))
        assert task.state == TaskState.OPEN

    def test_explicit_delayed_becomes_open(self, sample_task):
        """Test that an explicit DELAYED request is stored as OPEN."""
        apply_state_change(sample_task, TaskState.DELAYED, date(2025, 1, 1))
        assert sample_task.state == TaskState.OPEN
