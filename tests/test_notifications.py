"""Tests for notification scheduling rules."""

from datetime import date

import pytest

from taskminder.engine.notifications import (
    NotificationPreset,
    compute_available_presets,
    default_custom_date,
    is_due,
    preset_date,
    prune_stale_notifications,
    resolve_date,
    validate,
)
from taskminder.errors import InvalidNotificationDate
from taskminder.models.notification import Notification
from taskminder.models.task import Task


def _notification(notification_id, day):
    return Notification(id=notification_id, message=f"Reminder {notification_id}", notification_date=day)


class TestPresetDates:
    """Test preset date arithmetic."""

    def test_resolved_dates_for_deadline(self, sample_task):
        """Test the three presets for a 2025-01-10 deadline."""
        assert preset_date(sample_task.deadline, NotificationPreset.ONE_DAY) == date(2025, 1, 9)
        assert preset_date(sample_task.deadline, NotificationPreset.ONE_WEEK) == date(2025, 1, 3)
        assert preset_date(sample_task.deadline, NotificationPreset.ONE_MONTH) == date(2024, 12, 10)

    def test_month_arithmetic_clamps_to_month_end(self):
        """Test that one month before March 31 is the last day of February."""
        assert preset_date(date(2025, 3, 31), NotificationPreset.ONE_MONTH) == date(2025, 2, 28)
        assert preset_date(date(2024, 3, 31), NotificationPreset.ONE_MONTH) == date(2024, 2, 29)

    def test_custom_preset_has_no_offset(self):
        """Test that CUSTOM cannot be turned into a fixed date."""
        with pytest.raises(ValueError):
            preset_date(date(2025, 1, 10), NotificationPreset.CUSTOM)

    def test_resolve_custom_uses_given_date(self, sample_task):
        """Test that a custom date is returned unchanged."""
        chosen = date(2025, 1, 5)
        assert resolve_date(sample_task, NotificationPreset.CUSTOM, date(2025, 1, 1), chosen) == chosen

    def test_resolve_custom_defaults_to_tomorrow(self, sample_task):
        """Test that a custom preset without a date resolves to today + 1 day."""
        today = date(2025, 1, 1)
        assert resolve_date(sample_task, NotificationPreset.CUSTOM, today) == date(2025, 1, 2)
        assert default_custom_date(today) == date(2025, 1, 2)

    def test_resolve_named_preset_ignores_custom_date(self, sample_task):
        """Test that named presets always use the deadline offset."""
        resolved = resolve_date(sample_task, NotificationPreset.ONE_DAY, date(2025, 1, 1), date(2025, 1, 4))
        assert resolved == date(2025, 1, 9)


class TestAvailablePresets:
    """Test which presets are offered for a task."""

    def test_past_month_preset_is_not_offered(self, sample_task):
        """Test deadline 2025-01-10 evaluated on 2025-01-01.

        One month before is 2024-12-10, which is already past.
        """
        available = compute_available_presets(sample_task, date(2025, 1, 1))
        assert available == [
            NotificationPreset.ONE_DAY,
            NotificationPreset.ONE_WEEK,
            NotificationPreset.CUSTOM,
        ]

    def test_all_presets_offered_early_enough(self, sample_task):
        """Test that all presets are offered when every date is still ahead."""
        available = compute_available_presets(sample_task, date(2024, 12, 1))
        assert available == [
            NotificationPreset.ONE_DAY,
            NotificationPreset.ONE_WEEK,
            NotificationPreset.ONE_MONTH,
            NotificationPreset.CUSTOM,
        ]

    def test_used_preset_is_excluded(self, sample_task):
        """Test that a preset whose date already holds a notification is dropped."""
        sample_task.notifications.append(_notification(1, date(2025, 1, 9)))
        available = compute_available_presets(sample_task, date(2025, 1, 1))
        assert NotificationPreset.ONE_DAY not in available
        assert NotificationPreset.ONE_WEEK in available

    def test_preset_on_today_is_offered(self, sample_task):
        """Test that a preset falling exactly on today is still valid."""
        available = compute_available_presets(sample_task, date(2025, 1, 9))
        assert available == [NotificationPreset.ONE_DAY, NotificationPreset.CUSTOM]

    def test_custom_is_always_offered(self, sample_task):
        """Test that CUSTOM remains even when nothing else fits."""
        available = compute_available_presets(sample_task, date(2025, 1, 10))
        assert available == [NotificationPreset.CUSTOM]


class TestValidate:
    """Test the [today, deadline] window check."""

    def test_dates_inside_window_pass(self, sample_task):
        """Test that both boundaries are accepted."""
        validate(sample_task, date(2025, 1, 1), date(2025, 1, 1))
        validate(sample_task, date(2025, 1, 10), date(2025, 1, 1))

    def test_date_after_deadline_fails(self, sample_task):
        """Test that a date after the deadline is rejected."""
        with pytest.raises(InvalidNotificationDate, match="after the task deadline"):
            validate(sample_task, date(2025, 1, 11), date(2025, 1, 1))

    def test_date_before_today_fails(self, sample_task):
        """Test that a past date is rejected."""
        with pytest.raises(InvalidNotificationDate, match="in the past"):
            validate(sample_task, date(2024, 12, 31), date(2025, 1, 1))


class TestPruneStaleNotifications:
    """Test removal of notifications after a deadline change."""

    def test_removes_only_notifications_after_deadline(self, sample_task_base):
        """Test that notifications past the new deadline are dropped."""
        task = Task(**{
            **sample_task_base,
            "deadline": date(2025, 1, 5),
            "notifications": [
                _notification(1, date(2025, 1, 3)),
                _notification(2, date(2025, 1, 5)),
                _notification(3, date(2025, 1, 20)),
            ],
        })
        removed = prune_stale_notifications(task, date(2025, 1, 1))

        assert [n.id for n in removed] == [3]
        assert [n.id for n in task.notifications] == [1, 2]
        assert all(n.notification_date <= task.deadline for n in task.notifications)

    def test_keeps_due_notifications_in_the_past(self, sample_task_base):
        """Test that a past notification before the deadline is kept (it is due)."""
        task = Task(**{
            **sample_task_base,
            "notifications": [_notification(1, date(2024, 12, 30))],
        })
        assert prune_stale_notifications(task, date(2025, 1, 1)) == []
        assert len(task.notifications) == 1

    def test_is_due(self):
        """Test that a notification is due on and after its date."""
        notification = _notification(1, date(2025, 1, 5))
        assert not is_due(notification, date(2025, 1, 4))
        assert is_due(notification, date(2025, 1, 5))
        assert is_due(notification, date(2025, 1, 6))
