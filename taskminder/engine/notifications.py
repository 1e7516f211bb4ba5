"""Notification scheduling rules for taskminder.

A notification is valid only between today and the task deadline (both
inclusive). Because the deadline can be edited and time keeps moving, the
valid window is recomputed on every call instead of being cached.
"""

import logging
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from taskminder.errors import InvalidNotificationDate
from taskminder.models.notification import Notification
from taskminder.models.task import Task

logger = logging.getLogger(__name__)


class NotificationPreset(str, Enum):
    """Lead times offered when creating a notification."""
    ONE_DAY = "1 Day Before"
    ONE_WEEK = "1 Week Before"
    ONE_MONTH = "1 Month Before"
    CUSTOM = "Any"  # Free-form date chosen by the user

    @property
    def label(self) -> str:
        return self.value


NAMED_PRESETS = (
    NotificationPreset.ONE_DAY,
    NotificationPreset.ONE_WEEK,
    NotificationPreset.ONE_MONTH,
)

_PRESET_OFFSETS = {
    NotificationPreset.ONE_DAY: relativedelta(days=1),
    NotificationPreset.ONE_WEEK: relativedelta(weeks=1),
    NotificationPreset.ONE_MONTH: relativedelta(months=1),
}


def preset_date(deadline: date, preset: NotificationPreset) -> date:
    """Compute the notification date for a named preset.

    Month arithmetic clamps to the last day of shorter months
    (e.g. 2025-03-31 minus one month is 2025-02-28).

    Args:
        deadline: Task deadline
        preset: One of the named presets (not CUSTOM)

    Returns:
        Date of the notification

    Raises:
        ValueError: If preset is CUSTOM
    """
    if preset not in _PRESET_OFFSETS:
        raise ValueError(f"Preset {preset!r} has no fixed offset")
    return deadline - _PRESET_OFFSETS[preset]


def default_custom_date(today: date) -> date:
    """Initial value offered for a free-form notification date."""
    return today + timedelta(days=1)


def compute_available_presets(task: Task, today: date) -> List[NotificationPreset]:
    """Return the presets that still make sense for a task.

    A named preset is offered when no existing notification already falls on its
    date and that date is not in the past. CUSTOM is always offered last.

    Args:
        task: Task the notification would belong to
        today: Date of evaluation

    Returns:
        Ordered list of available presets
    """
    available: List[NotificationPreset] = []
    for preset in NAMED_PRESETS:
        candidate = preset_date(task.deadline, preset)
        if task.has_notification_on(candidate) or candidate < today:
            continue
        available.append(preset)
    available.append(NotificationPreset.CUSTOM)
    return available


def resolve_date(
    task: Task,
    preset: NotificationPreset,
    today: date,
    custom_date: Optional[date] = None,
) -> date:
    """Turn a preset choice into a concrete notification date.

    For CUSTOM the explicit date is returned, or ``today + 1 day`` when none was given.
    The result is not validated; call ``validate`` before using it.
    """
    if preset == NotificationPreset.CUSTOM:
        return custom_date if custom_date is not None else default_custom_date(today)
    return preset_date(task.deadline, preset)


def validate(task: Task, candidate_date: date, today: date) -> None:
    """Check that a notification date lies within [today, task.deadline].

    Raises:
        InvalidNotificationDate: If the date is after the deadline or before today
    """
    if candidate_date > task.deadline:
        raise InvalidNotificationDate(
            f"Notification date {candidate_date.isoformat()} is after the task deadline "
            f"{task.deadline.isoformat()}"
        )
    if candidate_date < today:
        raise InvalidNotificationDate(
            f"Notification date {candidate_date.isoformat()} is in the past"
        )


def prune_stale_notifications(task: Task, today: date) -> List[Notification]:
    """Drop notifications that now fall after the task deadline.

    Notifications dated before today but not after the deadline are kept; they
    are due and still need to be shown.

    Returns:
        The removed notifications
    """
    kept: List[Notification] = []
    removed: List[Notification] = []
    for notification in task.notifications:
        if notification.notification_date > task.deadline:
            removed.append(notification)
        else:
            kept.append(notification)
    if removed:
        task.notifications = kept
        logger.debug(
            f"Pruned {len(removed)} notification(s) after deadline {task.deadline} on task {task.id}"
        )
    return removed


def is_due(notification: Notification, today: date) -> bool:
    """A notification is due once its date has arrived."""
    return notification.notification_date <= today
