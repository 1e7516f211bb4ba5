"""Task state rules for taskminder.

DELAYED is never chosen by a user: it is only produced by ``check_if_delayed``
once the deadline has passed on a task that is not completed.
"""

import logging
from datetime import date
from typing import List, Optional

from taskminder.engine.notifications import prune_stale_notifications
from taskminder.models.task import Task, TaskState

logger = logging.getLogger(__name__)


def selectable_states() -> List[TaskState]:
    """States a user may pick explicitly."""
    return [state for state in TaskState if state != TaskState.DELAYED]


def normalize_requested_state(state: Optional[TaskState]) -> TaskState:
    """Substitute OPEN for a missing or DELAYED requested state."""
    if state is None:
        return TaskState.OPEN
    state = TaskState(state)
    if state == TaskState.DELAYED:
        logger.debug("DELAYED is not selectable; using OPEN instead")
        return TaskState.OPEN
    return state


def check_if_delayed(task: Task, today: date) -> bool:
    """Move a task to DELAYED if its deadline has passed.

    Completed tasks are never touched. Applying this twice is the same as
    applying it once.

    Args:
        task: Task to evaluate (mutated in place)
        today: Date of evaluation

    Returns:
        True if the state changed
    """
    if task.state == TaskState.COMPLETED or task.state == TaskState.DELAYED:
        return False
    if task.deadline < today:
        logger.debug(f"Task {task.id} passed deadline {task.deadline}; marking delayed")
        task.state = TaskState.DELAYED
        return True
    return False


def apply_state_change(task: Task, new_state: TaskState, today: date) -> None:
    """Set an explicitly requested state and apply its side effects.

    COMPLETED clears every notification. Any other state prunes notifications
    that no longer fit before the deadline.
    """
    task.state = normalize_requested_state(new_state)
    if task.state == TaskState.COMPLETED:
        if task.notifications:
            logger.debug(f"Task {task.id} completed; clearing {len(task.notifications)} notification(s)")
        task.notifications = []
    else:
        prune_stale_notifications(task, today)
