"""Repository layer for tasks and their notifications."""

import logging
from datetime import date
from typing import Any, Callable, Iterable, List, Optional

from taskminder.engine import notifications as scheduler
from taskminder.engine.identity import EntityKind, IdentityAllocator
from taskminder.engine.notifications import NotificationPreset
from taskminder.engine.state_machine import (
    apply_state_change,
    check_if_delayed,
    normalize_requested_state,
)
from taskminder.errors import NotFound, ValidationError
from taskminder.models.constants import (
    ANY_ID,
    DEFAULT_PRIORITY_ID,
    DUE_SOON_DAYS,
    UNCATEGORIZED_ID,
)
from taskminder.models.notification import Notification, NotificationEntry
from taskminder.models.summary import TaskSummary
from taskminder.models.task import Task, TaskState

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Task name is required")
    return cleaned


def _check_deadline(deadline: Optional[date], today: date) -> date:
    if deadline is None:
        raise ValidationError("Task deadline is required")
    if deadline < today:
        raise ValidationError(
            f"Deadline {deadline.isoformat()} is in the past (today is {today.isoformat()})"
        )
    return deadline


def _clean_message(message: Optional[str]) -> str:
    cleaned = (message or "").strip()
    if not cleaned:
        raise ValidationError("Notification message is required")
    return cleaned


class TaskRepository:
    """In-memory store of tasks.

    Holds tasks in insertion order and applies the identifier, notification and
    state rules on every command. ``today`` is read once per operation.
    Listeners registered with ``subscribe`` are called with the command name
    after every mutation, so views can re-query.
    """

    def __init__(
        self,
        allocator: IdentityAllocator,
        today: Callable[[], date] = date.today,
        due_soon_days: int = DUE_SOON_DAYS,
    ):
        self.allocator = allocator
        self._today = today
        self.due_soon_days = due_soon_days
        self._tasks: List[Task] = []
        self._listeners: List[ChangeListener] = []

    # ---- change events ----

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the command name after each mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ---- loading / saving ----

    def load(self, tasks: Iterable[Task]) -> List[Task]:
        """Replace the collection with restored tasks.

        Applies the delayed rule and drops notifications dated after their
        task's deadline.
        """
        today = self._today()
        self._tasks = list(tasks)
        delayed = sum(1 for task in self._tasks if check_if_delayed(task, today))
        pruned = sum(len(scheduler.prune_stale_notifications(task, today)) for task in self._tasks)
        if pruned:
            logger.warning(f"Dropped {pruned} stored notification(s) dated after their task deadline")
        logger.info(f"Loaded {len(self._tasks)} tasks ({delayed} newly delayed)")
        self._changed("load")
        return self.find_all()

    def snapshot(self) -> List[Task]:
        """Tasks in store order, for saving."""
        return list(self._tasks)

    # ---- lookups ----

    def find(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def get(self, task_id: int) -> Task:
        task = self.find(task_id)
        if task is None:
            raise NotFound(f"Task {task_id} not found")
        return task

    def find_all(self) -> List[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- task commands ----

    def add(
        self,
        name: str,
        description: str,
        deadline: date,
        category_id: int = UNCATEGORIZED_ID,
        priority_id: int = DEFAULT_PRIORITY_ID,
        state: TaskState = TaskState.OPEN,
    ) -> Task:
        """Create a task.

        Args:
            name: Task name (required, surrounding whitespace stripped)
            description: Free text, may be empty
            deadline: Due date, must not be before today
            category_id: Category ID (-1 = Uncategorized)
            priority_id: Priority ID (-1 = Default)
            state: Initial state; DELAYED is replaced by OPEN

        Returns:
            The created task

        Raises:
            ValidationError: If the name is empty or the deadline is missing or in the past
        """
        today = self._today()
        clean_name = _clean_name(name)
        _check_deadline(deadline, today)
        task = Task(
            id=self.allocator.next(EntityKind.TASK),
            name=clean_name,
            description=description or "",
            deadline=deadline,
            category_id=category_id,
            priority_id=priority_id,
            state=normalize_requested_state(state),
        )
        self._tasks.append(task)
        logger.debug(f"Created task {task.id}: {task.name[:50]}")
        self._changed("add")
        return task

    def update(
        self,
        task_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        deadline: Optional[date] = None,
        category_id: Optional[int] = None,
        priority_id: Optional[int] = None,
        state: Optional[TaskState] = None,
    ) -> Task:
        """Update an existing task.

        Fields left as None keep their current value. All checks run before
        anything is changed. A delayed task edited without an explicit
        state becomes OPEN, since its deadline is then today or later.
        Completing a task clears its notifications; any other state, or a new
        deadline, removes notifications that now fall after the deadline.

        Raises:
            NotFound: If the task does not exist
            ValidationError: If the resulting name or deadline is invalid
            ValueError: If ``state`` is not a TaskState
        """
        today = self._today()
        task = self.get(task_id)

        new_name = _clean_name(task.name if name is None else name)
        new_deadline = _check_deadline(task.deadline if deadline is None else deadline, today)
        deadline_changed = new_deadline != task.deadline
        if state is not None:
            new_state = normalize_requested_state(state)
        elif task.state == TaskState.DELAYED:
            # The deadline is no longer in the past, so the task is open again
            new_state = TaskState.OPEN
        else:
            new_state = None

        task.name = new_name
        if description is not None:
            task.description = description
        task.deadline = new_deadline
        if category_id is not None:
            task.category_id = category_id
        if priority_id is not None:
            task.priority_id = priority_id

        if new_state is not None:
            apply_state_change(task, new_state, today)
        elif deadline_changed:
            scheduler.prune_stale_notifications(task, today)

        logger.debug(f"Updated task {task.id}: {task.name[:50]}")
        self._changed("update")
        return task

    def delete(self, task_id: int) -> Task:
        """Delete a task and, with it, all of its notifications.

        Raises:
            NotFound: If the task does not exist
        """
        task = self.get(task_id)
        self._tasks.remove(task)
        logger.debug(f"Deleted task {task_id} with {len(task.notifications)} notification(s)")
        self._changed("delete")
        return task

    # ---- notification commands ----

    def add_notification(self, task_id: int, message: str, notification_date: date) -> Notification:
        """Attach a notification to a task.

        Raises:
            NotFound: If the task does not exist
            ValidationError: If the message is empty
            InvalidNotificationDate: If the date is outside [today, deadline]
        """
        today = self._today()
        task = self.get(task_id)
        clean_message = _clean_message(message)
        scheduler.validate(task, notification_date, today)

        notification = Notification(
            id=self.allocator.next(EntityKind.NOTIFICATION),
            message=clean_message,
            notification_date=notification_date,
        )
        task.notifications.append(notification)
        logger.debug(f"Added notification {notification.id} on {notification_date} to task {task.id}")
        self._changed("add_notification")
        return notification

    def schedule_notification(
        self,
        task_id: int,
        message: str,
        preset: NotificationPreset,
        custom_date: Optional[date] = None,
    ) -> Notification:
        """Resolve a preset to a date and attach the notification."""
        task = self.get(task_id)
        notification_date = scheduler.resolve_date(task, NotificationPreset(preset), self._today(), custom_date)
        return self.add_notification(task_id, message, notification_date)

    def update_notification(
        self,
        task_id: int,
        notification_id: int,
        message: str,
        notification_date: date,
    ) -> Notification:
        """Change the message and date of a notification, keeping its identifier.

        Raises:
            NotFound: If the task or notification does not exist
            ValidationError: If the message is empty
            InvalidNotificationDate: If the date is outside [today, deadline]
        """
        today = self._today()
        task = self.get(task_id)
        notification = task.find_notification(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found on task {task_id}")
        clean_message = _clean_message(message)
        scheduler.validate(task, notification_date, today)

        notification.message = clean_message
        notification.notification_date = notification_date
        logger.debug(f"Updated notification {notification_id} on task {task_id}")
        self._changed("update_notification")
        return notification

    def delete_notification(self, task_id: int, notification_id: int) -> Notification:
        """Remove a notification from its task.

        Raises:
            NotFound: If the task or notification does not exist
        """
        task = self.get(task_id)
        notification = task.find_notification(notification_id)
        if notification is None:
            raise NotFound(f"Notification {notification_id} not found on task {task_id}")
        task.notifications.remove(notification)
        logger.debug(f"Deleted notification {notification_id} from task {task_id}")
        self._changed("delete_notification")
        return notification

    def available_presets(self, task_id: int) -> List[NotificationPreset]:
        return scheduler.compute_available_presets(self.get(task_id), self._today())

    # ---- queries ----

    def search(
        self,
        name_pattern: str = "",
        category_id: int = ANY_ID,
        priority_id: int = ANY_ID,
        sort_key: Optional[Callable[[Task], Any]] = None,
    ) -> List[Task]:
        """Filter tasks by name substring, category and priority.

        The name match ignores case; an empty pattern matches everything.
        ``ANY_ID`` disables the category or priority filter. Results keep store
        order unless ``sort_key`` is given (the sort is stable).
        """
        pattern = (name_pattern or "").lower()
        matches = [
            task for task in self._tasks
            if (not pattern or pattern in task.name.lower())
            and (category_id == ANY_ID or task.category_id == category_id)
            and (priority_id == ANY_ID or task.priority_id == priority_id)
        ]
        if sort_key is not None:
            matches.sort(key=sort_key)
        return matches

    def refresh_states(self) -> List[Task]:
        """Apply the delayed rule to every task; returns the tasks that changed."""
        today = self._today()
        changed = [task for task in self._tasks if check_if_delayed(task, today)]
        if changed:
            logger.info(f"{len(changed)} task(s) became delayed")
            self._changed("refresh_states")
        return changed

    def count_completed(self) -> int:
        return sum(1 for task in self._tasks if task.is_completed())

    def count_delayed(self) -> int:
        self.refresh_states()
        return sum(1 for task in self._tasks if task.is_delayed())

    def count_due_within(self, days: Optional[int] = None) -> int:
        """Count tasks whose deadline is in [today, today + days]."""
        window = self.due_soon_days if days is None else days
        today = self._today()
        return sum(1 for task in self._tasks if task.is_due_within(today, window))

    def summary(self) -> TaskSummary:
        """Counts for the main view, evaluated against a single reading of today."""
        today = self._today()
        for task in self._tasks:
            check_if_delayed(task, today)
        return TaskSummary(
            total=len(self._tasks),
            completed=sum(1 for task in self._tasks if task.is_completed()),
            delayed=sum(1 for task in self._tasks if task.is_delayed()),
            due_soon=sum(1 for task in self._tasks if task.is_due_within(today, self.due_soon_days)),
        )

    def delayed_tasks(self) -> List[Task]:
        self.refresh_states()
        return [task for task in self._tasks if task.is_delayed()]

    def has_delayed_tasks(self) -> bool:
        return bool(self.delayed_tasks())

    def all_notifications(self) -> List[NotificationEntry]:
        """Every notification across all tasks, with its owning task."""
        return [
            NotificationEntry(task_id=task.id, task_name=task.name, notification=notification)
            for task in self._tasks
            for notification in task.notifications
        ]

    def due_notifications(self) -> List[NotificationEntry]:
        """Notifications whose date is today or earlier."""
        today = self._today()
        return [entry for entry in self.all_notifications() if scheduler.is_due(entry.notification, today)]

    def has_due_notifications(self) -> bool:
        return bool(self.due_notifications())

    # ---- cascades ----

    def delete_by_category(self, category_id: int) -> List[Task]:
        """Delete every task in a category; returns the deleted tasks."""
        removed = [task for task in self._tasks if task.category_id == category_id]
        if removed:
            self._tasks = [task for task in self._tasks if task.category_id != category_id]
            logger.debug(f"Deleted {len(removed)} task(s) in category {category_id}")
            self._changed("delete_by_category")
        return removed

    def reassign_priority(self, priority_id: int, new_priority_id: int = DEFAULT_PRIORITY_ID) -> List[Task]:
        """Move every task with ``priority_id`` to ``new_priority_id``; returns them."""
        moved = [task for task in self._tasks if task.priority_id == priority_id]
        for task in moved:
            task.priority_id = new_priority_id
        if moved:
            logger.debug(f"Reassigned {len(moved)} task(s) from priority {priority_id} to {new_priority_id}")
            self._changed("reassign_priority")
        return moved
