#!/usr/bin/env python3
"""Run script for taskminder.

Loads the stored tasks, reports delayed tasks and due notifications, then
saves everything back (which persists any newly delayed states).
"""

import sys

from taskminder.assistant import TaskAssistant
from taskminder.config import Settings
from taskminder.errors import StorageError
from taskminder.logging_setup import setup_logging


def main() -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    assistant = TaskAssistant.from_settings(settings)
    assistant.load_all()

    delayed = assistant.delayed_tasks()
    if delayed:
        print(f"\nYou have {len(delayed)} delayed task(s):")
        for task in delayed:
            print(f"  - {task.name} (due {task.deadline.isoformat()})")

    due = assistant.due_notifications()
    if due:
        print(f"\nYou have {len(due)} notification(s):")
        for entry in due:
            print(f"  - [{entry.notification_date.isoformat()}] {entry.task_name}: {entry.message}")

    summary = assistant.summary()
    print(
        f"\nTotal: {summary.total}  Completed: {summary.completed}  "
        f"Delayed: {summary.delayed}  Due within {settings.due_soon_days} days: {summary.due_soon}"
    )

    try:
        assistant.save_all()
    except StorageError as e:
        print(f"Could not save data: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
