"""taskminder: personal task list with deadlines, priorities, categories and reminders."""

__version__ = "0.1.0"
