"""Constants for taskminder.

This module centralizes sentinel identifiers and default values used throughout the application.
"""

# Sentinel lookups (immutable, recreated on load when missing)
UNCATEGORIZED_ID = -1
UNCATEGORIZED_NAME = "Uncategorized"
DEFAULT_PRIORITY_ID = -1
DEFAULT_PRIORITY_LEVEL = "Default"

# "Match anything" filter value for search
ANY_ID = -2

# Summary window for "due soon" counts (inclusive of both endpoints)
DUE_SOON_DAYS = 7

# Sort keys accepted by TaskAssistant.search
SORT_KEYS = ("category", "priority", "deadline", "name")
