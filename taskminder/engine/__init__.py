"""Domain rules engine for taskminder."""

from taskminder.engine.identity import EntityKind, IdentityAllocator
from taskminder.engine.notifications import (
    NotificationPreset,
    compute_available_presets,
    resolve_date,
    validate,
    prune_stale_notifications,
)
from taskminder.engine.state_machine import (
    check_if_delayed,
    apply_state_change,
    normalize_requested_state,
    selectable_states,
)

__all__ = [
    "EntityKind",
    "IdentityAllocator",
    "NotificationPreset",
    "compute_available_presets",
    "resolve_date",
    "validate",
    "prune_stale_notifications",
    "check_if_delayed",
    "apply_state_change",
    "normalize_requested_state",
    "selectable_states",
]
