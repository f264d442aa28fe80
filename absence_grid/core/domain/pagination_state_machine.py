"""
Pagination phase state machine definitions.

This module defines the canonical pagination phases and the allowed
transitions between them. It is intentionally passive and validation-only:
the controller reports unexpected transitions as events, it never raises.
"""

from __future__ import annotations

PHASE_IDLE: str = "idle"
PHASE_LOADING_MORE: str = "loading_more"

PAGINATION_PHASES: frozenset[str] = frozenset({PHASE_IDLE, PHASE_LOADING_MORE})


# Allowed pagination phase transitions.
#
# Key   : previous phase
# Value : set of allowed next phases
#
# Notes:
# - idle -> idle is a reset (or a no-op request when nothing is left to load).
# - loading_more -> idle covers completion, failure and reset during a load.
# - loading_more -> loading_more is never allowed: at most one request in flight.
PAGINATION_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    PHASE_IDLE: frozenset({PHASE_IDLE, PHASE_LOADING_MORE}),
    PHASE_LOADING_MORE: frozenset({PHASE_IDLE}),
}


def is_valid_transition(prev_phase: str, next_phase: str) -> bool:
    """Return True if the transition prev_phase -> next_phase is allowed."""
    allowed = PAGINATION_ALLOWED_TRANSITIONS.get(prev_phase)
    if allowed is None:
        return False
    return next_phase in allowed
