"""Explicit run-lifecycle state machine for the installer."""

from governance_kit.installer.workflow.state_machine import (
    ALLOWED_TRANSITIONS,
    IllegalTransitionError,
    RunState,
    RunTracker,
    transition,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "IllegalTransitionError",
    "RunState",
    "RunTracker",
    "transition",
]
