from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    PARSING_CONFIG = "parsing_config"
    RESOLVING_ROOT = "resolving_root"
    PROVISIONING_ARTIFACTS = "provisioning_artifacts"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES: frozenset[RunState] = frozenset({RunState.DONE, RunState.FAILED})

ALLOWED_TRANSITIONS: dict[RunState, set[RunState]] = {
    RunState.PARSING_CONFIG: {RunState.RESOLVING_ROOT, RunState.FAILED},
    RunState.RESOLVING_ROOT: {RunState.PROVISIONING_ARTIFACTS, RunState.FAILED},
    RunState.PROVISIONING_ARTIFACTS: {RunState.DONE, RunState.FAILED},
    RunState.DONE: set(),
    RunState.FAILED: set(),
}


class IllegalTransitionError(ValueError):
    pass


def transition(*, current: RunState, to: RunState) -> RunState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to


class RunTracker:
    """Track the state of a single installer run.

    Transitions are strictly forward; there is no retry state.
    """

    def __init__(self) -> None:
        self._state = RunState.PARSING_CONFIG

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state in TERMINAL_STATES

    def advance(self, to: RunState) -> RunState:
        self._state = transition(current=self._state, to=to)
        logger.debug("Run state changed", extra={"state": self._state.value})
        return self._state

    def fail(self) -> RunState:
        return self.advance(RunState.FAILED)
