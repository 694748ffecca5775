"""Unit tests for the installer run state machine."""

from __future__ import annotations

import pytest

from governance_kit.installer.workflow.state_machine import (
    IllegalTransitionError,
    RunState,
    RunTracker,
    transition,
)


def test_happy_path_moves_strictly_forward() -> None:
    tracker = RunTracker()
    assert tracker.state is RunState.PARSING_CONFIG

    tracker.advance(RunState.RESOLVING_ROOT)
    tracker.advance(RunState.PROVISIONING_ARTIFACTS)
    tracker.advance(RunState.DONE)

    assert tracker.finished


@pytest.mark.parametrize(
    "state",
    [RunState.PARSING_CONFIG, RunState.RESOLVING_ROOT, RunState.PROVISIONING_ARTIFACTS],
)
def test_any_active_state_can_fail(state: RunState) -> None:
    assert transition(current=state, to=RunState.FAILED) is RunState.FAILED


def test_transition_rejects_skipping_and_going_back() -> None:
    with pytest.raises(IllegalTransitionError):
        transition(current=RunState.PARSING_CONFIG, to=RunState.PROVISIONING_ARTIFACTS)
    with pytest.raises(IllegalTransitionError):
        transition(current=RunState.PROVISIONING_ARTIFACTS, to=RunState.RESOLVING_ROOT)


def test_terminal_states_have_no_exits() -> None:
    with pytest.raises(IllegalTransitionError):
        transition(current=RunState.FAILED, to=RunState.RESOLVING_ROOT)
    with pytest.raises(IllegalTransitionError):
        transition(current=RunState.DONE, to=RunState.FAILED)
