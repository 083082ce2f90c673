"""Clock state machine.

    OUT         --clock-in-->    IN
    IN          --break-start--> IN_ON_BREAK
    IN_ON_BREAK --break-end-->   IN
    IN          --clock-out-->   OUT

Every other (state, event) pair is rejected.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import ClockState, EventKind
from ..core.exceptions import InvalidTransitionError
from .model import ClockEvent

TRANSITIONS: dict[tuple[ClockState, EventKind], ClockState] = {
    (ClockState.OUT, EventKind.CLOCK_IN): ClockState.IN,
    (ClockState.IN, EventKind.BREAK_START): ClockState.IN_ON_BREAK,
    (ClockState.IN_ON_BREAK, EventKind.BREAK_END): ClockState.IN,
    (ClockState.IN, EventKind.CLOCK_OUT): ClockState.OUT,
}

_REASONS: dict[tuple[ClockState, EventKind], str] = {
    (ClockState.IN, EventKind.CLOCK_IN): "already clocked in",
    (ClockState.IN_ON_BREAK, EventKind.CLOCK_IN): "already clocked in",
    (ClockState.OUT, EventKind.CLOCK_OUT): "already clocked out",
    (ClockState.IN_ON_BREAK, EventKind.CLOCK_OUT): "end the break before clocking out",
    (ClockState.OUT, EventKind.BREAK_START): "not clocked in",
    (ClockState.IN_ON_BREAK, EventKind.BREAK_START): "already on break",
    (ClockState.OUT, EventKind.BREAK_END): "not on break",
    (ClockState.IN, EventKind.BREAK_END): "not on break",
}


def transition(state: ClockState, kind: EventKind) -> ClockState:
    try:
        return TRANSITIONS[(state, kind)]
    except KeyError:
        reason = _REASONS.get((state, kind), "not allowed")
        raise InvalidTransitionError(f"Cannot record {kind.value} while {state.value}: {reason}")


def state_after(event: Optional[ClockEvent]) -> ClockState:
    """State following an accepted event; the kind alone determines it."""
    if event is None:
        return ClockState.OUT
    return {
        EventKind.CLOCK_IN: ClockState.IN,
        EventKind.BREAK_START: ClockState.IN_ON_BREAK,
        EventKind.BREAK_END: ClockState.IN,
        EventKind.CLOCK_OUT: ClockState.OUT,
    }[event.kind]


def fold(events: Iterable[ClockEvent], *, opening: ClockState = ClockState.OUT) -> ClockState:
    state = opening
    for event in events:
        state = transition(state, event.kind)
    return state
