from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role used for authorization."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


class EventKind(str, Enum):
    """Kinds of punches recorded in the ledger."""

    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"
    BREAK_START = "break-start"
    BREAK_END = "break-end"


class ClockState(str, Enum):
    """Derived attendance state of one employee."""

    OUT = "OUT"
    IN = "IN"
    IN_ON_BREAK = "IN_ON_BREAK"

    @property
    def is_clocked_in(self) -> bool:
        return self is not ClockState.OUT

    @property
    def is_on_break(self) -> bool:
        return self is ClockState.IN_ON_BREAK

    @property
    def clock_label(self) -> str:
        return "Clocked in" if self.is_clocked_in else "Clocked out"

    @property
    def break_label(self) -> str:
        return "On break" if self.is_on_break else "Not on break"
