from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..core.enums import ClockState, Role

_MICROS_PER_HOUR = Decimal(3_600_000_000)


def to_hours(value: timedelta) -> Decimal:
    """Fractional hours with microsecond precision."""
    return Decimal(value // timedelta(microseconds=1)) / _MICROS_PER_HOUR


@dataclass(frozen=True)
class DayStatus:
    """Read-model: attendance of one employee for one calendar day.

    Always derived from the ledger, never stored.
    """

    employee_id: str
    employee_name: str
    employee_role: Role
    day: date
    state: ClockState
    first_clock_in: Optional[datetime]
    last_clock_out: Optional[datetime]
    break_duration: timedelta
    worked_duration: timedelta
    hourly_wage: Decimal
    daily_wage: Decimal
    # session open at the start of the day; its time counts from midnight
    carried_in: bool = False

    @property
    def worked_hours(self) -> Decimal:
        return to_hours(self.worked_duration)

    @property
    def break_hours(self) -> Decimal:
        return to_hours(self.break_duration)

    @property
    def has_activity(self) -> bool:
        return bool(self.first_clock_in or self.state.is_clocked_in or self.worked_duration)
