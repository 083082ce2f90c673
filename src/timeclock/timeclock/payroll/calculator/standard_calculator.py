from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ...common.datetime_utils import ensure_utc
from ...core.enums import ClockState, EventKind
from ...employees.model import Employee
from ...ledger.model import ClockEvent
from ...ledger.state import transition
from ..model import DayStatus, to_hours
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: worked = IN intervals (breaks excluded), wage = rate x worked hours.

    Intervals are clipped to the day window. An interval still open at the end
    of the scan is closed at ``min(now, window_end)``.
    """

    def compute_day_totals(
        self,
        employee: Employee,
        events: Sequence[ClockEvent],
        *,
        day: date,
        window_start: datetime,
        window_end: datetime,
        now: datetime,
        opening_state: ClockState = ClockState.OUT,
    ) -> DayStatus:
        horizon = min(ensure_utc(now), window_end)

        def span(since: datetime, until: datetime) -> timedelta:
            since = max(since, window_start)
            until = min(until, horizon)
            return until - since if until > since else timedelta(0)

        state = opening_state
        cursor = window_start
        worked = timedelta(0)
        on_break = timedelta(0)
        first_in: Optional[datetime] = None
        last_out: Optional[datetime] = None

        for event in sorted(events, key=lambda e: e.sort_key):
            at = event.occurred_at
            if at > horizon:
                break

            if state == ClockState.IN:
                worked += span(cursor, at)
            elif state == ClockState.IN_ON_BREAK:
                on_break += span(cursor, at)

            if event.kind == EventKind.CLOCK_IN and first_in is None:
                first_in = at
            elif event.kind == EventKind.CLOCK_OUT:
                last_out = at

            state = transition(state, event.kind)
            cursor = at

        if state == ClockState.IN:
            worked += span(cursor, horizon)
        elif state == ClockState.IN_ON_BREAK:
            on_break += span(cursor, horizon)

        return DayStatus(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            employee_role=employee.role,
            day=day,
            state=state,
            first_clock_in=first_in,
            last_clock_out=last_out,
            break_duration=on_break,
            worked_duration=worked,
            hourly_wage=employee.hourly_wage,
            daily_wage=employee.hourly_wage * to_hours(worked),
            carried_in=opening_state.is_clocked_in,
        )
