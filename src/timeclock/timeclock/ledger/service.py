from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import day_window, ensure_utc, local_date, now_utc
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import ClockState, EventKind
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..payroll.model import DayStatus
from .locks import EmployeeLockRegistry
from .model import ClockEvent
from .repository import ClockEventRepository
from .state import state_after, transition

logger = logging.getLogger(__name__)

KindPicker = Callable[[ClockState], EventKind]


class ClockLedgerService:
    """Use case: record punches and derive the current attendance state.

    Every write validates against the state after the employee's latest event
    and appends under that employee's lock. Reads fold the stored events and
    keep no cached state.
    """

    def __init__(
        self,
        events: ClockEventRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        locks: Optional[EmployeeLockRegistry] = None,
        tz: ZoneInfo | str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._events = events
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._locks = locks or EmployeeLockRegistry()
        self._tz = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
        self._clock = clock

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return ensure_utc(self._clock())

    def today(self) -> date:
        return local_date(self.now(), self._tz)

    # --- writes ---

    def record_clock_in(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        return self._record(employee_id, at, lambda _state: EventKind.CLOCK_IN)

    def record_clock_out(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        return self._record(employee_id, at, lambda _state: EventKind.CLOCK_OUT)

    def record_break_start(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        return self._record(employee_id, at, lambda _state: EventKind.BREAK_START)

    def record_break_end(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        return self._record(employee_id, at, lambda _state: EventKind.BREAK_END)

    def toggle_clock(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        """Clock in from OUT, otherwise clock out (rejected while on break)."""

        return self._record(
            employee_id,
            at,
            lambda state: EventKind.CLOCK_IN if state == ClockState.OUT else EventKind.CLOCK_OUT,
        )

    def toggle_break(self, employee_id: str, at: Optional[datetime] = None) -> DayStatus:
        """End the break when on one, otherwise start one (rejected while OUT)."""

        return self._record(
            employee_id,
            at,
            lambda state: EventKind.BREAK_END if state == ClockState.IN_ON_BREAK else EventKind.BREAK_START,
        )

    def _record(self, employee_id: str, at: Optional[datetime], pick_kind: KindPicker) -> DayStatus:
        if at is not None:
            at = ensure_utc(at)
            if at > self.now():
                raise ValidationError(f"Timestamp {at.isoformat()} is in the future")

        self._require_employee(employee_id)
        with self._locks.hold(employee_id):
            employee = self._require_employee(employee_id)
            if at is None:
                at = self.now()
            if not employee.active:
                raise ValidationError(f"Employee {employee_id} is inactive")

            last = self._events.last_for_employee(employee_id)
            if last is not None and at < last.occurred_at:
                raise ValidationError(
                    f"Timestamp {at.isoformat()} precedes the last recorded event ({last.occurred_at.isoformat()})"
                )

            state = state_after(last)
            kind = pick_kind(state)
            try:
                new_state = transition(state, kind)
            except InvalidTransitionError as e:
                logger.warning("rejected %s for employee=%s: %s", kind.value, employee_id, e)
                raise

            event = self._events.append(employee_id=employee_id, kind=kind, occurred_at=at)

        logger.info(
            "recorded %s employee=%s event_id=%s state=%s->%s",
            kind.value,
            employee_id,
            event.event_id,
            state.value,
            new_state.value,
        )
        return self.day_status(
            employee_id,
            local_date(at, self._tz),
            now=self.now(),
            employee=employee,
        )

    # --- reads ---

    def current_status(self, employee_id: str, *, now: Optional[datetime] = None) -> DayStatus:
        now = ensure_utc(now) if now is not None else self.now()
        return self.day_status(employee_id, local_date(now, self._tz), now=now)

    def day_status(
        self,
        employee_id: str,
        day: date,
        *,
        now: Optional[datetime] = None,
        employee: Optional[Employee] = None,
    ) -> DayStatus:
        employee = employee or self._require_employee(employee_id)
        now = ensure_utc(now) if now is not None else self.now()

        start, end = day_window(day, self._tz)
        events = self._events.list_for_employee(employee_id, start=start, end=end)
        opening = state_after(self._events.last_before(employee_id, start))

        return self._calculator.compute_day_totals(
            employee,
            events,
            day=day,
            window_start=start,
            window_end=end,
            now=now,
            opening_state=opening,
        )

    def events_for_day(self, employee_id: str, day: date) -> Sequence[ClockEvent]:
        self._require_employee(employee_id)
        start, end = day_window(day, self._tz)
        return self._events.list_for_employee(employee_id, start=start, end=end)

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee
