from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import local_date
from ..employees.repository import EmployeeRepository
from ..ledger.service import ClockLedgerService


@dataclass(frozen=True)
class DailyStats:
    day: date
    total_employees: int
    clocked_in: int
    on_break: int

    @property
    def clocked_out(self) -> int:
        return self.total_employees - self.clocked_in


class StatsService:
    """Fleet-wide counts, folded from per-employee DayStatus on every call."""

    def __init__(self, employees: EmployeeRepository, ledger: ClockLedgerService):
        self._employees = employees
        self._ledger = ledger

    def daily_stats(self, day: Optional[date] = None, *, now: Optional[datetime] = None) -> DailyStats:
        now = now or self._ledger.now()
        day = day or local_date(now, self._ledger.tz)

        total = clocked_in = on_break = 0
        for employee in self._employees.list_all():
            if not employee.active:
                continue
            total += 1
            status = self._ledger.day_status(employee.employee_id, day, now=now, employee=employee)
            if status.state.is_clocked_in:
                clocked_in += 1
            if status.state.is_on_break:
                on_break += 1

        return DailyStats(day=day, total_employees=total, clocked_in=clocked_in, on_break=on_break)
