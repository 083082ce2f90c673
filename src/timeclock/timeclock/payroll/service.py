from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import iter_days, local_date
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..ledger.service import ClockLedgerService
from .model import DayStatus, to_hours

MAX_REPORT_DAYS = 366


@dataclass(frozen=True)
class EmployeeSummary:
    employee_id: str
    employee_name: str
    days_worked: int
    worked_duration: timedelta
    break_duration: timedelta
    total_wage: Decimal

    @property
    def worked_hours(self) -> Decimal:
        return to_hours(self.worked_duration)

    @property
    def break_hours(self) -> Decimal:
        return to_hours(self.break_duration)


@dataclass(frozen=True)
class ReportData:
    start: date
    end: date
    rows: list[DayStatus]
    summary: list[EmployeeSummary]


class TimesheetService:
    """Use case: per-day timesheets and range reports built from the ledger."""

    def __init__(self, employees: EmployeeRepository, ledger: ClockLedgerService):
        self._employees = employees
        self._ledger = ledger

    def today(self, *, day: Optional[date] = None, now: Optional[datetime] = None) -> list[DayStatus]:
        """DayStatus of every active employee for ``day`` (default: current local day)."""

        now = now or self._ledger.now()
        day = day or local_date(now, self._ledger.tz)
        return [
            self._ledger.day_status(e.employee_id, day, now=now, employee=e)
            for e in self._employees.list_all()
            if e.active
        ]

    def build_report(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("Report end date must not be before start date")
        if (end - start).days >= MAX_REPORT_DAYS:
            raise ValidationError(f"Report range is limited to {MAX_REPORT_DAYS} days")

        now = now or self._ledger.now()
        if employee_id is not None:
            employees = [self._require_employee(employee_id)]
        else:
            employees = list(self._employees.list_all())

        rows: list[DayStatus] = []
        summary: list[EmployeeSummary] = []
        for employee in employees:
            days = [
                self._ledger.day_status(employee.employee_id, d, now=now, employee=employee)
                for d in iter_days(start, end)
            ]
            days = [s for s in days if s.has_activity]
            if not days and employee_id is None:
                continue
            rows.extend(days)

            worked = sum((s.worked_duration for s in days), timedelta(0))
            breaks = sum((s.break_duration for s in days), timedelta(0))
            summary.append(
                EmployeeSummary(
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    days_worked=sum(1 for s in days if s.worked_duration > timedelta(0)),
                    worked_duration=worked,
                    break_duration=breaks,
                    total_wage=sum((s.daily_wage for s in days), Decimal(0)),
                )
            )

        rows.sort(key=lambda s: (s.day, s.employee_name.lower(), s.employee_id))
        summary.sort(key=lambda s: s.worked_duration, reverse=True)
        return ReportData(start=start, end=end, rows=rows, summary=summary)

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee
