from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Sequence

from ...core.enums import ClockState
from ...employees.model import Employee
from ...ledger.model import ClockEvent
from ..model import DayStatus


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
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
        raise NotImplementedError
