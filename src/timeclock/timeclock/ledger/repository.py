from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventKind
from .model import ClockEvent


class ClockEventRepository(Protocol):
    """Append-only store of clock events.

    Reads return events ordered by (occurred_at, event_id) and never expose a
    partially written event.
    """

    def append(self, *, employee_id: str, kind: EventKind, occurred_at: datetime) -> ClockEvent:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ClockEvent]:
        """Events with start <= occurred_at < end (bounds optional)."""

        raise NotImplementedError

    def last_for_employee(self, employee_id: str) -> Optional[ClockEvent]:
        raise NotImplementedError

    def last_before(self, employee_id: str, before: datetime) -> Optional[ClockEvent]:
        raise NotImplementedError

    def count_for_employee(self, employee_id: str) -> int:
        raise NotImplementedError
