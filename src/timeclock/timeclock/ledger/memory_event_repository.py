from __future__ import annotations

import itertools
from datetime import datetime
from threading import RLock
from typing import Optional, Sequence

from ..core.enums import EventKind
from .model import ClockEvent
from .repository import ClockEventRepository


class InMemoryClockEventRepository(ClockEventRepository):
    def __init__(self):
        self._lock = RLock()
        self._by_employee: dict[str, list[ClockEvent]] = {}
        self._ids = itertools.count(1)

    def append(self, *, employee_id: str, kind: EventKind, occurred_at: datetime) -> ClockEvent:
        with self._lock:
            event = ClockEvent(
                event_id=next(self._ids),
                employee_id=employee_id,
                kind=kind,
                occurred_at=occurred_at,
            )
            items = self._by_employee.setdefault(employee_id, [])
            items.append(event)
            items.sort(key=lambda e: e.sort_key)
            return event

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ClockEvent]:
        with self._lock:
            items = list(self._by_employee.get(employee_id, ()))
        return [
            e
            for e in items
            if (start is None or e.occurred_at >= start) and (end is None or e.occurred_at < end)
        ]

    def last_for_employee(self, employee_id: str) -> Optional[ClockEvent]:
        with self._lock:
            items = self._by_employee.get(employee_id)
            return items[-1] if items else None

    def last_before(self, employee_id: str, before: datetime) -> Optional[ClockEvent]:
        with self._lock:
            items = list(self._by_employee.get(employee_id, ()))
        earlier = [e for e in items if e.occurred_at < before]
        return earlier[-1] if earlier else None

    def count_for_employee(self, employee_id: str) -> int:
        with self._lock:
            return len(self._by_employee.get(employee_id, ()))
