from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import EventKind


@dataclass(frozen=True)
class ClockEvent:
    """Domain entity: one immutable ledger entry.

    ``event_id`` grows monotonically and orders events that share a timestamp.
    """

    event_id: int
    employee_id: str
    kind: EventKind
    occurred_at: datetime

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.occurred_at, self.event_id)
