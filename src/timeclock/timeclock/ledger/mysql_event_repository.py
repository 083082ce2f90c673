from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import ClockEvent
from .repository import ClockEventRepository

_COLUMNS = "event_id, employee_id, kind, occurred_at"


def _row_to_event(row: dict) -> ClockEvent:
    return ClockEvent(
        event_id=int(row["event_id"]),
        employee_id=str(row["employee_id"]),
        kind=EventKind(row["kind"]),
        occurred_at=from_db_datetime(row["occurred_at"]),
    )


class MySQLClockEventRepository(ClockEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, employee_id: str, kind: EventKind, occurred_at: datetime) -> ClockEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO clock_events(employee_id, kind, occurred_at)
                VALUES(%s,%s,%s)
                """,
                (employee_id, kind.value, to_db_datetime(occurred_at)),
            )
            event_id = int(cur.lastrowid)
        return ClockEvent(event_id=event_id, employee_id=employee_id, kind=kind, occurred_at=occurred_at)

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[ClockEvent]:
        where = ["employee_id=%s"]
        params: list = [employee_id]
        if start is not None:
            where.append("occurred_at >= %s")
            params.append(to_db_datetime(start))
        if end is not None:
            where.append("occurred_at < %s")
            params.append(to_db_datetime(end))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_events
                WHERE {' AND '.join(where)}
                ORDER BY occurred_at, event_id
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def last_for_employee(self, employee_id: str) -> Optional[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_events
                WHERE employee_id=%s
                ORDER BY occurred_at DESC, event_id DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return _row_to_event(row) if row else None

    def last_before(self, employee_id: str, before: datetime) -> Optional[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM clock_events
                WHERE employee_id=%s AND occurred_at < %s
                ORDER BY occurred_at DESC, event_id DESC
                LIMIT 1
                """,
                (employee_id, to_db_datetime(before)),
            )
            row = fetchone(cur)
            return _row_to_event(row) if row else None

    def count_for_employee(self, employee_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM clock_events WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
