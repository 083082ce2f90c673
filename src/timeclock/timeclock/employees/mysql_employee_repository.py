from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, name, hourly_wage, role, active, created_at"


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=str(row["employee_id"]),
        name=row["name"],
        hourly_wage=Decimal(str(row["hourly_wage"])),
        role=Role(row["role"]),
        active=bool(row.get("active", True)),
        created_at=from_db_datetime(row["created_at"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name, employee_id")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def insert(self, employee: Employee) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_id, name, hourly_wage, role, active, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee.employee_id,
                    employee.name,
                    employee.hourly_wage,
                    employee.role.value,
                    int(employee.active),
                    to_db_datetime(employee.created_at),
                ),
            )

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, hourly_wage=%s, role=%s, active=%s
                WHERE employee_id=%s
                """,
                (employee.name, employee.hourly_wage, employee.role.value, int(employee.active), employee.employee_id),
            )
            # rowcount is 0 when values are unchanged, so confirm existence separately
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (employee.employee_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, employee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0
