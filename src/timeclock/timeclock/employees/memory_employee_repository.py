from __future__ import annotations

from threading import RLock
from typing import Optional, Sequence

from .model import Employee
from .repository import EmployeeRepository


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, employees: Sequence[Employee] = ()):
        self._lock = RLock()
        self._by_id: dict[str, Employee] = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            return self._by_id.get(employee_id)

    def list_all(self) -> Sequence[Employee]:
        with self._lock:
            items = list(self._by_id.values())
        items.sort(key=lambda e: (e.name.lower(), e.employee_id))
        return items

    def insert(self, employee: Employee) -> None:
        with self._lock:
            if employee.employee_id in self._by_id:
                raise KeyError(employee.employee_id)
            self._by_id[employee.employee_id] = employee

    def update(self, employee: Employee) -> bool:
        with self._lock:
            if employee.employee_id not in self._by_id:
                return False
            self._by_id[employee.employee_id] = employee
            return True

    def delete_by_id(self, employee_id: str) -> bool:
        with self._lock:
            return self._by_id.pop(employee_id, None) is not None
