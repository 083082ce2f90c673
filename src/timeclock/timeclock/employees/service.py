from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, replace
from threading import Lock
from typing import Any, Callable, Optional, Sequence

from ..common.validators import (
    require_bool,
    require_non_empty,
    require_pin,
    require_role,
    require_wage,
)
from ..core.constants import PIN_ISSUE_ATTEMPTS, PIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..ledger.locks import EmployeeLockRegistry
from ..ledger.repository import ClockEventRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def random_pin() -> str:
    return f"{secrets.randbelow(10 ** PIN_LENGTH):0{PIN_LENGTH}d}"


@dataclass(frozen=True)
class SessionEmployee:
    """Explicit session context handed to request handlers after PIN login."""

    employee_id: str
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_session(self) -> dict:
        return {"employee_id": self.employee_id, "name": self.name, "role": self.role.value}

    @classmethod
    def from_session(cls, data: dict) -> Optional["SessionEmployee"]:
        if not data or "employee_id" not in data:
            return None
        return cls(employee_id=str(data["employee_id"]), name=str(data.get("name", "")), role=Role(data["role"]))


class AuthService:
    """Use case: PIN login."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def login(self, pin: Any) -> SessionEmployee:
        try:
            pin = require_pin(pin)
        except ValidationError:
            raise AuthenticationError("Invalid PIN")

        employee = self._employees.get_by_id(pin)
        if not employee or not employee.active:
            raise AuthenticationError("Invalid PIN")

        logger.info("login employee=%s role=%s", employee.employee_id, employee.role.value)
        return SessionEmployee(employee_id=employee.employee_id, name=employee.name, role=employee.role)


class EmployeeDirectory:
    """Use case: manage employee records (admin)."""

    def __init__(
        self,
        employees: EmployeeRepository,
        events: ClockEventRepository,
        *,
        locks: Optional[EmployeeLockRegistry] = None,
        pin_factory: Callable[[], str] = random_pin,
    ):
        self._employees = employees
        self._events = events
        self._locks = locks or EmployeeLockRegistry()
        self._pin_factory = pin_factory
        self._issue_lock = Lock()

    def create(
        self,
        *,
        name: Any,
        hourly_wage: Any,
        role: Any = Role.EMPLOYEE,
        active: Any = True,
        pin: Any = None,
    ) -> Employee:
        name = require_non_empty(name, "Name")
        wage = require_wage(hourly_wage)
        role = require_role(role)
        active = require_bool(active, "Active")

        with self._issue_lock:
            if pin is None or pin == "":
                employee_id = self._issue_pin()
            else:
                employee_id = require_pin(pin)
                if self._employees.get_by_id(employee_id):
                    raise ConflictError(f"PIN {employee_id} is already issued")

            employee = Employee(
                employee_id=employee_id,
                name=name,
                hourly_wage=wage,
                role=role,
                active=active,
            )
            self._employees.insert(employee)

        logger.info("created employee=%s role=%s active=%s", employee.employee_id, role.value, active)
        return employee

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def list(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def update(
        self,
        employee_id: str,
        *,
        name: Any = None,
        hourly_wage: Any = None,
        role: Any = None,
        active: Any = None,
    ) -> Employee:
        self.get(employee_id)
        with self._locks.hold(employee_id):
            current = self.get(employee_id)
            changes: dict[str, Any] = {}
            if name is not None:
                changes["name"] = require_non_empty(name, "Name")
            if hourly_wage is not None:
                changes["hourly_wage"] = require_wage(hourly_wage)
            if role is not None:
                changes["role"] = require_role(role)
            if active is not None:
                changes["active"] = require_bool(active, "Active")

            if not changes:
                return current

            updated = replace(current, **changes)
            if not self._employees.update(updated):
                raise NotFoundError(f"Employee {employee_id} not found")

        logger.info("updated employee=%s fields=%s", employee_id, ",".join(sorted(changes)))
        return updated

    def deactivate(self, employee_id: str) -> Employee:
        return self.update(employee_id, active=False)

    def delete(self, employee_id: str) -> None:
        """Hard delete, allowed only while the ledger holds no events for the id."""

        self.get(employee_id)
        with self._locks.hold(employee_id):
            self.get(employee_id)
            recorded = self._events.count_for_employee(employee_id)
            if recorded:
                raise ConflictError(
                    f"Employee {employee_id} has {recorded} recorded events; deactivate instead of deleting"
                )
            if not self._employees.delete_by_id(employee_id):
                raise NotFoundError(f"Employee {employee_id} not found")

        logger.info("deleted employee=%s", employee_id)

    def _issue_pin(self) -> str:
        for _ in range(PIN_ISSUE_ATTEMPTS):
            candidate = self._pin_factory()
            if not self._employees.get_by_id(candidate):
                return candidate
        raise ConflictError("No free PIN could be issued")
