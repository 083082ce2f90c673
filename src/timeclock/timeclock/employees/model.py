from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: one directory entry.

    Note: ``employee_id`` is the PIN. It is issued once and never changes.
    """

    employee_id: str
    name: str
    hourly_wage: Decimal
    role: Role = Role.EMPLOYEE
    active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
