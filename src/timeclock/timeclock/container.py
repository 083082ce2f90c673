from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_utc
from .core.constants import DEFAULT_TIMEZONE
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .employees.memory_employee_repository import InMemoryEmployeeRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeDirectory
from .ledger.locks import EmployeeLockRegistry
from .ledger.memory_event_repository import InMemoryClockEventRepository
from .ledger.mysql_event_repository import MySQLClockEventRepository
from .ledger.repository import ClockEventRepository
from .ledger.service import ClockLedgerService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import TimesheetService
from .stats.service import StatsService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    events_repo: ClockEventRepository

    auth_service: AuthService
    directory: EmployeeDirectory
    ledger_service: ClockLedgerService
    timesheet_service: TimesheetService
    stats_service: StatsService


def build_repositories(*, storage_backend: str, db_config: Optional[dict] = None):
    backend = (storage_backend or "memory").lower()
    if backend == "memory":
        return InMemoryEmployeeRepository(), InMemoryClockEventRepository()
    if backend == "mysql":
        if not db_config:
            raise ValidationError("STORAGE_BACKEND=mysql requires DB_CONFIG")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        return MySQLEmployeeRepository(conn), MySQLClockEventRepository(conn)
    raise ValidationError(f"Unknown STORAGE_BACKEND: {storage_backend!r}")


def build_container(
    *,
    storage_backend: str = "memory",
    db_config: Optional[dict] = None,
    timezone: str = DEFAULT_TIMEZONE,
    clock: Callable[[], datetime] = now_utc,
    employees_repo: Optional[EmployeeRepository] = None,
    events_repo: Optional[ClockEventRepository] = None,
) -> Container:
    if employees_repo is None or events_repo is None:
        built_employees, built_events = build_repositories(storage_backend=storage_backend, db_config=db_config)
        employees_repo = employees_repo or built_employees
        events_repo = events_repo or built_events

    # Directory and ledger share the registry so delete and append never interleave.
    locks = EmployeeLockRegistry()

    auth_service = AuthService(employees_repo)
    directory = EmployeeDirectory(employees_repo, events_repo, locks=locks)
    ledger_service = ClockLedgerService(
        events_repo,
        employees_repo,
        calculator=StandardPayrollCalculator(),
        locks=locks,
        tz=timezone,
        clock=clock,
    )
    timesheet_service = TimesheetService(employees_repo, ledger_service)
    stats_service = StatsService(employees_repo, ledger_service)

    return Container(
        employees_repo=employees_repo,
        events_repo=events_repo,
        auth_service=auth_service,
        directory=directory,
        ledger_service=ledger_service,
        timesheet_service=timesheet_service,
        stats_service=stats_service,
    )
