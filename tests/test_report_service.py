from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.timeclock.timeclock.core.exceptions import NotFoundError, ValidationError

D1 = date(2026, 3, 2)
D2 = date(2026, 3, 3)


@pytest.fixture
def staff(container):
    alice = container.directory.create(name="Alice", hourly_wage=10000, pin="1111")
    bob = container.directory.create(name="Bob", hourly_wage=20000, pin="2222")
    container.directory.create(name="Idle", hourly_wage=5000, pin="3333")
    return alice, bob


@pytest.fixture
def worked(container, clock, staff, at):
    alice, bob = staff
    clock.now = at(20, day=3)
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))
    ledger.record_clock_out(alice.employee_id, at(12))
    ledger.record_clock_in(bob.employee_id, at(10))
    ledger.record_clock_out(bob.employee_id, at(11))
    ledger.record_clock_in(alice.employee_id, at(9, day=3))
    ledger.record_clock_out(alice.employee_id, at(10, day=3))
    return staff


def test_report_rows_and_summary(container, worked):
    report = container.timesheet_service.build_report(start=D1, end=D2)

    assert [(r.day, r.employee_id) for r in report.rows] == [
        (D1, "1111"),
        (D1, "2222"),
        (D2, "1111"),
    ]
    alice, bob = report.summary
    assert alice.employee_id == "1111"
    assert alice.days_worked == 2
    assert alice.worked_duration == timedelta(hours=4)
    assert alice.total_wage == Decimal("40000")
    assert bob.worked_hours == Decimal(1)
    assert bob.total_wage == Decimal("20000")


def test_report_filtered_by_employee(container, worked):
    report = container.timesheet_service.build_report(start=D1, end=D2, employee_id="2222")

    assert [r.employee_id for r in report.rows] == ["2222"]
    assert [s.employee_id for s in report.summary] == ["2222"]


def test_filtered_idle_employee_still_gets_summary(container, worked):
    report = container.timesheet_service.build_report(start=D1, end=D2, employee_id="3333")

    assert report.rows == []
    assert report.summary[0].worked_duration == timedelta(0)
    assert report.summary[0].total_wage == 0


def test_report_rejects_bad_ranges(container, staff):
    with pytest.raises(ValidationError):
        container.timesheet_service.build_report(start=D2, end=D1)
    with pytest.raises(ValidationError):
        container.timesheet_service.build_report(start=D1, end=D1 + timedelta(days=400))


def test_report_unknown_employee(container, staff):
    with pytest.raises(NotFoundError):
        container.timesheet_service.build_report(start=D1, end=D2, employee_id="9999")


def test_today_lists_active_employees(container, clock, staff, at):
    alice, _ = staff
    container.ledger_service.record_clock_in(alice.employee_id, at(9))
    container.directory.deactivate("3333")
    clock.now = at(10)

    rows = {r.employee_id: r for r in container.timesheet_service.today()}

    assert set(rows) == {"1111", "2222"}
    assert rows["1111"].worked_duration == timedelta(hours=1)
    assert rows["2222"].first_clock_in is None
