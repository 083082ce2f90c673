from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.core.enums import ClockState, EventKind
from src.timeclock.timeclock.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.timeclock.timeclock.employees.memory_employee_repository import InMemoryEmployeeRepository
from src.timeclock.timeclock.employees.service import EmployeeDirectory
from src.timeclock.timeclock.ledger.locks import EmployeeLockRegistry
from src.timeclock.timeclock.ledger.memory_event_repository import InMemoryClockEventRepository
from src.timeclock.timeclock.ledger.service import ClockLedgerService


@pytest.fixture
def alice(container):
    return container.directory.create(name="Alice", hourly_wage="15000")


def test_full_day_example(container, alice, at):
    ledger = container.ledger_service

    ledger.record_clock_in(alice.employee_id, at(9))
    ledger.record_break_start(alice.employee_id, at(12))
    ledger.record_break_end(alice.employee_id, at(12, 30))
    day = ledger.record_clock_out(alice.employee_id, at(17))

    assert day.state == ClockState.OUT
    assert day.worked_hours == Decimal("7.5")
    assert day.break_hours == Decimal("0.5")
    assert day.daily_wage == Decimal("112500")
    assert day.first_clock_in == at(9)
    assert day.last_clock_out == at(17)


def test_double_clock_in_fails_and_leaves_ledger_unchanged(container, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))

    with pytest.raises(InvalidTransitionError):
        ledger.record_clock_in(alice.employee_id, at(9, 5))

    assert container.events_repo.count_for_employee(alice.employee_id) == 1


def test_break_end_without_break_start_fails(container, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))

    with pytest.raises(InvalidTransitionError):
        ledger.record_break_end(alice.employee_id, at(10))


def test_break_requires_clock_in(container, alice, at):
    with pytest.raises(InvalidTransitionError):
        container.ledger_service.record_break_start(alice.employee_id, at(9))


def test_clock_out_while_on_break_fails(container, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))
    ledger.record_break_start(alice.employee_id, at(10))

    with pytest.raises(InvalidTransitionError):
        ledger.record_clock_out(alice.employee_id, at(11))


def test_repeated_cycles_sum_in_intervals_minus_breaks(container, alice, at):
    ledger = container.ledger_service
    eid = alice.employee_id

    # 08:00-10:00 with a 15 min break, 11:00-12:00, 13:00-15:00 with two 10 min breaks
    ledger.record_clock_in(eid, at(8))
    ledger.record_break_start(eid, at(9))
    ledger.record_break_end(eid, at(9, 15))
    ledger.record_clock_out(eid, at(10))
    ledger.record_clock_in(eid, at(11))
    ledger.record_clock_out(eid, at(12))
    ledger.record_clock_in(eid, at(13))
    ledger.record_break_start(eid, at(13, 30))
    ledger.record_break_end(eid, at(13, 40))
    ledger.record_break_start(eid, at(14))
    ledger.record_break_end(eid, at(14, 10))
    day = ledger.record_clock_out(eid, at(15))

    assert day.worked_duration == timedelta(hours=5) - timedelta(minutes=35)
    assert day.break_duration == timedelta(minutes=35)
    assert day.first_clock_in == at(8)
    assert day.last_clock_out == at(15)


def test_open_interval_counts_up_to_now(container, clock, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))

    clock.now = at(11, 30)
    status = ledger.current_status(alice.employee_id)

    assert status.state == ClockState.IN
    assert status.worked_duration == timedelta(hours=2, minutes=30)
    assert status.last_clock_out is None


def test_open_break_counts_up_to_now(container, clock, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))
    ledger.record_break_start(alice.employee_id, at(10))

    clock.now = at(10, 20)
    status = ledger.current_status(alice.employee_id)

    assert status.state == ClockState.IN_ON_BREAK
    assert status.worked_duration == timedelta(hours=1)
    assert status.break_duration == timedelta(minutes=20)


def test_toggles_follow_current_state(container, alice, at):
    ledger = container.ledger_service
    eid = alice.employee_id

    assert ledger.toggle_clock(eid, at(9)).state == ClockState.IN
    assert ledger.toggle_break(eid, at(10)).state == ClockState.IN_ON_BREAK
    with pytest.raises(InvalidTransitionError):
        ledger.toggle_clock(eid, at(10, 5))
    assert ledger.toggle_break(eid, at(10, 15)).state == ClockState.IN
    assert ledger.toggle_clock(eid, at(17)).state == ClockState.OUT
    with pytest.raises(InvalidTransitionError):
        ledger.toggle_break(eid, at(17, 5))

    kinds = [e.kind for e in ledger.events_for_day(eid, date(2026, 3, 2))]
    assert kinds == [EventKind.CLOCK_IN, EventKind.BREAK_START, EventKind.BREAK_END, EventKind.CLOCK_OUT]


def test_backdated_event_is_rejected(container, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))

    with pytest.raises(ValidationError):
        ledger.record_clock_out(alice.employee_id, at(8, 59))


def test_same_timestamp_events_keep_sequence_order(container, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(9))
    day = ledger.record_clock_out(alice.employee_id, at(9))

    assert day.state == ClockState.OUT
    assert day.worked_duration == timedelta(0)


def test_unknown_employee_raises_not_found(container, at):
    with pytest.raises(NotFoundError):
        container.ledger_service.record_clock_in("0000", at(9))
    with pytest.raises(NotFoundError):
        container.ledger_service.current_status("0000")


def test_inactive_employee_cannot_punch(container, alice, at):
    container.directory.deactivate(alice.employee_id)

    with pytest.raises(ValidationError):
        container.ledger_service.record_clock_in(alice.employee_id, at(9))
    assert container.events_repo.count_for_employee(alice.employee_id) == 0


def test_wage_uses_rate_at_computation_time(container, clock, alice, at):
    ledger = container.ledger_service
    clock.now = at(18)
    ledger.record_clock_in(alice.employee_id, at(9))
    ledger.record_clock_out(alice.employee_id, at(11))

    container.directory.update(alice.employee_id, hourly_wage=20000)
    day = ledger.day_status(alice.employee_id, date(2026, 3, 2))

    assert day.daily_wage == Decimal("40000")


def test_session_across_midnight_carries_into_next_day(container, clock, alice, at):
    ledger = container.ledger_service
    ledger.record_clock_in(alice.employee_id, at(22))

    clock.now = at(2, day=3)
    next_day = ledger.current_status(alice.employee_id)
    first_day = ledger.day_status(alice.employee_id, date(2026, 3, 2))

    assert next_day.state == ClockState.IN
    assert next_day.first_clock_in is None
    assert next_day.carried_in
    assert next_day.worked_duration == timedelta(hours=2)
    assert first_day.worked_duration == timedelta(hours=2)
    with pytest.raises(InvalidTransitionError):
        ledger.record_clock_in(alice.employee_id, at(2, day=3))


def test_day_boundaries_follow_configured_timezone():
    now = datetime(2026, 3, 2, 3, 0, tzinfo=timezone.utc)  # 12:00 in Seoul
    c = build_container(storage_backend="memory", timezone="Asia/Seoul", clock=lambda: now)
    e = c.directory.create(name="Kim", hourly_wage=10000)

    # 23:30 UTC on 1 March is 08:30 on 2 March in Seoul
    c.ledger_service.record_clock_in(e.employee_id, datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc))
    status = c.ledger_service.current_status(e.employee_id)

    assert status.day == date(2026, 3, 2)
    assert status.first_clock_in == datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)
    assert status.worked_duration == timedelta(hours=3, minutes=30)


def test_future_timestamp_is_rejected(container, clock, alice, at):
    ledger = container.ledger_service
    clock.now = at(8)

    with pytest.raises(ValidationError):
        ledger.record_clock_in(alice.employee_id, at(13))

    assert container.events_repo.count_for_employee(alice.employee_id) == 0
    status = ledger.record_clock_in(alice.employee_id)
    assert status.state == ClockState.IN
    assert ledger.current_status(alice.employee_id).state == ClockState.IN


def test_unknown_employee_does_not_register_a_lock(at):
    employees = InMemoryEmployeeRepository()
    events = InMemoryClockEventRepository()
    locks = EmployeeLockRegistry()
    ledger = ClockLedgerService(events, employees, locks=locks, tz="UTC", clock=lambda: at(23))
    directory = EmployeeDirectory(employees, events, locks=locks)

    with pytest.raises(NotFoundError):
        ledger.record_clock_in("zzzz", at(9))
    with pytest.raises(NotFoundError):
        ledger.toggle_break("9999")
    with pytest.raises(NotFoundError):
        directory.delete("8888")
    with pytest.raises(NotFoundError):
        directory.update("7777", name="Ghost")

    assert len(locks) == 0

    e = directory.create(name="Real", hourly_wage=1)
    ledger.record_clock_in(e.employee_id, at(9))
    assert len(locks) == 1
