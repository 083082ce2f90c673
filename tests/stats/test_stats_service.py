from datetime import date

from src.timeclock.timeclock.core.enums import ClockState


def test_counts_follow_ledger(container, clock, at):
    d = container.directory
    ledger = container.ledger_service
    a = d.create(name="A", hourly_wage=1, pin="1001")
    b = d.create(name="B", hourly_wage=1, pin="1002")
    d.create(name="C", hourly_wage=1, pin="1003")
    d.create(name="Gone", hourly_wage=1, pin="1004", active=False)

    ledger.record_clock_in(a.employee_id, at(9))
    ledger.record_clock_in(b.employee_id, at(9))
    ledger.record_break_start(b.employee_id, at(10))
    clock.now = at(11)

    stats = container.stats_service.daily_stats()

    assert stats.day == date(2026, 3, 2)
    assert stats.total_employees == 3
    assert stats.clocked_in == 2
    assert stats.on_break == 1
    assert stats.clocked_out == 1


def test_clocked_in_plus_out_equals_total(container, clock, at):
    d = container.directory
    ledger = container.ledger_service
    ids = [d.create(name=f"E{i}", hourly_wage=1, pin=f"200{i}").employee_id for i in range(5)]
    ledger.record_clock_in(ids[0], at(9))
    ledger.record_clock_in(ids[1], at(9))
    ledger.record_clock_out(ids[1], at(10))
    ledger.record_clock_in(ids[2], at(9))
    ledger.record_break_start(ids[2], at(9, 30))
    clock.now = at(12)

    stats = container.stats_service.daily_stats()
    states = [ledger.current_status(i).state for i in ids]

    assert stats.clocked_in + states.count(ClockState.OUT) == stats.total_employees
    assert stats.on_break <= stats.clocked_in


def test_empty_directory(container):
    stats = container.stats_service.daily_stats()

    assert (stats.total_employees, stats.clocked_in, stats.on_break) == (0, 0, 0)
