from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

from src.timeclock.timeclock.core.enums import ClockState
from src.timeclock.timeclock.core.exceptions import InvalidTransitionError


def test_simultaneous_clock_in_appends_once(container, at):
    e = container.directory.create(name="A", hourly_wage=1)
    workers = 8
    barrier = Barrier(workers)

    def punch():
        barrier.wait()
        try:
            container.ledger_service.record_clock_in(e.employee_id, at(9))
            return True
        except InvalidTransitionError:
            return False

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda _: punch(), range(workers)))

    assert results.count(True) == 1
    assert container.events_repo.count_for_employee(e.employee_id) == 1


def test_simultaneous_toggles_alternate_state(container, clock, at):
    e = container.directory.create(name="A", hourly_wage=1)
    workers = 6
    barrier = Barrier(workers)

    def toggle():
        barrier.wait()
        container.ledger_service.toggle_clock(e.employee_id, at(9))

    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(lambda _: toggle(), range(workers)))

    clock.now = at(10)
    assert container.events_repo.count_for_employee(e.employee_id) == workers
    assert container.ledger_service.current_status(e.employee_id).state == ClockState.OUT
