from __future__ import annotations

from contextlib import contextmanager
from threading import Lock


class EmployeeLockRegistry:
    """One mutex per employee id.

    Callers confirm the employee exists before asking for its lock, so the
    registry only ever holds ids that were issued.

    Writers for the same employee are serialized; different employees never
    contend. Locks are created lazily and kept for the process lifetime.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: dict[str, Lock] = {}

    def lock_for(self, employee_id: str) -> Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = Lock()
                self._locks[employee_id] = lock
            return lock

    @contextmanager
    def hold(self, employee_id: str):
        lock = self.lock_for(employee_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
