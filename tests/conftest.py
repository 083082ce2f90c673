from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.timeclock.timeclock.container import build_container  # noqa: E402


class FakeClock:
    """Mutable 'now' so tests can move time forward between punches."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int = 0, second: int = 0) -> datetime:
        self.now = self.now.replace(hour=hour, minute=minute, second=second, microsecond=0)
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    # late evening, so punches during the working day are never in the future
    return datetime(2026, 3, 2, 23, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def container(clock):
    return build_container(storage_backend="memory", timezone="UTC", clock=clock)


@pytest.fixture
def at():
    """at(9, 30) -> 2026-03-02 09:30 UTC."""

    def _at(hour: int, minute: int = 0, *, day: int = 2) -> datetime:
        return datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)

    return _at
