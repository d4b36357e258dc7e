import uuid
from datetime import datetime, timedelta, timezone

import pytest

from scheduler.data.memory import InMemoryCardStore
from scheduler.domain.enums import IntervalUnit
from scheduler.domain.schedule import Schedule, ScheduleProfile


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def minute_schedule():
    return Schedule.from_profile(ScheduleProfile(unit=IntervalUnit.MINUTES, intervals=(1, 3, 5)))


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def memory_store():
    return InMemoryCardStore()


@pytest.fixture(params=["memory", "orm"])
def store(request):
    """Run the test against both card stores."""
    if request.param == "memory":
        return InMemoryCardStore()
    request.getfixturevalue("db")
    from scheduler.data.repos import OrmCardStore

    return OrmCardStore()
