"""Shared fixtures: in-memory storage, a recording audit logger, fixed clocks."""

from datetime import datetime

import pytest

from src.audit import AuditLogger
from src.services.storage import InMemoryStorage, StorageWriteError
from src.stores import ExpenseStore, MonotonicIdGenerator, ThemeStore


class FailingWriteStorage(InMemoryStorage):
    """Reads work, every write fails."""

    def set_item(self, key: str, value: str) -> None:
        raise StorageWriteError("disk full")


class TickingClock:
    """A clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def failing_storage():
    return FailingWriteStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def fixed_now():
    return lambda: datetime(2025, 3, 7, 21, 5, 2)


@pytest.fixture
def expense_store(storage, audit_logger, clock, fixed_now):
    return ExpenseStore(
        storage,
        audit_logger,
        id_generator=MonotonicIdGenerator(clock=clock),
        now=fixed_now,
    )


@pytest.fixture
def theme_store(storage, audit_logger):
    return ThemeStore(storage, audit_logger)
