"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv().
"""

from datetime import datetime, timedelta, timezone

import pytest

from utm_builder.infrastructure.storage.memory import InMemoryStorage
from utm_builder.services.history import HistoryRepository


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def utc_clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def seconds_clock():
    return FakeClock(1_700_000_000.0)


@pytest.fixture
def repository(storage, utc_clock):
    repo = HistoryRepository(storage, storage_key="test.history", clock=utc_clock)
    repo.load()
    return repo


@pytest.fixture
def one_minute():
    return timedelta(minutes=1)
