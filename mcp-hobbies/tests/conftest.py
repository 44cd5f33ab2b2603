import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool

# main.py builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("OPENAI_API_KEY", None)

from models import FrequencyType, Hobby, Log  # noqa: E402
from store import HobbyStore, init_db  # noqa: E402

NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, content=None, error=None):
        self.chat = SimpleNamespace(completions=FakeCompletions(content, error))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    init_db(engine)
    return engine


@pytest.fixture
def store(engine):
    return HobbyStore(engine)


@pytest.fixture
def fake_openai():
    return FakeOpenAI


@pytest.fixture
def make_log():
    counter = iter(range(1, 10_000))

    def _make(date, duration_minutes=30, rating=3, notes=""):
        return Log(
            id=f"log-{next(counter)}",
            date=date,
            duration_minutes=duration_minutes,
            notes=notes,
            rating=rating,
        )

    return _make


@pytest.fixture
def make_hobby(make_log):
    counter = iter(range(1, 10_000))

    def _make(
        logs=(),
        target_frequency=3,
        frequency_type=FrequencyType.weekly,
        name="Guitar practice",
        days_ago=(),
        duration_minutes=30,
    ):
        logs = list(logs) + [
            make_log(NOW - timedelta(days=d), duration_minutes=duration_minutes)
            for d in days_ago
        ]
        return Hobby(
            id=f"hobby-{next(counter)}",
            name=name,
            description="",
            target_frequency=target_frequency,
            frequency_type=frequency_type,
            logs=logs,
            created_at=NOW - timedelta(days=60),
        )

    return _make
