"""Pytest configuration and fixtures for Life Intelligence tests."""

from datetime import date, timedelta

import pytest

from lifeintel.db import create_db_engine
from lifeintel.store import InMemoryLogStore, SQLLogStore

START = date(2026, 1, 1)


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Point configuration at a throwaway SQLite file."""
    url = f"sqlite:///{tmp_path / 'lifeintel.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("INSIGHTS_ALIGN_BY_DATE", "true")
    return url


@pytest.fixture
def memory_store():
    return InMemoryLogStore()


@pytest.fixture
def sql_store():
    """SQL store on a private in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    yield SQLLogStore(engine)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run a test against every LogStore backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def days():
    """Consecutive ISO dates starting 2026-01-01."""

    def _days(n: int, start: date = START) -> list[str]:
        return [(start + timedelta(days=i)).isoformat() for i in range(n)]

    return _days


@pytest.fixture
def body_fields():
    def _body(day: str, **overrides):
        fields = {
            "date": day,
            "sleep_hours": 7.5,
            "sleep_quality": 4,
            "training_done": True,
            "training_type": "run",
            "energy_level": 4,
            "activity_level": 3,
        }
        fields.update(overrides)
        return fields

    return _body


@pytest.fixture
def mind_fields():
    def _mind(day: str, **overrides):
        fields = {
            "date": day,
            "mood": 4,
            "anxiety": 2,
            "stress": 2,
            "focus": 4,
            "journal": "steady day",
        }
        fields.update(overrides)
        return fields

    return _mind


@pytest.fixture
def finance_fields():
    def _finance(day: str, **overrides):
        fields = {
            "date": day,
            "income": 3000.0,
            "expenses": 1200.0,
            "debts": 600.0,
            "installments": 150.0,
        }
        fields.update(overrides)
        return fields

    return _finance
