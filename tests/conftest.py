"""Shared test fixtures.

Provides an in-memory talent store with a deterministic clock, a FastAPI
``TestClient`` wired to that store, and helpers for mocking the Supabase
client chain.
"""

import os

os.environ.setdefault("STORE_BACKEND", "memory")

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.db.store import InMemoryTalentStore
from app.models.talent import Talent

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def ticking_clock(start: datetime = BASE_TIME) -> Callable[[], datetime]:
    """Return a clock that advances one minute per call."""
    ticks = count()
    return lambda: start + timedelta(minutes=next(ticks))


def make_talent(
    skills: list[str],
    minutes: int = 0,
    email: str | None = None,
    name: str = "Ada Lovelace",
) -> Talent:
    """Build a stored ``Talent`` created *minutes* after ``BASE_TIME``."""
    return Talent(
        id=uuid4(),
        name=name,
        email=email or f"user{uuid4().hex[:8]}@example.com",
        skills=skills,
        experience=5,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


def talent_row(**overrides: Any) -> dict[str, Any]:
    """Return a realistic ``talents`` row as Supabase would send it."""
    row = {
        "id": str(uuid4()),
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "skills": ["COBOL", "Compilers"],
        "experience": 30,
        "created_at": "2026-03-01T09:00:00+00:00",
    }
    row.update(overrides)
    return row


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining up to ``execute``."""
    m = MagicMock()
    for method in ("select", "insert", "order", "limit", "eq"):
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=[])
    return m


@pytest.fixture()
def valid_payload() -> dict[str, Any]:
    return {
        "name": "  Ada Lovelace ",
        "email": " Ada@Example.COM ",
        "skills": ["Python", " Analytical Engines ", "python"],
        "experience": 12,
    }


@pytest.fixture()
def memory_store() -> InMemoryTalentStore:
    return InMemoryTalentStore(clock=ticking_clock())


@pytest.fixture()
def mock_supabase_client() -> tuple[MagicMock, MagicMock]:
    """Return ``(client, table)`` where ``client.table(...)`` yields ``table``."""
    client = MagicMock()
    table = chainable_table_mock()
    client.table.return_value = table
    return client, table


@pytest.fixture()
def test_client(memory_store: InMemoryTalentStore) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by ``memory_store``."""
    from app.db.store import get_talent_store
    from app.main import app

    app.dependency_overrides[get_talent_store] = lambda: memory_store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
