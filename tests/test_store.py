"""Unit tests for the directory store adapters and the store factory."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import pytest
from conftest import BASE_TIME, talent_row
from postgrest.exceptions import APIError
from pydantic import ValidationError

from app.core.errors import DuplicateEmailError, FieldValidationError, StoreFaultError
from app.db.store import InMemoryTalentStore, SupabaseTalentStore
from app.models.talent import TalentCreate


def _record(email: str = "grace@example.com", name: str = "Grace Hopper") -> TalentCreate:
    return TalentCreate(name=name, email=email, skills=["COBOL"], experience=30)


def _api_error(code: str) -> APIError:
    return APIError({"code": code, "message": "boom", "details": "", "hint": ""})


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class TestInMemoryTalentStore:
    def test_create_assigns_identity_and_timestamp(
        self, memory_store: InMemoryTalentStore
    ) -> None:
        talent = memory_store.create(_record())
        assert talent.id is not None
        assert talent.created_at == BASE_TIME
        assert talent.email == "grace@example.com"
        assert len(memory_store) == 1

    def test_duplicate_email_is_rejected(self, memory_store: InMemoryTalentStore) -> None:
        memory_store.create(_record())
        with pytest.raises(DuplicateEmailError):
            memory_store.create(_record(name="Someone Else"))
        assert len(memory_store) == 1

    def test_duplicate_check_ignores_case(self, memory_store: InMemoryTalentStore) -> None:
        memory_store.create(_record())
        with pytest.raises(DuplicateEmailError):
            memory_store.create(_record(email="GRACE@example.com"))

    def test_invalid_record_never_stored(self, memory_store: InMemoryTalentStore) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            memory_store.create(_record(name="Gr4ce"))
        assert "name" in exc_info.value.errors
        assert len(memory_store) == 0

    def test_find_all_newest_first(self, memory_store: InMemoryTalentStore) -> None:
        first = memory_store.create(_record("a@example.com"))
        second = memory_store.create(_record("b@example.com"))
        assert memory_store.find_all() == [second, first]

    def test_find_all_newest_first_with_equal_timestamps(self) -> None:
        store = InMemoryTalentStore(clock=lambda: BASE_TIME)
        first = store.create(_record("a@example.com"))
        second = store.create(_record("b@example.com"))
        assert store.find_all() == [second, first]

    def test_concurrent_duplicate_creates_admit_one(self) -> None:
        store = InMemoryTalentStore()
        outcomes: list[str] = []
        lock = threading.Lock()

        def _attempt() -> None:
            try:
                store.create(_record())
                result = "created"
            except DuplicateEmailError:
                result = "duplicate"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=_attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("created") == 1
        assert outcomes.count("duplicate") == 7
        assert len(store) == 1

    def test_records_are_immutable(self, memory_store: InMemoryTalentStore) -> None:
        talent = memory_store.create(_record())
        with pytest.raises(ValidationError):
            talent.created_at = BASE_TIME  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Supabase store
# ---------------------------------------------------------------------------

class TestSupabaseTalentStore:
    def test_create_inserts_normalized_payload(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        row = talent_row()
        table.execute.return_value = MagicMock(data=[row])

        talent = SupabaseTalentStore(client=client, table="talents").create(_record())

        client.table.assert_called_with("talents")
        table.insert.assert_called_once_with(
            {
                "name": "Grace Hopper",
                "email": "grace@example.com",
                "skills": ["COBOL"],
                "experience": 30,
            }
        )
        assert str(talent.id) == row["id"]
        assert talent.created_at.isoformat() == "2026-03-01T09:00:00+00:00"

    def test_unique_violation_maps_to_duplicate(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.side_effect = _api_error("23505")

        with pytest.raises(DuplicateEmailError) as exc_info:
            SupabaseTalentStore(client=client).create(_record())
        assert exc_info.value.email == "grace@example.com"

    def test_other_api_errors_map_to_store_fault(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.side_effect = _api_error("42P01")

        with pytest.raises(StoreFaultError):
            SupabaseTalentStore(client=client).create(_record())

    def test_transport_errors_map_to_store_fault(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.side_effect = ConnectionError("Connection refused")

        with pytest.raises(StoreFaultError):
            SupabaseTalentStore(client=client).create(_record())

    def test_empty_insert_response_is_a_fault(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.return_value = MagicMock(data=[])

        with pytest.raises(StoreFaultError):
            SupabaseTalentStore(client=client).create(_record())

    def test_invalid_record_is_not_sent(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client

        with pytest.raises(FieldValidationError):
            SupabaseTalentStore(client=client).create(_record(email="not-an-email"))
        table.insert.assert_not_called()

    def test_find_all_orders_by_created_at_desc(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.return_value = MagicMock(
            data=[
                talent_row(email="b@example.com", created_at="2026-03-02T09:00:00+00:00"),
                talent_row(email="a@example.com"),
            ]
        )

        talents = SupabaseTalentStore(client=client).find_all()

        table.select.assert_called_once_with("*")
        table.order.assert_called_once_with("created_at", desc=True)
        assert [t.email for t in talents] == ["b@example.com", "a@example.com"]

    def test_find_all_fault(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.side_effect = _api_error("08006")

        with pytest.raises(StoreFaultError):
            SupabaseTalentStore(client=client).find_all()

    def test_ping(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        store = SupabaseTalentStore(client=client)
        assert store.ping() is True

        table.execute.side_effect = ConnectionError("down")
        assert store.ping() is False

    def test_uses_singleton_client_when_none_given(self, mock_supabase_client) -> None:
        client, table = mock_supabase_client
        table.execute.return_value = MagicMock(data=[talent_row()])

        with patch("app.db.store.get_supabase", return_value=client) as mock_get:
            SupabaseTalentStore().find_all()
        mock_get.assert_called_once()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestGetTalentStore:
    def _reset(self) -> None:
        import app.db.store as store_mod

        store_mod._store = None

    def test_memory_backend(self) -> None:
        from app.core.config import settings
        from app.db.store import get_talent_store

        self._reset()
        with patch.object(settings, "STORE_BACKEND", "memory"):
            store = get_talent_store()
            assert isinstance(store, InMemoryTalentStore)
            assert get_talent_store() is store
        self._reset()

    def test_supabase_backend(self) -> None:
        from app.core.config import settings
        from app.db.store import get_talent_store

        self._reset()
        with patch.object(settings, "STORE_BACKEND", "Supabase"):
            assert isinstance(get_talent_store(), SupabaseTalentStore)
        self._reset()

    def test_unknown_backend(self) -> None:
        from app.core.config import settings
        from app.db.store import get_talent_store

        self._reset()
        with patch.object(settings, "STORE_BACKEND", "mongo"):
            with pytest.raises(ValueError, match="Unknown STORE_BACKEND"):
                get_talent_store()
        self._reset()
