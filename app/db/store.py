"""Directory store adapters.

``TalentStore`` is the contract the orchestration layer relies on:

* ``create`` either returns a ``Talent`` with a fresh ``id`` and
  ``created_at`` or raises, leaving nothing behind.  A colliding email raises
  ``DuplicateEmailError``; anything else raises ``StoreFaultError``.
* ``find_all`` returns every record, newest first.

Both adapters run ``ensure_valid`` before writing so the store never holds a
record that fails validation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol
from uuid import uuid4

from postgrest.exceptions import APIError
from supabase import Client

from app.core.config import settings
from app.core.constants import PG_UNIQUE_VIOLATION
from app.core.errors import DuplicateEmailError, StoreFaultError
from app.db.supabase import get_supabase
from app.models.talent import Talent, TalentCreate
from app.services.matching import newest_first
from app.services.validation import ensure_valid

logger = logging.getLogger(__name__)


class TalentStore(Protocol):
    def create(self, record: TalentCreate) -> Talent: ...

    def find_all(self) -> list[Talent]: ...

    def ping(self) -> bool: ...


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------

class SupabaseTalentStore:
    """Talents persisted in a Supabase table with a unique index on ``email``."""

    def __init__(self, client: Client | None = None, table: str | None = None) -> None:
        self._client = client
        self.table = table or settings.TALENTS_TABLE

    def _get_client(self) -> Client:
        return self._client if self._client is not None else get_supabase()

    def create(self, record: TalentCreate) -> Talent:
        ensure_valid(record)
        try:
            result = (
                self._get_client()
                .table(self.table)
                .insert(record.model_dump(mode="json"))
                .execute()
            )
        except APIError as exc:
            if exc.code == PG_UNIQUE_VIOLATION:
                logger.info("talent_create_duplicate", extra={"email": record.email})
                raise DuplicateEmailError(record.email) from exc
            logger.error(
                "talent_create_failed",
                extra={"table": self.table, "error_message": str(exc)},
            )
            raise StoreFaultError("Talent insert failed") from exc
        except StoreFaultError:
            raise
        except Exception as exc:
            logger.error(
                "talent_create_failed",
                extra={"table": self.table, "error_message": str(exc)},
            )
            raise StoreFaultError("Talent insert failed") from exc

        if not result.data:
            raise StoreFaultError("Talent insert returned no row")
        return Talent(**result.data[0])

    def find_all(self) -> list[Talent]:
        try:
            result = (
                self._get_client()
                .table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except StoreFaultError:
            raise
        except Exception as exc:
            logger.error(
                "talent_find_all_failed",
                extra={"table": self.table, "error_message": str(exc)},
            )
            raise StoreFaultError("Talent query failed") from exc
        return [Talent(**row) for row in result.data or []]

    def ping(self) -> bool:
        try:
            result = self._get_client().table(self.table).select("id").limit(1).execute()
        except Exception:
            logger.warning("Store ping: Supabase connection failed", exc_info=True)
            return False
        return result is not None


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryTalentStore:
    """Process-local store for development and tests.

    ``create`` holds a lock across the duplicate check and the append, so
    concurrent submissions with the same email cannot both succeed.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._records: list[Talent] = []
        self._emails: set[str] = set()

    def create(self, record: TalentCreate) -> Talent:
        ensure_valid(record)
        key = record.email.lower()
        with self._lock:
            if key in self._emails:
                raise DuplicateEmailError(record.email)
            talent = Talent(id=uuid4(), created_at=self._clock(), **record.model_dump())
            self._records.append(talent)
            self._emails.add(key)
        return talent

    def find_all(self) -> list[Talent]:
        with self._lock:
            snapshot = list(reversed(self._records))
        return newest_first(snapshot)

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._records)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

_store: TalentStore | None = None


def get_talent_store() -> TalentStore:
    """Return the process-wide store selected by ``settings.STORE_BACKEND``."""
    global _store
    if _store is None:
        backend = settings.STORE_BACKEND.lower()
        if backend == "memory":
            _store = InMemoryTalentStore()
        elif backend == "supabase":
            _store = SupabaseTalentStore()
        else:
            raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
        logger.info("talent_store_selected", extra={"backend": backend})
    return _store
