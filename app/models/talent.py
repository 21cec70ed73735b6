"""Pydantic models for the ``talents`` table and the talent endpoints.

``TalentInput`` carries raw, unvalidated client input.  ``TalentCreate`` is
the normalized payload handed to the store, and ``Talent`` is the
store-confirmed record with its generated ``id`` and ``created_at``.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.enums import SubmissionState


class TalentInput(BaseModel):
    """Raw submission payload.  Every field is optional and untyped."""
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    email: Any = None
    skills: Any = None
    experience: Any = None


class TalentCreate(BaseModel):
    """Normalized payload for inserting a talent."""
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    skills: list[str]
    experience: int


class Talent(BaseModel):
    """Full talent record returned from the store."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    name: str
    email: str
    skills: list[str]
    experience: int
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON shape used by the HTTP API."""
        return self.model_dump(mode="json", by_alias=True)


class SubmissionResult(BaseModel):
    """Outcome of a submission attempt.

    Exactly one of ``talent``, ``errors`` or ``message`` is meaningful,
    depending on ``state``.
    """
    state: SubmissionState
    talent: Talent | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    message: str | None = None
    duplicate: bool = False

    @property
    def ok(self) -> bool:
        return self.state is SubmissionState.persisted


class SearchResult(BaseModel):
    """Outcome of a search.  Searches never fail on bad input."""
    talents: list[Talent]
    applied_filter: str = ""
    query_rejected: bool = False

    @property
    def count(self) -> int:
        return len(self.talents)
