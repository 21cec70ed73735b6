"""Enum types for the submission and search state machines."""

from enum import Enum


class SubmissionState(str, Enum):
    """Lifecycle of one submission attempt."""
    idle = "idle"
    validating = "validating"
    invalid = "invalid"
    normalizing = "normalizing"
    persisting = "persisting"
    persisted = "persisted"
    failed = "failed"


class SearchState(str, Enum):
    """Lifecycle of one search request."""
    idle = "idle"
    query_validating = "query_validating"
    invalid = "invalid"
    querying = "querying"
    completed = "completed"
