"""Exception hierarchy for the talent directory.

Validation and matching return structured results for malformed input;
these exceptions cover the store boundary, the persistence gate and
state-machine misuse.
"""

from __future__ import annotations


class TalentDirectoryError(Exception):
    """Base class for all directory errors."""


class FieldValidationError(TalentDirectoryError):
    """One or more fields failed validation.

    ``errors`` maps field name to a human-readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(f"Invalid fields: {', '.join(sorted(self.errors))}")


class DuplicateEmailError(TalentDirectoryError):
    """A record with the same email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already exists: {email}")


class StoreFaultError(TalentDirectoryError):
    """Opaque failure in the directory store."""


class InvalidQueryError(TalentDirectoryError):
    """A skill query contains characters outside the allowed class."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Invalid skill query: {query!r}")


class InvalidTransitionError(TalentDirectoryError):
    """A state machine was asked to move along an undefined edge."""
