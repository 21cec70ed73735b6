"""Field-level validation for talent records and skill queries.

This module is the single source of truth for record rules.  The talents
router calls it for fast feedback and every store adapter calls
``ensure_valid`` before writing, so an invalid record can never be
persisted even if the entry check is bypassed.

``validate`` never raises for malformed input: missing keys, ``None`` and
wrong types all come back as entries in the error mapping.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.core.constants import (
    DIGIT_PATTERN,
    EMAIL_PATTERN,
    EXPERIENCE_MAX,
    EXPERIENCE_MIN,
    INTEGER_PATTERN,
    MSG_EMAIL_INVALID,
    MSG_EMAIL_REQUIRED,
    MSG_EXPERIENCE_NOT_INTEGER,
    MSG_EXPERIENCE_OUT_OF_RANGE,
    MSG_EXPERIENCE_REQUIRED,
    MSG_NAME_HAS_DIGITS,
    MSG_NAME_REQUIRED,
    MSG_NAME_TOO_SHORT,
    MSG_SKILLS_NOT_STRINGS,
    MSG_SKILLS_REQUIRED,
    NAME_MIN_LENGTH,
    SKILL_QUERY_PATTERN,
    SKILL_SEPARATOR,
)
from app.core.errors import FieldValidationError, InvalidQueryError


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def read_field(candidate_input: Any, name: str) -> Any:
    """Read *name* from a mapping or an attribute-style object."""
    if candidate_input is None:
        return None
    if isinstance(candidate_input, Mapping):
        return candidate_input.get(name)
    return getattr(candidate_input, name, None)


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return str(raw)


def split_skills(raw: Any) -> list[str]:
    """Turn raw skills input into a list of trimmed, non-empty tokens.

    Accepts a comma-separated string or a list/tuple of strings.  Non-string
    list items and any other type are dropped.
    """
    if isinstance(raw, str):
        pieces = raw.split(SKILL_SEPARATOR)
    elif isinstance(raw, (list, tuple)):
        pieces = [item for item in raw if isinstance(item, str)]
    else:
        return []
    return [piece.strip() for piece in pieces if piece.strip()]


def parse_experience(raw: Any) -> int | None:
    """Parse years of experience as an integer, or return ``None``.

    ``"3.5"``, ``3.5``, booleans and non-numeric text are not integers.
    Integral floats such as ``4.0`` are accepted.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        text = raw.strip()
        if INTEGER_PATTERN.match(text):
            try:
                return int(text)
            except ValueError:
                return None
    return None


# ---------------------------------------------------------------------------
# Per-field rules
# ---------------------------------------------------------------------------

def _check_name(raw: Any) -> str | None:
    name = _as_text(raw).strip()
    if not name:
        return MSG_NAME_REQUIRED
    if len(name) < NAME_MIN_LENGTH:
        return MSG_NAME_TOO_SHORT
    if DIGIT_PATTERN.search(name):
        return MSG_NAME_HAS_DIGITS
    return None


def _check_email(raw: Any) -> str | None:
    email = _as_text(raw).strip()
    if not email:
        return MSG_EMAIL_REQUIRED
    if not EMAIL_PATTERN.match(email):
        return MSG_EMAIL_INVALID
    return None


def _check_skills(raw: Any) -> str | None:
    if isinstance(raw, (list, tuple)) and any(not isinstance(item, str) for item in raw):
        return MSG_SKILLS_NOT_STRINGS
    if not split_skills(raw):
        return MSG_SKILLS_REQUIRED
    return None


def _too_many_digits(text: str) -> bool:
    """True for an integer string longer than any in-range value."""
    if not INTEGER_PATTERN.match(text):
        return False
    significant = text.lstrip("+-").lstrip("0")
    return len(significant) > len(str(EXPERIENCE_MAX))


def _check_experience(raw: Any) -> str | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return MSG_EXPERIENCE_REQUIRED
    if isinstance(raw, str) and _too_many_digits(raw.strip()):
        return MSG_EXPERIENCE_OUT_OF_RANGE
    years = parse_experience(raw)
    if years is None:
        return MSG_EXPERIENCE_NOT_INTEGER
    if not EXPERIENCE_MIN <= years <= EXPERIENCE_MAX:
        return MSG_EXPERIENCE_OUT_OF_RANGE
    return None


_RULES = (
    ("name", _check_name),
    ("email", _check_email),
    ("skills", _check_skills),
    ("experience", _check_experience),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate(candidate_input: Any) -> dict[str, str]:
    """Return a ``{field: message}`` mapping for every failing field.

    All fields are checked independently; an empty dict means the record is
    acceptable.  *candidate_input* may be a ``TalentInput``, a
    ``TalentCreate``, a plain mapping, or ``None``.
    """
    errors: dict[str, str] = {}
    for field_name, rule in _RULES:
        message = rule(read_field(candidate_input, field_name))
        if message is not None:
            errors[field_name] = message
    return errors


def ensure_valid(candidate_input: Any) -> None:
    """Raise ``FieldValidationError`` if *candidate_input* fails any rule."""
    errors = validate(candidate_input)
    if errors:
        raise FieldValidationError(errors)


def is_valid_skill_query(query: Any) -> bool:
    """Return True for a non-empty query made of letters, spaces, ``-`` and ``'``."""
    if not isinstance(query, str):
        return False
    trimmed = query.strip()
    return bool(trimmed) and SKILL_QUERY_PATTERN.match(trimmed) is not None


def require_valid_skill_query(query: Any) -> str:
    """Return the trimmed query, ``""`` for no filter.

    Raises ``InvalidQueryError`` when a non-empty query breaks the
    character-class rule.
    """
    if query is None:
        return ""
    if isinstance(query, str) and not query.strip():
        return ""
    if not is_valid_skill_query(query):
        raise InvalidQueryError(_as_text(query))
    return query.strip()
