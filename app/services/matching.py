"""Skill matching over the talent directory.

A record matches when any of its skill tokens contains the query as a
case-insensitive substring, so ``"script"`` matches ``"JavaScript"``.
Stored skills keep their original casing; only the comparison folds case.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.models.talent import Talent


def newest_first(records: Iterable[Talent]) -> list[Talent]:
    """Return *records* ordered by descending ``created_at`` (stable)."""
    return sorted(records, key=lambda record: record.created_at, reverse=True)


def skill_matches(skills: Iterable[str], query: str) -> bool:
    """Return True if any token in *skills* contains *query*, ignoring case."""
    needle = query.strip().casefold()
    return any(needle in skill.casefold() for skill in skills)


def match_skill(records: Iterable[Talent], query: str | None) -> list[Talent]:
    """Return the records matching *query*, newest first.

    An empty or blank query selects every record.  The input is not mutated.
    """
    ordered = newest_first(records)
    if query is None or not query.strip():
        return ordered
    return [record for record in ordered if skill_matches(record.skills, query)]
