"""Canonical form of a validated talent submission.

Input is assumed to have passed ``validate``; nothing is re-checked here.
"""

from __future__ import annotations

from typing import Any

from app.models.talent import TalentCreate
from app.services.validation import parse_experience, read_field, split_skills


def dedupe_skills(skills: list[str]) -> list[str]:
    """Drop repeated skills, keeping the first spelling seen.

    Comparison is case-insensitive, so ``["React", "react"]`` keeps only
    ``"React"``.
    """
    seen: set[str] = set()
    unique: list[str] = []
    for skill in skills:
        key = skill.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(skill)
    return unique


def normalize(validated_input: Any) -> TalentCreate:
    """Return the ``TalentCreate`` payload for *validated_input*."""
    return TalentCreate(
        name=str(read_field(validated_input, "name")).strip(),
        email=str(read_field(validated_input, "email")).strip().lower(),
        skills=dedupe_skills(split_skills(read_field(validated_input, "skills"))),
        experience=parse_experience(read_field(validated_input, "experience")),
    )
