"""Application constants.

Field rules and user-facing messages for talent records and skill queries.
"""

import re

# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------
NAME_MIN_LENGTH: int = 2
EXPERIENCE_MIN: int = 0
EXPERIENCE_MAX: int = 50

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
DIGIT_PATTERN = re.compile(r"\d")

# Letters, whitespace, hyphens and apostrophes only
SKILL_QUERY_PATTERN = re.compile(r"^[A-Za-z\s'-]+$")

SKILL_SEPARATOR: str = ","

# Field order used when flattening error mappings for the wire
FIELD_ORDER: tuple[str, ...] = ("name", "email", "skills", "experience")

# ---------------------------------------------------------------------------
# Validation messages
# ---------------------------------------------------------------------------
MSG_NAME_REQUIRED = "Name is required."
MSG_NAME_TOO_SHORT = f"Name must be at least {NAME_MIN_LENGTH} characters long."
MSG_NAME_HAS_DIGITS = "Name cannot contain numbers."
MSG_EMAIL_REQUIRED = "Email is required."
MSG_EMAIL_INVALID = "Please provide a valid email address."
MSG_SKILLS_REQUIRED = "At least one skill is required."
MSG_SKILLS_NOT_STRINGS = "All skills must be non-empty strings."
MSG_EXPERIENCE_REQUIRED = "Experience is required."
MSG_EXPERIENCE_NOT_INTEGER = "Experience must be a whole number."
MSG_EXPERIENCE_OUT_OF_RANGE = (
    f"Experience must be between {EXPERIENCE_MIN} and {EXPERIENCE_MAX} years."
)
MSG_QUERY_INVALID = (
    "Only letters, spaces, hyphens, and apostrophes are allowed in the filter."
)

# ---------------------------------------------------------------------------
# Response messages
# ---------------------------------------------------------------------------
MSG_TALENT_ADDED = "Talent added successfully"
MSG_VALIDATION_FAILED = "Validation failed"
MSG_DUPLICATE_EMAIL = "Email already exists"
MSG_DUPLICATE_EMAIL_ERROR = "Duplicate email"
MSG_ADD_FAILED = "Failed to add talent"
MSG_FETCH_FAILED = "Failed to fetch talents"
MSG_SERVER_ERROR = "Server Error"

# PostgreSQL unique_violation
PG_UNIQUE_VIOLATION: str = "23505"
