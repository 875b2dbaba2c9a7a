# clubhouse/utils/validators.py
"""
Input validation for member supplied names and preferences.
"""

import re
from typing import Optional

from clubhouse.core.exceptions import ValidationError

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9 _-]{3,24}$")
ACCENT_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def clean_alias(raw: str) -> str:
    """
    Collapse whitespace and validate an alias.

    Allowed: 3-24 characters of letters, digits, space, underscore and
    hyphen after whitespace runs are collapsed to one space.

    Raises:
        ValidationError: If the cleaned alias is malformed
    """
    cleaned = re.sub(r"\s+", " ", raw.strip())
    if not ALIAS_PATTERN.match(cleaned):
        raise ValidationError(
            "Alias must be 3-24 chars and only use letters, numbers, spaces, _ or -.",
            field="alias",
        )
    return cleaned


def alias_key(alias: str) -> str:
    """Normalized Alias Index key: trimmed and case-folded."""
    return alias.strip().casefold()


def validate_accent_color(value: str) -> str:
    if not ACCENT_PATTERN.match(value):
        raise ValidationError(
            "Accent color must be a hex color like #7c3aed.", field="accentColor"
        )
    return value.lower()


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Trim; empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
