# clubhouse/utils/slug.py
import re

from clubhouse.core.exceptions import ValidationError

SLUG_MAX_LENGTH = 64
TITLE_MIN_LENGTH = 3


def slugify_title(title: str) -> str:
    """
    Generate a URL-friendly slug from a blog post title.

    Lowercases, drops quote characters, turns every run of characters
    outside [a-z0-9] into one hyphen, trims hyphens at both ends and cuts the
    result to 64 characters. May return an empty string.
    """
    slug = title.strip().lower()

    # Quotes vanish rather than split words ("don't" -> "dont")
    slug = re.sub(r"['\"]", "", slug)

    # Replace spaces and special chars with hyphens
    slug = re.sub(r"[^a-z0-9]+", "-", slug)

    # Remove leading/trailing hyphens
    slug = slug.strip("-")

    return slug[:SLUG_MAX_LENGTH]


def validate_title(title: str) -> tuple[str, str]:
    """
    Check a post or event title and derive its slug.

    Returns:
        (trimmed title, slug)

    Raises:
        ValidationError: title shorter than 3 characters or slug empty
    """
    trimmed = title.strip()
    if len(trimmed) < TITLE_MIN_LENGTH:
        raise ValidationError("Title must be at least 3 characters.", field="title")

    slug = slugify_title(trimmed)
    if not slug:
        raise ValidationError(
            "Title produced an invalid slug. Try a different title.", field="title"
        )
    return trimmed, slug
