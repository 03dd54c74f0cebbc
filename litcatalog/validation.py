"""Caller input checks, applied before any search or database call."""
import re
from datetime import date
from typing import Optional

from litcatalog.errors import ValidationFailure

# Letters (any script), digits, spaces and basic punctuation
TITLE_PATTERN = re.compile(r"^[\w\s\-'.,!?;:()\[\]\"]{2,100}$")
# Letters (any script), spaces, hyphen, apostrophe, period, comma
AUTHOR_NAME_PATTERN = re.compile(r"^(?:[^\W\d_]|[\s\-'.,]){2,100}$")
LANGUAGE_PATTERN = re.compile(r"^[A-Za-z]{2}$")

MIN_YEAR = 1
YEAR_SLACK = 10


def validate_title(title: Optional[str]) -> str:
    """Return the trimmed title or raise ValidationFailure."""
    title = (title or "").strip()
    if not title:
        raise ValidationFailure("Title is required")
    if not TITLE_PATTERN.match(title):
        raise ValidationFailure(
            "Title must be 2-100 characters of letters, digits and basic punctuation"
        )
    return title


def validate_author_name(name: Optional[str]) -> str:
    """Return the trimmed author name or raise ValidationFailure."""
    name = (name or "").strip()
    if not name:
        raise ValidationFailure("Author name is required")
    if not AUTHOR_NAME_PATTERN.match(name):
        raise ValidationFailure(
            "Author name must be 2-100 characters of letters, spaces and - ' . ,"
        )
    return name


def validate_year(year, current_year: Optional[int] = None) -> int:
    """
    Check a year used for liveness queries.

    Args:
        year: int or numeric string
        current_year: Override for the current year (tests)

    Returns:
        The year as int
    """
    try:
        value = int(str(year).strip())
    except (TypeError, ValueError):
        raise ValidationFailure(f"Year must be a whole number, got {year!r}")

    upper = (current_year or date.today().year) + YEAR_SLACK
    if value < MIN_YEAR or value > upper:
        raise ValidationFailure(f"Year must be between {MIN_YEAR} and {upper}")
    return value


def validate_language(code: Optional[str]) -> str:
    """Return the 2-letter language code, lower-cased."""
    code = (code or "").strip()
    if not LANGUAGE_PATTERN.match(code):
        raise ValidationFailure(f"Language must be a 2-letter code (e.g. pt, en), got {code!r}")
    return code.lower()
