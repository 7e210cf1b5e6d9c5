"""Input normalization and field rules for feature requests."""

import re
import unicodedata

# Control characters to remove (except newline, tab)
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Horizontal whitespace runs (newlines are kept in descriptions)
MULTI_SPACE_PATTERN = re.compile(r"[ \t]+")

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 5000
CATEGORY_MAX_LENGTH = 255


class FieldValidationError(ValueError):
    """Raised when a feature field fails validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def normalize_text(text: str | None) -> str | None:
    """
    Normalize free text:
    - Unicode NFC
    - control characters removed (newline and tab survive)
    - surrounding whitespace stripped

    Returns None for None.
    """
    if text is None:
        return None
    text = unicodedata.normalize("NFC", text)
    text = CONTROL_CHAR_PATTERN.sub("", text)
    return text.strip()


def normalize_single_line(text: str | None) -> str | None:
    """Normalize text for single-line fields (no newlines, collapsed spaces)."""
    if text is None:
        return None
    text = text.replace("\n", " ").replace("\r", " ")
    text = normalize_text(text)
    return MULTI_SPACE_PATTERN.sub(" ", text)


def blank_to_none(text: str | None) -> str | None:
    if text is None or not text.strip():
        return None
    return text


def validate_title(title: str | None) -> str:
    """Return the normalized title or raise FieldValidationError."""
    normalized = normalize_single_line(title)
    if not normalized:
        raise FieldValidationError("title", "Title is required")
    if len(normalized) < TITLE_MIN_LENGTH:
        raise FieldValidationError(
            "title", f"Title must be at least {TITLE_MIN_LENGTH} characters"
        )
    if len(normalized) > TITLE_MAX_LENGTH:
        raise FieldValidationError(
            "title", f"Title must be at most {TITLE_MAX_LENGTH} characters"
        )
    return normalized


def validate_description(description: str | None) -> str | None:
    normalized = blank_to_none(normalize_text(description))
    if normalized is not None and len(normalized) > DESCRIPTION_MAX_LENGTH:
        raise FieldValidationError(
            "description", f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return normalized


def validate_category(category: str | None) -> str | None:
    normalized = blank_to_none(normalize_single_line(category))
    if normalized is not None and len(normalized) > CATEGORY_MAX_LENGTH:
        raise FieldValidationError(
            "category", f"Category must be at most {CATEGORY_MAX_LENGTH} characters"
        )
    return normalized
