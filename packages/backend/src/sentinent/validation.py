"""Input normalization shared by the services."""

import re

from sentinent.errors import ValidationError

_EMAIL_RE = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$", re.IGNORECASE)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up trimmed and lower-cased."""
    return email.strip().lower()


def is_email_valid(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


def require_email(email: str) -> str:
    """Normalize an email or raise ValidationError."""
    if not is_email_valid(email):
        raise ValidationError("Invalid email format")
    return normalize_email(email)


def require_text(value: str, field: str) -> str:
    """Trim and require a non-empty string."""
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field.capitalize()} cannot be empty")
    return trimmed
