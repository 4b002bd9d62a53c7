"""Email address normalization and reserved-address checks."""

import re

# Addresses the platform generates for internal tenant accounts.
_SYSTEM_EMAIL_PATTERN = re.compile(r"^tenant-[^@]*@([a-z0-9-]+\.)*system\.local$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str | None) -> str:
    """Trim and lowercase an email address ("" for None)."""
    return (value or "").strip().lower()


def is_valid_email(value: str) -> bool:
    """Cheap shape check on a normalized address (full validation happens in schemas)."""
    return bool(_EMAIL_PATTERN.match(value))


def is_system_email(value: str) -> bool:
    """True for generated internal addresses such as tenant-<id>@system.local."""
    return bool(_SYSTEM_EMAIL_PATTERN.match(normalize_email(value)))
