"""Tenant slug sanitization and validation.

sanitize_slug is total and idempotent; validate_slug sanitizes first and
then enforces length, charset and the reserved-word denylist.
"""

import re
from typing import Final

from tenantops.domain.exceptions import InvalidSlugException

SLUG_MIN_LENGTH: Final = 3
SLUG_MAX_LENGTH: Final = 50

SLUG_PATTERN: Final = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Paths and subdomains the platform uses itself.
RESERVED_SLUGS: Final = frozenset(
    {
        "admin",
        "api",
        "auth",
        "login",
        "logout",
        "register",
        "signup",
        "signin",
        "dashboard",
        "settings",
        "billing",
        "docs",
        "help",
        "support",
        "public",
        "static",
        "assets",
        "app",
        "www",
        "mail",
        "cdn",
        "images",
        "files",
    }
)

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def _normalize(value: str) -> str:
    """Lowercase, collapse non-slug runs to one hyphen, strip edge hyphens. No length cap."""
    candidate = _NON_SLUG_RUN.sub("-", value.strip().lower())
    return candidate.strip("-")


def sanitize_slug(value: str | None) -> str:
    """Return a URL-safe slug candidate for any input.

    "Demo Bistro!!" -> "demo-bistro". Never raises; may return "".
    Applying it twice gives the same result as applying it once.
    """
    if not value:
        return ""
    return _normalize(value)[:SLUG_MAX_LENGTH].rstrip("-")


def is_reserved_slug(value: str) -> bool:
    """True when the slug (after sanitization) is on the reserved denylist."""
    return sanitize_slug(value) in RESERVED_SLUGS


def validate_slug(value: str | None) -> str:
    """Sanitize then validate a slug; return the accepted slug.

    Raises:
        InvalidSlugException: rule is too_short, too_long, bad_charset or reserved.
    """
    candidate = _normalize(value or "")
    if len(candidate) > SLUG_MAX_LENGTH:
        raise InvalidSlugException(
            candidate[:SLUG_MAX_LENGTH].rstrip("-"),
            "too_long",
            f"Slug must be at most {SLUG_MAX_LENGTH} characters",
        )
    if len(candidate) < SLUG_MIN_LENGTH:
        raise InvalidSlugException(
            candidate,
            "too_short",
            f"Slug must be at least {SLUG_MIN_LENGTH} characters",
        )
    if not SLUG_PATTERN.match(candidate):
        raise InvalidSlugException(
            candidate,
            "bad_charset",
            "Slug may only contain lowercase letters, digits and single hyphens",
        )
    if candidate in RESERVED_SLUGS:
        raise InvalidSlugException(
            candidate,
            "reserved",
            f"Slug '{candidate}' is reserved",
        )
    return candidate
