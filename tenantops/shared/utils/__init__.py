"""Shared utilities: datetime, generators, slug, email and sanitization helpers."""

from tenantops.shared.utils.datetime import ensure_utc, utc_now
from tenantops.shared.utils.email import is_system_email, normalize_email
from tenantops.shared.utils.generators import (
    generate_cuid,
    generate_identity_id,
    generate_link_token,
    generate_secure_password,
    hash_token,
)
from tenantops.shared.utils.slug import sanitize_slug, validate_slug

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "generate_identity_id",
    "generate_link_token",
    "generate_secure_password",
    "hash_token",
    "is_system_email",
    "normalize_email",
    "sanitize_slug",
    "utc_now",
    "validate_slug",
]
