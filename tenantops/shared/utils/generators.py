"""ID, password and token generators."""

import hashlib
import secrets
import string
import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

PASSWORD_SPECIAL_CHARS = "!@#$%^&*-_=+"


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_identity_id() -> str:
    """Return a new UUID string for an identity-provider user."""
    return str(uuid.uuid4())


def generate_secure_password(length: int = 16) -> str:
    """Generate cryptographically secure password with guaranteed complexity.

    Ensures at least one lowercase, one uppercase, one digit, and one
    special character; remaining positions filled from full alphabet,
    then shuffled.
    """
    if length < 4:
        raise ValueError("Password length must be at least 4")
    alphabet = string.ascii_letters + string.digits + PASSWORD_SPECIAL_CHARS
    rng = secrets.SystemRandom()
    chars = [
        rng.choice(string.ascii_lowercase),
        rng.choice(string.ascii_uppercase),
        rng.choice(string.digits),
        rng.choice(PASSWORD_SPECIAL_CHARS),
    ]
    chars.extend(rng.choice(alphabet) for _ in range(length - len(chars)))
    rng.shuffle(chars)
    return "".join(chars)


def generate_link_token() -> str:
    """Return a new opaque, URL-safe token (32 random bytes)."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """SHA-256 hex digest of a token; only the digest is stored."""
    return hashlib.sha256(token.encode()).hexdigest()
