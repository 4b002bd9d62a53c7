"""Unit tests for generators (passwords, link tokens) and email helpers."""

import string

import pytest

from tenantops.shared.utils.email import is_system_email, is_valid_email, normalize_email
from tenantops.shared.utils.generators import (
    PASSWORD_SPECIAL_CHARS,
    generate_cuid,
    generate_link_token,
    generate_secure_password,
    hash_token,
)


def test_generate_secure_password_has_every_character_class() -> None:
    """Generated passwords contain lower, upper, digit and special characters."""
    for _ in range(50):
        password = generate_secure_password(16)
        assert len(password) == 16
        assert any(c in string.ascii_lowercase for c in password)
        assert any(c in string.ascii_uppercase for c in password)
        assert any(c in string.digits for c in password)
        assert any(c in PASSWORD_SPECIAL_CHARS for c in password)


def test_generate_secure_password_rejects_tiny_length() -> None:
    with pytest.raises(ValueError):
        generate_secure_password(3)


def test_link_tokens_are_unique_and_hash_is_stable() -> None:
    """Tokens are random; their hash is a deterministic 64-char hex digest."""
    first, second = generate_link_token(), generate_link_token()
    assert first != second
    assert len(first) >= 43
    assert hash_token(first) == hash_token(first)
    assert hash_token(first) != hash_token(second)
    assert len(hash_token(first)) == 64


def test_generate_cuid_returns_distinct_strings() -> None:
    assert generate_cuid() != generate_cuid()


def test_normalize_email_trims_and_lowercases() -> None:
    assert normalize_email("  Owner@Example.COM ") == "owner@example.com"
    assert normalize_email(None) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("tenant-abc@system.local", True),
        ("tenant-42@eu.system.local", True),
        ("TENANT-x@System.Local", True),
        ("owner@system.local", False),
        ("tenant-abc@example.com", False),
    ],
)
def test_is_system_email(value: str, expected: bool) -> None:
    """Only generated tenant-*@system.local style addresses are system emails."""
    assert is_system_email(value) is expected


def test_is_valid_email_shape() -> None:
    assert is_valid_email("a@b.co")
    assert not is_valid_email("no-at-sign")
    assert not is_valid_email("two@@signs.com")
