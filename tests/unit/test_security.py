"""
Unit tests for hashing, secret generation and masking utilities.
"""
import pytest
from settings_vault.utils.security import (
    generate_secure_secret,
    hash_value,
    mask_sensitive_value,
    verify_hash,
)


def test_hash_value_creates_hash():
    """Test that hash_value returns a bcrypt hash."""
    value = "sk-ant-secret-value"
    hashed = hash_value(value)

    # Bcrypt hashes start with $2b$ and are 60 characters
    assert hashed.startswith("$2b$")
    assert len(hashed) == 60
    assert hashed != value


def test_hash_value_different_hashes_for_same_value():
    """Test that hashing the same value twice produces different hashes (due to salt)."""
    value = "sk-ant-secret-value"
    hash1 = hash_value(value)
    hash2 = hash_value(value)

    assert hash1 != hash2

    # But both should verify correctly
    assert verify_hash(value, hash1)
    assert verify_hash(value, hash2)


def test_verify_hash_incorrect_value():
    """Test that verify_hash returns False for a different value."""
    hashed = hash_value("sk-correct")

    assert verify_hash("sk-wrong", hashed) is False


@pytest.mark.parametrize("hashed", ["", "not-a-bcrypt-hash", "salt:hash"])
def test_verify_hash_malformed_hash(hashed):
    """Test that malformed stored hashes never verify."""
    assert verify_hash("sk-value", hashed) is False


def test_verify_hash_empty_value():
    """Test that an empty value never verifies."""
    assert verify_hash("", hash_value("x")) is False


def test_hash_value_long_api_key():
    """Test that values longer than bcrypt's 72-byte input limit hash and verify."""
    api_key = "sk-ant-api03-" + "A" * 95
    hashed = hash_value(api_key)

    assert verify_hash(api_key, hashed) is True


def test_verify_hash_detects_difference_after_72_bytes():
    """Test that values sharing their first 72 bytes do not verify as each other."""
    hashed = hash_value("x" * 72 + "one")

    assert verify_hash("x" * 72 + "one", hashed) is True
    assert verify_hash("x" * 72 + "two", hashed) is False


def test_generate_secure_secret_is_unique_and_urlsafe():
    """Test secure secret generation."""
    secret1 = generate_secure_secret()
    secret2 = generate_secure_secret()

    assert secret1 != secret2
    assert len(secret1) >= 43  # 32 bytes of URL-safe base64
    assert all(c.isalnum() or c in "-_" for c in secret1)


def test_generate_secure_secret_length():
    """Longer secrets for signing keys."""
    assert len(generate_secure_secret(64)) > len(generate_secure_secret(16))


def test_mask_sensitive_value():
    """Test masking keeps the first and last four characters."""
    masked = mask_sensitive_value("sk-ant-1234567890abcdef")

    assert masked.startswith("sk-a")
    assert masked.endswith("cdef")
    assert "1234567890" not in masked
    assert len(masked) == len("sk-ant-1234567890abcdef")


def test_mask_sensitive_value_minimum_bullets():
    """Test the masked middle is never shorter than eight bullets."""
    assert mask_sensitive_value("abcd12efgh") == "abcd" + "•" * 8 + "efgh"


@pytest.mark.parametrize("value", ["short", "12345678"])
def test_mask_short_values_hide_length(value):
    """Test short values are fully masked."""
    assert mask_sensitive_value(value) == "•" * 8


def test_mask_empty_value():
    assert mask_sensitive_value("") == ""


def test_mask_custom_visible_chars():
    assert mask_sensitive_value("sk-1234567890", visible_chars=2) == "sk" + "•" * 9 + "90"
