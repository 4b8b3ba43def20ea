"""
Security utilities for one-way hashing, random secrets and display masking.
"""
import base64
import hashlib
import secrets

import bcrypt

MASK_CHAR = "•"  # bullet
MIN_MASK_LENGTH = 8


def _prehash(value: str) -> bytes:
    """
    Reduce a value to 44 bytes of base64 SHA-256 before bcrypt.

    bcrypt rejects (or truncates) input over 72 bytes, and API keys are longer.
    The base64 step keeps NUL bytes out of the bcrypt input.
    """
    return base64.b64encode(hashlib.sha256(value.encode('utf-8')).digest())


def hash_value(value: str) -> str:
    """
    Hash a secret value for non-reversible storage using bcrypt.

    Args:
        value: Plain text value of any length

    Returns:
        Hashed value string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_prehash(value), salt)
    return hashed.decode('utf-8')


def verify_hash(value: str, hashed_value: str) -> bool:
    """
    Verify a plain text value against a hash from hash_value().

    Args:
        value: Plain text value to verify
        hashed_value: Stored hash to compare against

    Returns:
        True if the value matches, False otherwise (including malformed hashes)
    """
    if not value or not hashed_value:
        return False
    try:
        return bcrypt.checkpw(_prehash(value), hashed_value.encode('utf-8'))
    except ValueError:
        return False


def generate_secure_secret(length: int = 32) -> str:
    """
    Generate a URL-safe random secret (e.g. a session signing secret).

    Args:
        length: Number of random bytes (the text is longer)

    Returns:
        URL-safe base64 text
    """
    return secrets.token_urlsafe(length)


def mask_sensitive_value(value: str, visible_chars: int = 4) -> str:
    """
    Mask a sensitive value for display, keeping the first and last characters.

    Short values are fully masked so their length is not revealed.

    Args:
        value: Value to mask
        visible_chars: Characters kept visible at each end

    Returns:
        Masked value, e.g. "sk-a••••••••7f3c"
    """
    if not value:
        return ""
    if visible_chars <= 0 or len(value) <= visible_chars * 2:
        return MASK_CHAR * MIN_MASK_LENGTH

    start = value[:visible_chars]
    end = value[-visible_chars:]
    middle = MASK_CHAR * max(MIN_MASK_LENGTH, len(value) - visible_chars * 2)
    return f"{start}{middle}{end}"
