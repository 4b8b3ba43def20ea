"""
Exceptions raised by the settings encryption services.

All failures propagate to the caller as exceptions - no operation returns a
sentinel value in place of plaintext or an envelope.
"""


class EncryptionError(Exception):
    """Base exception for settings encryption errors."""

    pass


class EncryptionValidationError(EncryptionError, ValueError):
    """Raised when plaintext handed to an encrypt call is missing or empty."""

    pass


class EncryptionConfigError(EncryptionError):
    """Raised when no usable master key is configured for an operation that needs one."""

    pass


class DecryptionError(EncryptionError):
    """
    Raised for every decryption failure.

    Tag mismatch, malformed encoding, wrong field sizes and a wrong master key
    all surface as this one error with a generic message, so callers cannot
    be used as a decryption oracle.
    """

    pass
