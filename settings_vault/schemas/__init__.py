"""
Pydantic schemas shared by the encryption services and their callers.
"""
from settings_vault.schemas.encryption import (
    PayloadClass,
    EncryptionEnvelope,
    ValidationReport,
)

__all__ = [
    "PayloadClass",
    "EncryptionEnvelope",
    "ValidationReport",
]
