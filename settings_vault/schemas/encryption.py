"""
Pydantic schemas for settings encryption.

The envelope is the only persisted artifact: callers store its three text
fields verbatim (JSON column, key-value table, ...) and hand them back for
decryption.
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PayloadClass(str, Enum):
    """Kind of value being protected. The cryptography is identical for both."""
    API_KEY = "api_key"
    SETTING = "setting"

    @property
    def label(self) -> str:
        """Human-readable label used in log records and error messages."""
        return "API key" if self is PayloadClass.API_KEY else "Setting"


class EncryptionEnvelope(BaseModel):
    """Self-contained unit of protected data (all fields standard base64)."""
    encrypted: str = Field(description="Authenticated ciphertext (ciphertext || tag)")
    salt: str = Field(description="Random key-derivation salt")
    iv: str = Field(description="Random nonce for the authenticated cipher")

    model_config = {"frozen": True}


class ValidationReport(BaseModel):
    """Whether the current deployment configuration can support encryption."""
    valid: bool = Field(description="False when encryption cannot safely run in this deployment")
    warnings: List[str] = Field(
        default_factory=list,
        description="Ordered advisory messages (empty when fully configured)"
    )
