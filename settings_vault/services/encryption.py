"""
Encryption service for sensitive settings (API keys, serialized preferences).

Every value is protected independently:
- A fresh random salt and nonce are generated per encryption
- A 256-bit key is derived from the master key and the salt with scrypt
- The value is encrypted with an AEAD cipher (AES-256-GCM by default)
- The result is a self-contained envelope: {encrypted, salt, iv} as base64

This ensures:
- Identical plaintexts produce unlinkable envelopes
- Tampering is detected by the authentication tag
- Offline brute force against the master key is expensive (memory-hard KDF)

Usage:
    service = create_encryption_service()

    envelope = await service.encrypt_api_key("sk-...")
    # Store envelope.model_dump() verbatim
    api_key = await service.decrypt_api_key(envelope)

Security Note:
    Never log plaintext, derived keys or ciphertext values. Decryption
    failures are reported with one generic message; the underlying cause is
    only logged at debug level.
"""

import asyncio
import base64
import binascii
import os
from collections.abc import Mapping
from typing import NoReturn, Optional, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from pydantic import ValidationError

from settings_vault.config import Settings
from settings_vault.schemas.encryption import (
    EncryptionEnvelope,
    PayloadClass,
    ValidationReport,
)
from settings_vault.services.cipher_backends import CipherBackend, get_cipher_backend
from settings_vault.services.cipher_backends.aead import AESGCMBackend
from settings_vault.services.exceptions import (
    DecryptionError,
    EncryptionConfigError,
    EncryptionError,
    EncryptionValidationError,
)
from settings_vault.services.key_material import KeyMaterialProvider
from settings_vault.utils.logger import get_logger

logger = get_logger("encryption.settings")

# Constants
SALT_LENGTH = 16  # 128-bit scrypt salt
DEFAULT_SCRYPT_N = 2 ** 14
DEFAULT_SCRYPT_R = 8
DEFAULT_SCRYPT_P = 1

EnvelopeInput = Union[EncryptionEnvelope, Mapping]

__all__ = [
    "EncryptionService",
    "EncryptionError",
    "EncryptionValidationError",
    "EncryptionConfigError",
    "DecryptionError",
    "create_encryption_service",
]


class EncryptionService:
    """
    Password-derived-key authenticated encryption for settings values.

    Stateless across calls: the only shared state is the read-only master key
    held by the key material provider. Each call derives its own key from a
    fresh salt, so concurrent calls need no coordination.

    Public operations are async; key derivation runs in a worker thread so an
    event loop serving requests is not blocked. encrypt_sync/decrypt_sync are
    available for synchronous callers.

    Thread Safety:
        This service is thread-safe.

    Example:
        >>> provider = KeyMaterialProvider(master_key=generate_master_key())
        >>> service = EncryptionService(provider)
        >>> envelope = await service.encrypt_setting('{"theme": "dark"}')
        >>> await service.decrypt_setting(envelope)
        '{"theme": "dark"}'
    """

    def __init__(
        self,
        key_provider: KeyMaterialProvider,
        cipher_backend: Optional[CipherBackend] = None,
        scrypt_n: int = DEFAULT_SCRYPT_N,
        scrypt_r: int = DEFAULT_SCRYPT_R,
        scrypt_p: int = DEFAULT_SCRYPT_P,
    ):
        """
        Initialize with a key material provider.

        Never fails because the master key is missing - that is reported by
        the operations that need it.

        Args:
            key_provider: Source of the master key
            cipher_backend: AEAD backend (defaults to AES-256-GCM)
            scrypt_n: scrypt CPU/memory cost (power of two, > 1)
            scrypt_r: scrypt block size
            scrypt_p: scrypt parallelization

        Raises:
            ValueError: If the scrypt parameters are invalid
        """
        if scrypt_n < 2 or scrypt_n & (scrypt_n - 1) != 0:
            raise ValueError("scrypt_n must be a power of two greater than 1")
        if scrypt_r < 1 or scrypt_p < 1:
            raise ValueError("scrypt_r and scrypt_p must be positive")

        self.key_provider = key_provider
        self.cipher_backend = cipher_backend or AESGCMBackend()
        self._scrypt_n = scrypt_n
        self._scrypt_r = scrypt_r
        self._scrypt_p = scrypt_p

        logger.info(
            "EncryptionService initialized",
            cipher=self.cipher_backend.get_backend_version(),
            scrypt_n=scrypt_n,
            key_configured=key_provider.has_master_key(),
        )

    # =========================================================================
    # Key derivation
    # =========================================================================

    def _derive_key(self, master_key: bytes, salt: bytes) -> bytes:
        """
        Derive a per-envelope key from the master key and salt.

        Uses scrypt (memory-hard) so guessing a weak master key offline costs
        memory as well as CPU. Recomputed on every call, never cached.

        Args:
            master_key: Master key bytes
            salt: Envelope salt

        Returns:
            Key of the cipher backend's KEY_LENGTH
        """
        kdf = Scrypt(
            salt=salt,
            length=self.cipher_backend.KEY_LENGTH,
            n=self._scrypt_n,
            r=self._scrypt_r,
            p=self._scrypt_p,
        )
        return kdf.derive(master_key)

    # =========================================================================
    # Synchronous core
    # =========================================================================

    def encrypt_sync(
        self,
        payload_class: Union[PayloadClass, str],
        plaintext: Optional[str],
    ) -> EncryptionEnvelope:
        """
        Encrypt a value into a fresh envelope.

        Args:
            payload_class: PayloadClass (or its value, e.g. "api_key")
            plaintext: Non-empty text to protect

        Returns:
            EncryptionEnvelope with base64 encrypted, salt and iv

        Raises:
            EncryptionValidationError: If plaintext is None, not text or empty
            EncryptionConfigError: If no master key is configured
            EncryptionError: If the cipher fails unexpectedly
        """
        payload_class = PayloadClass(payload_class)

        if not isinstance(plaintext, str) or not plaintext:
            raise EncryptionValidationError(
                f"Invalid {payload_class.label} for encryption: "
                "value must be a non-empty string"
            )

        master_key = self.key_provider.get_master_key()

        try:
            salt = os.urandom(SALT_LENGTH)
            nonce = os.urandom(self.cipher_backend.NONCE_LENGTH)
            key = self._derive_key(master_key, salt)
            ciphertext = self.cipher_backend.encrypt(key, nonce, plaintext.encode("utf-8"))
        except Exception as e:
            logger.error(
                "Failed to encrypt value",
                payload_class=payload_class.value,
                error=type(e).__name__,
            )
            raise EncryptionError(f"{payload_class.label} encryption failed: {e}") from e

        logger.debug("Value encrypted", payload_class=payload_class.value)

        return EncryptionEnvelope(
            encrypted=_b64encode(ciphertext),
            salt=_b64encode(salt),
            iv=_b64encode(nonce),
        )

    def decrypt_sync(
        self,
        payload_class: Union[PayloadClass, str],
        envelope: EnvelopeInput,
    ) -> str:
        """
        Decrypt an envelope produced by encrypt_sync().

        Args:
            payload_class: PayloadClass (or its value, e.g. "setting")
            envelope: EncryptionEnvelope or a mapping with encrypted/salt/iv

        Returns:
            Original plaintext

        Raises:
            EncryptionConfigError: If no master key is configured
            DecryptionError: For any other failure (tampering, malformed
                fields, wrong master key) - always the same generic message
        """
        payload_class = PayloadClass(payload_class)
        master_key = self.key_provider.get_master_key()

        try:
            salt, nonce, ciphertext = self._parse_envelope(envelope)
        except (ValidationError, ValueError, TypeError) as e:
            # Malformed envelopes still pay for one key derivation so they
            # take as long to reject as forged ones
            self._derive_key(master_key, bytes(SALT_LENGTH))
            self._raise_decryption_error(payload_class, e)

        try:
            key = self._derive_key(master_key, salt)
            plaintext = self.cipher_backend.decrypt(key, nonce, ciphertext)
            return plaintext.decode("utf-8")
        except (InvalidTag, ValueError) as e:
            # InvalidTag: tampered data or wrong master key
            # ValueError: plaintext is not UTF-8
            self._raise_decryption_error(payload_class, e)

    def _parse_envelope(self, envelope: EnvelopeInput) -> Tuple[bytes, bytes, bytes]:
        """
        Decode and size-check envelope fields.

        Returns:
            (salt, nonce, ciphertext)

        Raises:
            ValidationError, ValueError, TypeError: If the envelope is malformed
        """
        parsed = _coerce_envelope(envelope)
        salt = _b64decode(parsed.salt)
        nonce = _b64decode(parsed.iv)
        ciphertext = _b64decode(parsed.encrypted)

        if len(salt) != SALT_LENGTH:
            raise ValueError(f"salt must be {SALT_LENGTH} bytes, got {len(salt)}")
        if len(nonce) != self.cipher_backend.NONCE_LENGTH:
            raise ValueError(
                f"iv must be {self.cipher_backend.NONCE_LENGTH} bytes, got {len(nonce)}"
            )
        if len(ciphertext) <= self.cipher_backend.TAG_LENGTH:
            raise ValueError(f"ciphertext too short: {len(ciphertext)} bytes")

        return salt, nonce, ciphertext

    @staticmethod
    def _raise_decryption_error(payload_class: PayloadClass, cause: Exception) -> NoReturn:
        """Log the concrete cause at debug level and raise the generic error."""
        logger.debug(
            "Decryption failed",
            payload_class=payload_class.value,
            cause=type(cause).__name__,
        )
        raise DecryptionError(f"{payload_class.label} decryption failed") from None

    # =========================================================================
    # Async API
    # =========================================================================

    async def encrypt(
        self,
        payload_class: Union[PayloadClass, str],
        plaintext: Optional[str],
    ) -> EncryptionEnvelope:
        """Encrypt a value of the given class. See encrypt_sync()."""
        return await asyncio.to_thread(self.encrypt_sync, payload_class, plaintext)

    async def decrypt(
        self,
        payload_class: Union[PayloadClass, str],
        envelope: EnvelopeInput,
    ) -> str:
        """Decrypt an envelope of the given class. See decrypt_sync()."""
        return await asyncio.to_thread(self.decrypt_sync, payload_class, envelope)

    async def encrypt_api_key(self, api_key: Optional[str]) -> EncryptionEnvelope:
        """
        Encrypt an API key for storage.

        Example:
            >>> envelope = await service.encrypt_api_key("sk-ant-...")
            >>> user_settings.anthropic_key = envelope.model_dump()
        """
        return await self.encrypt(PayloadClass.API_KEY, api_key)

    async def decrypt_api_key(self, envelope: EnvelopeInput) -> str:
        """Decrypt a stored API key envelope."""
        return await self.decrypt(PayloadClass.API_KEY, envelope)

    async def encrypt_setting(self, value: Optional[str]) -> EncryptionEnvelope:
        """Encrypt a settings value (plain text or serialized JSON)."""
        return await self.encrypt(PayloadClass.SETTING, value)

    async def decrypt_setting(self, envelope: EnvelopeInput) -> str:
        """Decrypt a stored settings value envelope."""
        return await self.decrypt(PayloadClass.SETTING, envelope)

    async def validate_environment(self) -> ValidationReport:
        """Report whether the deployment has a usable master key."""
        return self.key_provider.validate_environment()

    async def generate_master_key(self) -> str:
        """Generate a candidate master key. The active key is unchanged."""
        return self.key_provider.generate_master_key()

    async def verify_encryption(self, plaintext: str = "settings-vault-check") -> bool:
        """
        Verify encryption/decryption works with the current configuration.

        Useful for startup checks and debugging configuration.

        Returns:
            True if a round trip reproduces the input
        """
        try:
            envelope = await self.encrypt(PayloadClass.SETTING, plaintext)
            return await self.decrypt(PayloadClass.SETTING, envelope) == plaintext
        except EncryptionError as e:
            logger.error("Encryption verification failed", error=str(e))
            return False

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"cipher={self.cipher_backend.get_backend_version()} "
            f"provider={self.key_provider!r}>"
        )


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: str) -> bytes:
    """Strict base64 decoding; raises ValueError on malformed input."""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError("invalid base64 field") from e


def _coerce_envelope(envelope: EnvelopeInput) -> EncryptionEnvelope:
    if isinstance(envelope, EncryptionEnvelope):
        return envelope
    if not isinstance(envelope, Mapping):
        raise TypeError("envelope must be an EncryptionEnvelope or a mapping")
    return EncryptionEnvelope.model_validate(dict(envelope))


# =============================================================================
# Factory Function
# =============================================================================


def create_encryption_service(settings: Optional[Settings] = None) -> EncryptionService:
    """
    Factory function to create the settings encryption service.

    Args:
        settings: Settings to build from (defaults to the global settings)

    Returns:
        Configured EncryptionService

    Raises:
        ValueError: If ENCRYPTION_CIPHER or the scrypt parameters are not supported

    Example:
        >>> service = create_encryption_service()
    """
    if settings is None:
        from settings_vault.config import settings

    return EncryptionService(
        key_provider=KeyMaterialProvider.from_settings(settings),
        cipher_backend=get_cipher_backend(settings.ENCRYPTION_CIPHER),
        scrypt_n=settings.SCRYPT_N,
        scrypt_r=settings.SCRYPT_R,
        scrypt_p=settings.SCRYPT_P,
    )
