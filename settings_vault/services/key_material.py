"""
Key material provider for settings encryption.

Single source of truth for the master key protecting stored settings:
- Holds the configured master key (or its absence) for the process lifetime
- Reports whether the deployment can safely encrypt (validation report)
- Mints candidate master keys for operators to install

Construction never fails on a missing key. The absence only becomes fatal
when an operation actually needs the key.

Security Note:
    Never log key material. Only log whether a key is configured and its length.
"""

import base64
import secrets
from typing import Optional

from settings_vault.config import Settings, is_production_environment
from settings_vault.schemas.encryption import ValidationReport
from settings_vault.services.exceptions import EncryptionConfigError
from settings_vault.utils.logger import get_logger

logger = get_logger("encryption.key_material")

MASTER_KEY_ENV_VAR = "SETTINGS_ENCRYPTION_KEY"
GENERATED_KEY_BYTES = 32  # 256 bits of entropy


def generate_master_key() -> str:
    """
    Generate a random master key and return it as base64 text.

    This is a utility for operators: the returned value is a candidate for
    SETTINGS_ENCRYPTION_KEY and does not change the active key.

    Returns:
        Base64-encoded 32-byte key (44 characters)
    """
    return base64.b64encode(secrets.token_bytes(GENERATED_KEY_BYTES)).decode("ascii")


class KeyMaterialProvider:
    """
    Immutable holder for the process-wide master key.

    Thread Safety:
        This class is thread-safe. The key is read once at construction
        and never mutated; rotating it means constructing a new provider.

    Example:
        >>> provider = KeyMaterialProvider(master_key=settings.encryption_master_key)
        >>> report = provider.validate_environment()
        >>> if report.valid:
        ...     key_bytes = provider.get_master_key()
    """

    def __init__(
        self,
        master_key: Optional[str] = None,
        environment: str = "development",
        min_key_length: int = 32,
    ):
        """
        Initialize with the configured master key.

        Args:
            master_key: Master key text, or None when not configured
            environment: Deployment mode (production-like modes are strict)
            min_key_length: Keys shorter than this are reported as weak
        """
        if master_key is not None:
            master_key = master_key.strip() or None

        self._master_key = master_key
        self._environment = environment.strip().lower()
        self._min_key_length = min_key_length

        if master_key is None:
            logger.warning(
                "No settings encryption key configured",
                environment=self._environment,
            )
        else:
            logger.info(
                "KeyMaterialProvider initialized",
                environment=self._environment,
                key_length=len(master_key),
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "KeyMaterialProvider":
        """
        Create a provider from application settings.

        Args:
            settings: Loaded Settings instance

        Returns:
            KeyMaterialProvider bound to settings.encryption_master_key
        """
        return cls(
            master_key=settings.encryption_master_key,
            environment=settings.ENVIRONMENT,
            min_key_length=settings.MIN_MASTER_KEY_LENGTH,
        )

    @property
    def environment(self) -> str:
        return self._environment

    @property
    def is_production(self) -> bool:
        """True when running in a production-like deployment mode."""
        return is_production_environment(self._environment)

    def has_master_key(self) -> bool:
        """Return True if a master key is configured."""
        return self._master_key is not None

    def get_master_key(self) -> bytes:
        """
        Return the master key as key-derivation input.

        The configured text is used verbatim (UTF-8 encoded), so hex, base64
        and passphrase-style keys are all accepted.

        Returns:
            Master key bytes

        Raises:
            EncryptionConfigError: If no master key is configured
        """
        if self._master_key is None:
            raise EncryptionConfigError(
                f"{MASTER_KEY_ENV_VAR} is not configured - "
                "settings encryption is unavailable"
            )
        return self._master_key.encode("utf-8")

    def generate_master_key(self) -> str:
        """Generate a candidate master key. The active key is unchanged."""
        return generate_master_key()

    def validate_environment(self) -> ValidationReport:
        """
        Assess whether the configured master key supports encryption.

        Policy:
        - Missing key in a production-like mode: invalid
        - Missing key elsewhere: valid, with an advisory warning
          (encryption calls still fail - there is no fallback key)
        - Key shorter than min_key_length: warning, invalid in production

        Returns:
            ValidationReport with validity flag and ordered warnings
        """
        warnings = []
        valid = True

        if self._master_key is None:
            if self.is_production:
                warnings.append(
                    f"{MASTER_KEY_ENV_VAR} not set in {self._environment} environment"
                )
                valid = False
            else:
                warnings.append(
                    f"{MASTER_KEY_ENV_VAR} not set - settings encryption will fail "
                    f"until a key is configured ({self._environment} mode)"
                )
        elif len(self._master_key) < self._min_key_length:
            warnings.append(
                f"{MASTER_KEY_ENV_VAR} is shorter than {self._min_key_length} "
                "characters - generate a stronger key"
            )
            if self.is_production:
                valid = False

        if warnings:
            logger.warning(
                "Encryption environment validation reported issues",
                valid=valid,
                warning_count=len(warnings),
            )

        return ValidationReport(valid=valid, warnings=warnings)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} environment={self._environment} "
            f"configured={self.has_master_key()}>"
        )
