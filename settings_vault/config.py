"""
Configuration management using Pydantic Settings.
Loads configuration from environment variables and .env file.
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


# Deployment modes where a missing or weak master key makes the report invalid
PRODUCTION_ENVIRONMENTS = frozenset({"production", "staging"})


def is_production_environment(environment: str) -> bool:
    """True when the deployment mode is production-like (case-insensitive)."""
    return environment.strip().lower() in PRODUCTION_ENVIRONMENTS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Deployment Configuration
    ENVIRONMENT: str = "development"  # Options: development, test, staging, production
    LOG_LEVEL: str = "INFO"

    # Encryption Configuration
    # Master secret protecting all stored settings. Optional at startup -
    # operations that need it fail with a configuration error when unset.
    SETTINGS_ENCRYPTION_KEY: Optional[str] = None
    ENCRYPTION_CIPHER: str = "aesgcm"  # Options: aesgcm, chacha20
    MIN_MASTER_KEY_LENGTH: int = 32  # Shorter keys are reported as weak

    # Key Derivation Configuration (scrypt)
    SCRYPT_N: int = 2 ** 14  # CPU/memory cost, must be a power of two
    SCRYPT_R: int = 8  # Block size
    SCRYPT_P: int = 1  # Parallelization

    # Logging Configuration (Optional - per-module log levels)
    APP_LOG_LEVEL: Optional[str] = None
    CRYPTOGRAPHY_LOG_LEVEL: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """True when running in a production-like deployment mode."""
        return is_production_environment(self.ENVIRONMENT)

    @property
    def encryption_master_key(self) -> Optional[str]:
        """
        Master secret for settings encryption.
        Blank values are treated as not configured.
        """
        if self.SETTINGS_ENCRYPTION_KEY is None:
            return None
        key = self.SETTINGS_ENCRYPTION_KEY.strip()
        return key or None


# Global settings instance
settings = Settings()
