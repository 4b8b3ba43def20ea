"""
Pytest configuration and fixtures for settings vault tests.
"""
import os

import pytest

# Set environment before importing Settings so the global instance is predictable
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("SETTINGS_ENCRYPTION_KEY", "test-settings-encryption-key-not-for-production")
os.environ["SCRYPT_N"] = "1024"  # Low KDF cost keeps the suite fast

from settings_vault.config import Settings
from settings_vault.services.cipher_backends import ChaCha20Poly1305Backend
from settings_vault.services.encryption import EncryptionService
from settings_vault.services.key_material import KeyMaterialProvider, generate_master_key


# Scrypt cost used by service fixtures (production default is 2**14)
TEST_SCRYPT_N = 2 ** 10


@pytest.fixture
def test_settings() -> Settings:
    """
    Create test settings with a fresh master key.
    Loaded without the .env file so local developer config does not leak in.
    """
    return Settings(
        _env_file=None,
        SETTINGS_ENCRYPTION_KEY=generate_master_key(),
        ENVIRONMENT="test",
        SCRYPT_N=TEST_SCRYPT_N,
    )


@pytest.fixture
def master_key() -> str:
    """Freshly generated master key."""
    return generate_master_key()


@pytest.fixture
def key_provider(master_key: str) -> KeyMaterialProvider:
    """Key material provider holding a valid master key."""
    return KeyMaterialProvider(master_key=master_key, environment="test")


@pytest.fixture
def encryption_service(key_provider: KeyMaterialProvider) -> EncryptionService:
    """AES-GCM encryption service with a valid master key and low KDF cost."""
    return EncryptionService(key_provider, scrypt_n=TEST_SCRYPT_N)


@pytest.fixture
def chacha_encryption_service(key_provider: KeyMaterialProvider) -> EncryptionService:
    """ChaCha20-Poly1305 encryption service sharing the same master key."""
    return EncryptionService(
        key_provider,
        cipher_backend=ChaCha20Poly1305Backend(),
        scrypt_n=TEST_SCRYPT_N,
    )


@pytest.fixture
def unconfigured_service() -> EncryptionService:
    """Encryption service constructed without any master key."""
    return EncryptionService(
        KeyMaterialProvider(master_key=None, environment="development"),
        scrypt_n=TEST_SCRYPT_N,
    )


@pytest.fixture
def service_factory():
    """Factory building low-cost services for explicit master keys."""
    def _make(master_key, environment: str = "test", cipher_backend=None) -> EncryptionService:
        return EncryptionService(
            KeyMaterialProvider(master_key=master_key, environment=environment),
            cipher_backend=cipher_backend,
            scrypt_n=TEST_SCRYPT_N,
        )
    return _make
