"""
AEAD cipher backends built on the cryptography package.

Both backends use 256-bit keys and 96-bit nonces and append a 128-bit
authentication tag to the ciphertext.

- AESGCMBackend: AES-256-GCM (default, hardware accelerated on most CPUs)
- ChaCha20Poly1305Backend: ChaCha20-Poly1305 (constant time without AES-NI)
"""

from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from settings_vault.services.cipher_backends.base import CipherBackend


class AESGCMBackend(CipherBackend):
    """AES-256-GCM authenticated encryption."""

    VERSION = "aesgcm-v1"

    def encrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        return AESGCM(key).encrypt(nonce, data, None)

    def decrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        return AESGCM(key).decrypt(nonce, data, None)

    def get_backend_version(self) -> str:
        """Return the backend version string."""
        return self.VERSION


class ChaCha20Poly1305Backend(CipherBackend):
    """ChaCha20-Poly1305 authenticated encryption."""

    VERSION = "chacha20-v1"

    def encrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        return ChaCha20Poly1305(key).encrypt(nonce, data, None)

    def decrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        return ChaCha20Poly1305(key).decrypt(nonce, data, None)

    def get_backend_version(self) -> str:
        """Return the backend version string."""
        return self.VERSION
