"""
Cipher backends package.

Provides the authenticated cipher used by the settings encryption service.
Each backend implements the CipherBackend ABC.

Available backends:
- AESGCMBackend ("aesgcm"): AES-256-GCM
- ChaCha20Poly1305Backend ("chacha20"): ChaCha20-Poly1305
"""

from settings_vault.services.cipher_backends.base import CipherBackend
from settings_vault.services.cipher_backends.aead import (
    AESGCMBackend,
    ChaCha20Poly1305Backend,
)

_BACKENDS = {
    "aesgcm": AESGCMBackend,
    "chacha20": ChaCha20Poly1305Backend,
}


def get_cipher_backend(name: str) -> CipherBackend:
    """
    Resolve a cipher backend by its configuration name.

    Args:
        name: Backend name ("aesgcm" or "chacha20", case-insensitive)

    Returns:
        CipherBackend instance

    Raises:
        ValueError: If the backend is not supported
    """
    backend_cls = _BACKENDS.get(name.strip().lower())
    if backend_cls is None:
        raise ValueError(
            f"Unsupported cipher backend: {name} "
            f"(available: {', '.join(sorted(_BACKENDS))})"
        )
    return backend_cls()


__all__ = [
    "CipherBackend",
    "AESGCMBackend",
    "ChaCha20Poly1305Backend",
    "get_cipher_backend",
]
