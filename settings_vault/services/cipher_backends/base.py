"""
Abstract base class for authenticated cipher backends.

A cipher backend wraps one AEAD primitive. The encryption service owns key
derivation, randomness and envelope handling; the backend only turns
(key, nonce, data) into authenticated ciphertext and back.

Contract:
- encrypt() output is ciphertext || authentication tag
- decrypt() must raise on any tag mismatch, never return unauthenticated data
- Backends hold no per-call state and are safe for concurrent use
"""

from abc import ABC, abstractmethod


class CipherBackend(ABC):
    """
    Abstract base class for AEAD cipher backends.

    Subclasses declare their key and nonce sizes so the encryption service
    can derive keys and generate nonces of the right length.

    Example:
        >>> backend = AESGCMBackend()
        >>> nonce = os.urandom(backend.NONCE_LENGTH)
        >>> ct = backend.encrypt(key, nonce, b"secret")
        >>> assert backend.decrypt(key, nonce, ct) == b"secret"
    """

    KEY_LENGTH: int = 32
    NONCE_LENGTH: int = 12
    TAG_LENGTH: int = 16

    @abstractmethod
    def encrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        """
        Encrypt and authenticate data.

        Args:
            key: KEY_LENGTH-byte derived key
            nonce: NONCE_LENGTH-byte random nonce, never reused with the same key
            data: Plaintext bytes

        Returns:
            Ciphertext with the authentication tag appended
        """
        pass

    @abstractmethod
    def decrypt(self, key: bytes, nonce: bytes, data: bytes) -> bytes:
        """
        Verify and decrypt data produced by encrypt().

        Args:
            key: KEY_LENGTH-byte derived key
            nonce: Nonce used at encryption time
            data: Ciphertext with the authentication tag appended

        Returns:
            Plaintext bytes

        Raises:
            cryptography.exceptions.InvalidTag: If authentication fails
        """
        pass

    @abstractmethod
    def get_backend_version(self) -> str:
        """
        Get the version identifier for this backend.

        Returns:
            Version string (e.g., "aesgcm-v1", "chacha20-v1")
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} version={self.get_backend_version()}>"
