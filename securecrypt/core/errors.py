"""
Error Taxonomy
==============

Every failure raised by securecrypt derives from SecureCryptError so
callers can tell "bad key", "bad data" and "storage unavailable" apart:

    SecureCryptError
    ├── ConfigurationError      key source missing/unset, unknown driver
    ├── KeyStorageError         open, lock, read or write failure (OSError)
    ├── CryptoError
    │   ├── IntegrityError          authentication tag did not verify
    │   ├── MalformedPayloadError   framing/encoding of a ciphertext is wrong
    │   └── MalformedSignatureError signature has the wrong shape
    └── SerializationError      encoder round trip failed

Messages never contain key material.
"""

from __future__ import annotations


class SecureCryptError(Exception):
    """Base class for all securecrypt errors."""
    pass


class ConfigurationError(SecureCryptError):
    """Raised when a required key source or driver is missing or invalid."""
    pass


class KeyStorageError(SecureCryptError, OSError):
    """
    Raised when key storage cannot be opened, locked, read or written.

    Also an OSError, so generic I/O handlers keep working.
    """
    pass


class CryptoError(SecureCryptError):
    """Raised when a cryptographic primitive rejects its input."""
    pass


class IntegrityError(CryptoError):
    """
    Raised when an authentication tag does not verify.

    Means the ciphertext was tampered with or the wrong key was used.
    """

    def __init__(self, message: str = "Authentication tag verification failed"):
        super().__init__(message)


class MalformedPayloadError(CryptoError):
    """Raised when a ciphertext cannot be decoded or split into its frame."""
    pass


class MalformedSignatureError(CryptoError):
    """Raised when a signature cannot be decoded or has the wrong length."""
    pass


class SerializationError(SecureCryptError):
    """Raised when an encoder cannot serialize or deserialize a value."""
    pass
