"""
SecureCrypt - Cryptographic Services Layer
==========================================

Authenticated encryption, message signing and hashing for an
application, with pluggable key storage and payload serialization.

Security Notice:
- No key material is logged
- Keys are loaded once per process and never re-read mid-process
- Key files are locked (shared for readers, exclusive for writers)
- Tampered ciphertexts never yield plaintext
"""

from securecrypt.core.config import CryptoConfig
from securecrypt.core.errors import (
    SecureCryptError,
    ConfigurationError,
    KeyStorageError,
    CryptoError,
    IntegrityError,
    MalformedPayloadError,
    MalformedSignatureError,
    SerializationError,
)
from securecrypt.core.logging import get_secure_logger
from securecrypt.services import CryptoServices, Cipher, EncoderDriver, SigningDriver, HashingDriver, KeyKind

__version__ = "0.1.0"

__all__ = [
    "CryptoConfig",
    "CryptoServices",
    "Cipher",
    "EncoderDriver",
    "SigningDriver",
    "HashingDriver",
    "KeyKind",
    "SecureCryptError",
    "ConfigurationError",
    "KeyStorageError",
    "CryptoError",
    "IntegrityError",
    "MalformedPayloadError",
    "MalformedSignatureError",
    "SerializationError",
    "get_secure_logger",
    "__version__",
]
