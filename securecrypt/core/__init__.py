"""
Core module - Configuration, logging, errors and the crypto components.
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
from securecrypt.core.logging import get_secure_logger, configure_logging, SecureLogFilter

__all__ = [
    "CryptoConfig",
    "SecureCryptError",
    "ConfigurationError",
    "KeyStorageError",
    "CryptoError",
    "IntegrityError",
    "MalformedPayloadError",
    "MalformedSignatureError",
    "SerializationError",
    "get_secure_logger",
    "configure_logging",
    "SecureLogFilter",
]
