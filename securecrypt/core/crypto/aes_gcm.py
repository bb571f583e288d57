"""
AES-256-GCM Authenticated Encryption
====================================

Block-cipher AEAD for the application key.

Security Properties:
    - 256-bit key (from AppKey)
    - 96-bit random nonce per encryption (NIST SP 800-38D)
    - 128-bit authentication tag

WARNING:
    - Random 96-bit nonces stay safe for about 2^32 messages per key;
      rotate the app key well before that
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from securecrypt.core.crypto.aead import AeadEncryptor

AES_KEY_SIZE: Final[int] = 32  # 256 bits
AES_NONCE_SIZE: Final[int] = 12  # 96 bits (NIST recommended for GCM)
AES_TAG_SIZE: Final[int] = 16  # 128 bits


class AesGcm256Encryptor(AeadEncryptor):
    """AES-256-GCM encryptor."""

    ALGORITHM = "AES-256-GCM"
    KEY_SIZE = AES_KEY_SIZE
    NONCE_SIZE = AES_NONCE_SIZE
    TAG_SIZE = AES_TAG_SIZE

    __slots__ = ()

    @classmethod
    def _cipher(cls, key: bytes) -> AESGCM:
        return AESGCM(key)
