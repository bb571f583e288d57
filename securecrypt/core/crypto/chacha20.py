"""
ChaCha20-Poly1305 Authenticated Encryption
==========================================

Stream-cipher AEAD for the application key (IETF RFC 8439).

Security Properties:
    - 256-bit key (from AppKey)
    - 96-bit random nonce per encryption
    - 128-bit Poly1305 authentication tag
    - Constant-time in software, no AES-NI dependency

The ciphertext body is exactly as long as the plaintext.

WARNING: Random 96-bit nonces collide with non-negligible probability
after about 2^32 messages under one key. Rotate the key before that, or
use XChaCha20Poly1305Encryptor, whose 192-bit nonce has no such limit.
"""

from __future__ import annotations

from typing import Final

from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from securecrypt.core.crypto.aead import AeadEncryptor

CHACHA_KEY_SIZE: Final[int] = 32  # 256 bits
CHACHA_NONCE_SIZE: Final[int] = 12  # 96 bits (IETF variant)
CHACHA_TAG_SIZE: Final[int] = 16  # 128 bits Poly1305


class ChaCha20Poly1305Encryptor(AeadEncryptor):
    """ChaCha20-Poly1305 encryptor."""

    ALGORITHM = "ChaCha20-Poly1305"
    KEY_SIZE = CHACHA_KEY_SIZE
    NONCE_SIZE = CHACHA_NONCE_SIZE
    TAG_SIZE = CHACHA_TAG_SIZE

    __slots__ = ()

    @classmethod
    def _cipher(cls, key: bytes) -> ChaCha20Poly1305:
        return ChaCha20Poly1305(key)
