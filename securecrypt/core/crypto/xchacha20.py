"""
XChaCha20-Poly1305 Authenticated Encryption
===========================================

Extended-nonce ChaCha20-Poly1305 for the application key, through
libsodium (PyNaCl bindings).

Security Properties:
    - 256-bit key (from AppKey)
    - 192-bit random nonce per encryption, safe to draw at random for
      any practical number of messages under one key
    - 128-bit Poly1305 authentication tag

Frames use the same nonce || ciphertext || tag layout as the other
encryptors, with a 24-byte nonce.
"""

from __future__ import annotations

from typing import Final, Optional

from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError as SodiumCryptoError

from securecrypt.core.crypto.aead import AeadEncryptor

XCHACHA_KEY_SIZE: Final[int] = 32  # 256 bits
XCHACHA_NONCE_SIZE: Final[int] = 24  # 192 bits
XCHACHA_TAG_SIZE: Final[int] = 16  # 128 bits Poly1305


class _SodiumXChaCha20Poly1305:
    """libsodium XChaCha20-Poly1305 behind the cryptography AEAD call shape."""

    __slots__ = ("_key",)

    def __init__(self, key: bytes) -> None:
        self._key = key

    def encrypt(self, nonce: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        return crypto_aead_xchacha20poly1305_ietf_encrypt(data, associated_data, nonce, self._key)

    def decrypt(self, nonce: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        return crypto_aead_xchacha20poly1305_ietf_decrypt(data, associated_data, nonce, self._key)


class XChaCha20Poly1305Encryptor(AeadEncryptor):
    """XChaCha20-Poly1305 encryptor."""

    ALGORITHM = "XChaCha20-Poly1305"
    KEY_SIZE = XCHACHA_KEY_SIZE
    NONCE_SIZE = XCHACHA_NONCE_SIZE
    TAG_SIZE = XCHACHA_TAG_SIZE
    TAG_ERRORS = (SodiumCryptoError,)

    __slots__ = ()

    @classmethod
    def _cipher(cls, key: bytes) -> _SodiumXChaCha20Poly1305:
        return _SodiumXChaCha20Poly1305(key)
