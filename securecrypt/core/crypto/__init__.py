"""
Authenticated Encryption
========================

Three AEAD ciphers, selected per deployment (encryption.cipher):

    1. AES-256-GCM: block cipher, hardware accelerated where AES-NI exists
    2. ChaCha20-Poly1305: stream cipher, constant-time in software
    3. XChaCha20-Poly1305: ChaCha20 with a 192-bit nonce, via libsodium

All produce URL-safe base64 text over nonce || ciphertext || tag and
reject any modified payload before returning plaintext.
"""

from securecrypt.core.crypto.aead import AeadEncryptor, Encryptor
from securecrypt.core.crypto.aes_gcm import AesGcm256Encryptor
from securecrypt.core.crypto.chacha20 import ChaCha20Poly1305Encryptor
from securecrypt.core.crypto.xchacha20 import XChaCha20Poly1305Encryptor

__all__ = [
    "AeadEncryptor",
    "Encryptor",
    "AesGcm256Encryptor",
    "ChaCha20Poly1305Encryptor",
    "XChaCha20Poly1305Encryptor",
]
