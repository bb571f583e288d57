"""
Authenticated Encryption Pipeline
=================================

Shared serialize -> encrypt -> frame -> encode pipeline for the AEAD
encryptors, and its exact inverse.

Frame:
    nonce (NONCE_SIZE) || ciphertext (len(plaintext)) || tag (TAG_SIZE)

Text form:
    URL-safe base64 of the frame, without padding

Failure modes:
    - MalformedPayloadError: text is not canonical base64 or the frame
      is shorter than nonce + tag
    - IntegrityError: tag did not verify (tampered data or wrong key)
    - SerializationError: plaintext authenticated but the encoder could
      not rebuild the value
No plaintext is ever returned when the tag does not verify.
"""

from __future__ import annotations

import binascii
import secrets
from typing import Any, ClassVar, Optional, Protocol, runtime_checkable

from cryptography.exceptions import InvalidTag

from securecrypt.core.encoding.encoders import Encoder, JsonEncoder
from securecrypt.core.errors import (
    CryptoError,
    IntegrityError,
    MalformedPayloadError,
    SerializationError,
)
from securecrypt.core.keys.cache import Loader
from securecrypt.utils.encoding import b64url_decode, b64url_encode, encode_key


@runtime_checkable
class Encryptor(Protocol):
    """Authenticated encryption capability."""

    def encrypt(self, value: Any, serialize: bool = True) -> str:
        ...

    def decrypt(self, payload: str, serialize: bool = True) -> Any:
        ...

    def encrypt_string(self, value: str) -> str:
        ...

    def decrypt_string(self, payload: str) -> str:
        ...


class AeadEncryptor:
    """
    Base class for encryptors built on a cryptography AEAD primitive.

    Subclasses set the sizes and implement _cipher(key).

    Usage:
        encryptor = AesGcm256Encryptor(AppKey(config), JsonEncoder())

        token = encryptor.encrypt({"user": 42})
        value = encryptor.decrypt(token)

        token = encryptor.encrypt_string("hello world")
        text = encryptor.decrypt_string(token)

        frame = encryptor.encrypt_raw(b"\\x00\\x01")
        data = encryptor.decrypt_raw(frame)
    """

    ALGORITHM: ClassVar[str]
    KEY_SIZE: ClassVar[int] = 32
    NONCE_SIZE: ClassVar[int]
    TAG_SIZE: ClassVar[int] = 16
    # Raised by the primitive when the tag does not verify
    TAG_ERRORS: ClassVar[tuple[type[Exception], ...]] = (InvalidTag,)

    __slots__ = ("_loader", "_encoder")

    def __init__(self, loader: Loader, encoder: Optional[Encoder] = None) -> None:
        self._loader = loader
        self._encoder = encoder or JsonEncoder()

    @classmethod
    def _cipher(cls, key: bytes) -> Any:
        raise NotImplementedError

    @classmethod
    def generate_key(cls) -> str:
        """Create a new random key as "base64:..." text."""
        return encode_key(secrets.token_bytes(cls.KEY_SIZE))

    @classmethod
    def generate_nonce(cls) -> bytes:
        """Draw a fresh nonce from the OS CSPRNG."""
        return secrets.token_bytes(cls.NONCE_SIZE)

    def _key(self) -> bytes:
        key = self._loader.get_key()
        if not isinstance(key, (bytes, bytearray)) or len(key) != self.KEY_SIZE:
            raise CryptoError(f"{self.ALGORITHM} key must be exactly {self.KEY_SIZE} bytes")
        return bytes(key)

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    def encrypt_raw(self, plaintext: bytes | bytearray) -> bytes:
        """
        Encrypt bytes and return the binary frame nonce || ciphertext || tag.
        """
        nonce = self.generate_nonce()
        sealed = self._cipher(self._key()).encrypt(nonce, bytes(plaintext), None)
        return nonce + sealed

    def decrypt_raw(self, frame: bytes | bytearray) -> bytes:
        """
        Verify and decrypt a binary frame.

        Raises:
            MalformedPayloadError: If the frame is too short
            IntegrityError: If the tag does not verify
        """
        if len(frame) < self.NONCE_SIZE + self.TAG_SIZE:
            raise MalformedPayloadError(
                f"{self.ALGORITHM} payload too short (missing nonce or authentication tag)"
            )

        frame = bytes(frame)
        nonce, sealed = frame[:self.NONCE_SIZE], frame[self.NONCE_SIZE:]

        try:
            return self._cipher(self._key()).decrypt(nonce, sealed, None)
        except self.TAG_ERRORS as exc:
            raise IntegrityError() from exc

    def encrypt(self, value: Any, serialize: bool = True) -> str:
        """
        Encrypt a value into URL-safe base64 text.

        Args:
            value: Any value the encoder accepts when serialize is True;
                   str or bytes otherwise
            serialize: Pass value through the encoder first

        Raises:
            SerializationError: If the value cannot be serialized
        """
        data = self._encoder.serialize(value) if serialize else self._as_bytes(value)
        return b64url_encode(self.encrypt_raw(data))

    def decrypt(self, payload: str | bytes, serialize: bool = True) -> Any:
        """
        Decrypt text produced by encrypt().

        Returns the deserialized value when serialize is True, otherwise
        the plaintext decoded as UTF-8.

        Raises:
            MalformedPayloadError: If the text is not a valid frame
            IntegrityError: If the payload was tampered with or the key is wrong
            SerializationError: If the authenticated plaintext cannot be decoded
        """
        plaintext = self.decrypt_raw(self._decode(payload))

        if serialize:
            return self._encoder.deserialize(plaintext)

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("Decrypted payload is not UTF-8 text") from exc

    def encrypt_string(self, value: str) -> str:
        """Encrypt text without serialization."""
        return self.encrypt(value, serialize=False)

    def decrypt_string(self, payload: str) -> str:
        """Decrypt text produced by encrypt_string()."""
        return self.decrypt(payload, serialize=False)

    @staticmethod
    def _as_bytes(value: Any) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise SerializationError(
            f"Unserialized values must be str or bytes, got {type(value).__name__}"
        )

    @staticmethod
    def _decode(payload: str | bytes) -> bytes:
        try:
            return b64url_decode(payload)
        except (binascii.Error, ValueError) as exc:
            raise MalformedPayloadError("Payload is not URL-safe base64") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}(encoder={type(self._encoder).__name__})"
