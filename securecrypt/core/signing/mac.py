"""
Keyed-MAC Signers
=================

Symmetric signers keyed with HmacKey:

    HmacSha256   HMAC-SHA-256  (32-byte signature)
    HmacSha512   HMAC-SHA-512  (64-byte signature)
    HmacBlake2b  keyed BLAKE2b (64-byte signature by default)

Verification recomputes the MAC and compares with hmac.compare_digest,
whose running time does not depend on where the inputs differ.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
from typing import Any, Callable, ClassVar

from securecrypt.core.keys.cache import Loader
from securecrypt.core.signing.base import Message, SigningMixin, as_message_bytes
from securecrypt.utils.encoding import b64url_decode


class HmacSigner(SigningMixin):
    """Base class for the keyed-MAC signers."""

    ALGORITHM: ClassVar[str]

    __slots__ = ("_loader",)

    def __init__(self, loader: Loader) -> None:
        self._loader = loader

    def _mac(self, key: bytes, data: bytes) -> bytes:
        raise NotImplementedError

    def sign_raw(self, message: Message) -> bytes:
        return self._mac(self._loader.get_key(), as_message_bytes(message))

    def verify(self, message: Message, signature: str | bytes, decode_signature: bool = True) -> bool:
        """
        Check a signature produced by sign() (or sign_raw() with
        decode_signature=False). Undecodable signatures verify False.
        """
        if decode_signature:
            try:
                signature = b64url_decode(signature)
            except (binascii.Error, ValueError):
                return False

        return hmac.compare_digest(self.sign_raw(message), as_message_bytes(signature))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class _HashlibHmac(HmacSigner):
    DIGEST: ClassVar[Callable[..., Any]]

    __slots__ = ()

    def _mac(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, type(self).DIGEST).digest()


class HmacSha256(_HashlibHmac):
    ALGORITHM = "HMAC-SHA256"
    DIGEST = hashlib.sha256

    __slots__ = ()


class HmacSha512(_HashlibHmac):
    ALGORITHM = "HMAC-SHA512"
    DIGEST = hashlib.sha512

    __slots__ = ()


class HmacBlake2b(HmacSigner):
    """
    BLAKE2b in keyed mode; BLAKE2b is a MAC on its own, so no HMAC
    construction is wrapped around it.
    """

    ALGORITHM = "BLAKE2b-MAC"

    __slots__ = ("_digest_size",)

    def __init__(self, loader: Loader, digest_size: int = 64) -> None:
        super().__init__(loader)
        if not 16 <= digest_size <= hashlib.blake2b.MAX_DIGEST_SIZE:
            raise ValueError(f"BLAKE2b signature length must be 16..64 bytes, got {digest_size}")
        self._digest_size = digest_size

    def _mac(self, key: bytes, data: bytes) -> bytes:
        return hashlib.blake2b(data, key=key, digest_size=self._digest_size).digest()
