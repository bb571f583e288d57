"""
Hash Functions
==============

Deterministic digests with URL-safe, unpadded base64 text output.

Unkeyed:
    Blake2b   BLAKE2b, 64-byte digest by default
    Sha256    SHA-256
    Sha512    SHA-512
Keyed:
    KeyedBlake2b  BLAKE2b keyed with Blake2bHashingKey (MAC-like digest)

If the primitive rejects its parameters (for instance a misconfigured
output length) the failure is logged and hash()/hash_raw() return None,
so callers can tell "hash failed" from a digest that matches nothing.
"""

from __future__ import annotations

import hashlib
import logging
from typing import ClassVar, Optional, Protocol, runtime_checkable

from securecrypt.core.keys.cache import Loader
from securecrypt.core.signing.base import Message, as_message_bytes
from securecrypt.utils.encoding import b64url_encode

logger = logging.getLogger(__name__)


@runtime_checkable
class Hasher(Protocol):
    """Digest capability."""

    def hash(self, data: Message) -> Optional[str]:
        ...

    def hash_raw(self, data: Message) -> Optional[bytes]:
        ...


class HashFunction:
    """Base class: subclasses implement _digest()."""

    ALGORITHM: ClassVar[str]

    __slots__ = ("_logger",)

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._logger = log or logger

    def _digest(self, data: bytes) -> bytes:
        raise NotImplementedError

    def hash(self, data: Message) -> Optional[str]:
        raw = self.hash_raw(data)
        return None if raw is None else b64url_encode(raw)

    def hash_raw(self, data: Message) -> Optional[bytes]:
        payload = as_message_bytes(data)
        try:
            return self._digest(payload)
        except (ValueError, TypeError, OverflowError) as exc:
            self._logger.warning("%s rejected its input: %s", self.ALGORITHM, exc)
            return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Blake2b(HashFunction):
    """Unkeyed BLAKE2b."""

    ALGORITHM = "BLAKE2b"

    __slots__ = ("_output_length",)

    def __init__(self, output_length: int = 64, log: Optional[logging.Logger] = None) -> None:
        super().__init__(log)
        self._output_length = output_length

    @property
    def output_length(self) -> int:
        return self._output_length

    def _digest(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=self._output_length).digest()


class Sha256(HashFunction):
    ALGORITHM = "SHA-256"

    __slots__ = ()

    def _digest(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class Sha512(HashFunction):
    ALGORITHM = "SHA-512"

    __slots__ = ()

    def _digest(self, data: bytes) -> bytes:
        return hashlib.sha512(data).digest()


class KeyedBlake2b(Blake2b):
    """
    BLAKE2b keyed with a loader-supplied secret.

    Missing or invalid key configuration is not a hash failure: the
    loader's ConfigurationError propagates.
    """

    ALGORITHM = "BLAKE2b (keyed)"

    __slots__ = ("_loader",)

    def __init__(
        self,
        loader: Loader,
        output_length: int = 64,
        log: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(output_length, log)
        self._loader = loader

    def _digest(self, data: bytes) -> bytes:
        key = self._loader.get_key()
        return hashlib.blake2b(data, key=key, digest_size=self._output_length).digest()
