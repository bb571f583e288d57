"""
Signing Contracts
=================

Every signer produces detached signatures over byte messages:

    sign(message) -> str          URL-safe base64, no padding
    sign_raw(message) -> bytes    raw signature bytes
    verify(message, signature, decode_signature=True) -> bool

verify() is a pure predicate: a signature that does not match returns
False, it never raises for that reason.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from securecrypt.utils.encoding import b64url_encode

Message = str | bytes | bytearray | memoryview


def as_message_bytes(message: Message) -> bytes:
    """Normalize a message to bytes (text is UTF-8 encoded)."""
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


@runtime_checkable
class Signer(Protocol):
    """Detached signature capability."""

    def sign(self, message: Message) -> str:
        ...

    def sign_raw(self, message: Message) -> bytes:
        ...

    def verify(self, message: Message, signature: str | bytes, decode_signature: bool = True) -> bool:
        ...


class SigningMixin:
    """Text-encoded sign() on top of a subclass's sign_raw()."""

    __slots__ = ()

    def sign_raw(self, message: Message) -> bytes:
        raise NotImplementedError

    def sign(self, message: Message) -> str:
        return b64url_encode(self.sign_raw(message))
