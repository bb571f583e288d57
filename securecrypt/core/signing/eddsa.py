"""
Ed25519 Detached Signatures
===========================

Asymmetric signer backed by EdDSASignerKey: the private half signs, the
public half verifies. Signatures are 64 bytes.

verify() returns False for a well-formed signature that does not match
(wrong message or wrong key). A signature that cannot be decoded or has
the wrong length raises MalformedSignatureError.
"""

from __future__ import annotations

import binascii
from typing import Final

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from securecrypt.core.errors import CryptoError, MalformedSignatureError
from securecrypt.core.keys.cache import Loader
from securecrypt.core.keys.eddsa import SEED_LENGTH
from securecrypt.core.signing.base import Message, SigningMixin, as_message_bytes
from securecrypt.utils.encoding import b64url_decode

SIGNATURE_LENGTH: Final[int] = 64


class EdDSA(SigningMixin):
    """
    Ed25519 signer.

    Usage:
        signer = EdDSA(EdDSASignerKey(config))
        signature = signer.sign("hello")
        signer.verify("hello", signature)   # True
        signer.verify("hellp", signature)   # False
    """

    ALGORITHM: Final[str] = "Ed25519"

    __slots__ = ("_loader",)

    def __init__(self, loader: Loader) -> None:
        self._loader = loader

    def sign_raw(self, message: Message) -> bytes:
        _, private = self._loader.get_key()
        try:
            key = Ed25519PrivateKey.from_private_bytes(private[:SEED_LENGTH])
        except ValueError as exc:
            raise CryptoError("Ed25519 private key is malformed") from exc
        return key.sign(as_message_bytes(message))

    def verify(self, message: Message, signature: str | bytes, decode_signature: bool = True) -> bool:
        """
        Check a detached signature against the public key.

        Args:
            message: Signed message
            signature: URL-safe base64 text (decode_signature=True) or raw bytes
            decode_signature: Whether signature is base64 text

        Raises:
            MalformedSignatureError: If the signature is undecodable or not 64 bytes
        """
        public, _ = self._loader.get_key()

        if decode_signature:
            try:
                raw = b64url_decode(signature)
            except (binascii.Error, ValueError) as exc:
                raise MalformedSignatureError("Signature is not URL-safe base64") from exc
        else:
            raw = as_message_bytes(signature)

        if len(raw) != SIGNATURE_LENGTH:
            raise MalformedSignatureError(
                f"Ed25519 signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}"
            )

        try:
            Ed25519PublicKey.from_public_bytes(public).verify(raw, as_message_bytes(message))
        except InvalidSignature:
            return False
        except ValueError as exc:
            raise CryptoError("Ed25519 public key is malformed") from exc

        return True

    def __repr__(self) -> str:
        return "EdDSA()"
