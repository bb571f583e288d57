"""
Message Signing
===============

Symmetric keyed-MAC signers (HmacSha256, HmacSha512, HmacBlake2b) and the
asymmetric Ed25519 signer (EdDSA). All verify in constant time or via the
primitive's own verification, and report mismatches as False.
"""

from securecrypt.core.signing.base import Signer, SigningMixin, as_message_bytes
from securecrypt.core.signing.eddsa import EdDSA
from securecrypt.core.signing.mac import HmacSigner, HmacSha256, HmacSha512, HmacBlake2b

__all__ = [
    "Signer",
    "SigningMixin",
    "as_message_bytes",
    "EdDSA",
    "HmacSigner",
    "HmacSha256",
    "HmacSha512",
    "HmacBlake2b",
]
