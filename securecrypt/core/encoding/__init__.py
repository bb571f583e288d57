"""
Payload encoders for the authenticated encryptors.
"""

from securecrypt.core.encoding.encoders import (
    Encoder,
    JsonEncoder,
    PickleEncoder,
    BytesEncoder,
)

__all__ = [
    "Encoder",
    "JsonEncoder",
    "PickleEncoder",
    "BytesEncoder",
]
