"""
Text Encodings
==============

URL-safe base64 without padding (ciphertexts, signatures, digests) and
the "base64:" prefix convention for symmetric key values.
"""

from __future__ import annotations

import base64
import binascii
from typing import Final

KEY_PREFIX: Final[str] = "base64:"


def b64url_encode(data: bytes | bytearray) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(value: str | bytes) -> bytes:
    """
    Decode URL-safe base64, with or without padding.

    Only the canonical encoding of a byte string is accepted, so two
    different texts never decode to the same bytes.

    Raises:
        binascii.Error: If the value is not canonical URL-safe base64
    """
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise binascii.Error("Non-ASCII characters in base64 data") from exc
    stripped = value.rstrip("=")
    pad = "=" * (-len(stripped) % 4)
    raw = base64.urlsafe_b64decode(stripped + pad)
    if b64url_encode(raw) != stripped:
        raise binascii.Error("Non-canonical URL-safe base64 data")
    return raw


def encode_key(raw: bytes | bytearray) -> str:
    """Encode a symmetric key as "base64:<standard base64>"."""
    return KEY_PREFIX + base64.b64encode(raw).decode("ascii")


def decode_key(value: str) -> bytes:
    """
    Decode a symmetric key value, with or without the "base64:" prefix.

    Raises:
        binascii.Error: If the value is not valid base64
    """
    if value.startswith(KEY_PREFIX):
        value = value[len(KEY_PREFIX):]
    return base64.b64decode(value.strip(), validate=True)


_B64_ALPHABET: Final[bytes] = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_HEX_DIGITS: Final[bytes] = b"0123456789abcdef"


def b64encode_into(data: bytes | bytearray, prefix: bytes = b"", suffix: bytes = b"") -> bytearray:
    """
    Standard base64 (with padding) written straight into a new bytearray.

    Unlike base64.b64encode no immutable copy of the encoding is made,
    so the result can be zeroed once it has been used.
    """
    size = 4 * ((len(data) + 2) // 3)
    out = bytearray(len(prefix) + size + len(suffix))
    out[:len(prefix)] = prefix
    pos = len(prefix)

    for i in range(0, len(data), 3):
        n = min(3, len(data) - i)
        b0 = data[i]
        b1 = data[i + 1] if n > 1 else 0
        b2 = data[i + 2] if n > 2 else 0
        out[pos] = _B64_ALPHABET[b0 >> 2]
        out[pos + 1] = _B64_ALPHABET[((b0 & 0x03) << 4) | (b1 >> 4)]
        out[pos + 2] = _B64_ALPHABET[((b1 & 0x0F) << 2) | (b2 >> 6)] if n > 1 else 0x3D
        out[pos + 3] = _B64_ALPHABET[b2 & 0x3F] if n > 2 else 0x3D
        pos += 4

    out[pos:] = suffix
    return out


def hexlify_into(data: bytes | bytearray) -> bytearray:
    """Lowercase hex of data written straight into a new bytearray."""
    out = bytearray(2 * len(data))
    for i, byte in enumerate(data):
        out[2 * i] = _HEX_DIGITS[byte >> 4]
        out[2 * i + 1] = _HEX_DIGITS[byte & 0x0F]
    return out
