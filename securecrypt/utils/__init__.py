"""
Utils module - Encoding and path helpers shared by the crypto services.
"""

from securecrypt.utils.encoding import (
    b64url_encode,
    b64url_decode,
    encode_key,
    decode_key,
)
from securecrypt.utils.paths import ensure_private_dir

__all__ = [
    "b64url_encode",
    "b64url_decode",
    "encode_key",
    "decode_key",
    "ensure_private_dir",
]
