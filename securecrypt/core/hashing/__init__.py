"""
Hashing
=======

Unkeyed (Blake2b, Sha256, Sha512) and keyed (KeyedBlake2b) digests.
"""

from securecrypt.core.hashing.hashers import (
    Hasher,
    HashFunction,
    Blake2b,
    Sha256,
    Sha512,
    KeyedBlake2b,
)

__all__ = [
    "Hasher",
    "HashFunction",
    "Blake2b",
    "Sha256",
    "Sha512",
    "KeyedBlake2b",
]
