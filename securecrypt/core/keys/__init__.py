"""
Key Material
============

Loading, caching, generation and locked persistence of the keys used by
the encryptors, signers and hashers.

Security Properties:
    - Each key is read from its source at most once per process
    - Key files are read under a shared lock and written under an
      exclusive lock
    - Secret buffers created during generation are zeroed on every exit path
    - Key material never appears in repr() or log output
"""

from securecrypt.core.keys.cache import KeyMaterial, KeyRing, LazyKey, Loader, Generator
from securecrypt.core.keys.eddsa import EdDSASignerKey, parse_key_pair
from securecrypt.core.keys.storage import file_lock, read_key_file, write_key_file
from securecrypt.core.keys.symmetric import (
    SymmetricKey,
    AppKey,
    HmacKey,
    Blake2bHashingKey,
)

__all__ = [
    "KeyMaterial",
    "KeyRing",
    "LazyKey",
    "Loader",
    "Generator",
    "EdDSASignerKey",
    "parse_key_pair",
    "file_lock",
    "read_key_file",
    "write_key_file",
    "SymmetricKey",
    "AppKey",
    "HmacKey",
    "Blake2bHashingKey",
]
