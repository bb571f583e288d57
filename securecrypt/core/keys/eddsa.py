"""
Ed25519 Signer Key Pair
=======================

Loads and generates the key pair used by the asymmetric signer.

Key file format (signing.eddsa_key_path):
    line 1: hex(public key)   32 bytes -> 64 hex chars
    line 2: hex(private key)  64 bytes -> 128 hex chars

The private half uses the libsodium layout, seed (32) || public key (32),
so files are interchangeable with sodium-based tooling.

Lifecycle:
    - generate() writes the file under an exclusive lock
    - get_key() reads it once under a shared lock and caches the pair
    - every intermediate buffer holding secret bytes is zeroed on exit

private_bytes_raw() and public_bytes_raw() return immutable bytes that are
copied into bytearrays at once; those two copies, and the cached pair, are
left to the garbage collector.
"""

from __future__ import annotations

import binascii
import logging
from pathlib import Path
from typing import Final, Optional, Union

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from securecrypt.core.config import CryptoConfig
from securecrypt.core.errors import ConfigurationError
from securecrypt.core.keys.cache import KeyRing, LazyKey
from securecrypt.core.keys.storage import read_key_file, write_key_file
from securecrypt.core.memory.zeroization import ZeroizeContext
from securecrypt.utils.encoding import hexlify_into

PUBLIC_KEY_LENGTH: Final[int] = 32
SEED_LENGTH: Final[int] = 32
PRIVATE_KEY_LENGTH: Final[int] = SEED_LENGTH + PUBLIC_KEY_LENGTH
KEY_LENGTH: Final[int] = PUBLIC_KEY_LENGTH + PRIVATE_KEY_LENGTH

CONFIG_KEY_PATH: Final[str] = "signing.eddsa_key_path"

logger = logging.getLogger(__name__)


def parse_key_pair(raw: bytes | bytearray) -> tuple[bytes, bytes]:
    """
    Parse the two-line hex key file into (public, private).

    Raises:
        ConfigurationError: If the content is not a well-formed key pair
    """
    newline = raw.find(b"\n")
    if newline < 0:
        raise ConfigurationError("EdDSA key file is malformed (missing line terminator)")

    public_end = newline - 1 if newline and raw[newline - 1] == 0x0D else newline
    private_end = len(raw)
    while private_end > newline + 1 and raw[private_end - 1] in b"\r\n":
        private_end -= 1

    # Slice through a memoryview so no extra copies of the hex text exist
    with memoryview(raw) as view:
        try:
            public = binascii.unhexlify(view[:public_end])
            private = binascii.unhexlify(view[newline + 1:private_end])
        except (binascii.Error, ValueError) as exc:
            raise ConfigurationError("EdDSA key file is not hex encoded") from exc

    if len(public) != PUBLIC_KEY_LENGTH or len(private) != PRIVATE_KEY_LENGTH:
        raise ConfigurationError("EdDSA key file has wrong key lengths")

    if private[SEED_LENGTH:] != public:
        raise ConfigurationError("EdDSA key file holds a mismatched key pair")

    return public, private


class EdDSASignerKey:
    """
    Loader and generator for the Ed25519 key pair.

    Usage:
        key = EdDSASignerKey(config)
        public, private = key.get_key()

        pair_text = key.generate()                 # "<hex public>\\n<hex private>"
        key.generate("/etc/app/eddsa.key")         # written under LOCK_EX
        key.persist()                              # to signing.eddsa_key_path
    """

    VARIANT: Final[str] = "eddsa signer key"

    __slots__ = ("_config", "_logger", "_key")

    def __init__(
        self,
        config: CryptoConfig,
        ring: Optional[KeyRing] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._logger = log or logger
        self._key: LazyKey[tuple[bytes, bytes]] = (ring if ring is not None else KeyRing()).handle(
            self.VARIANT, self._load
        )

    def get_key(self) -> tuple[bytes, bytes]:
        """
        Get (public, private), reading the key file on first use.

        Raises:
            ConfigurationError: If signing.eddsa_key_path is unset or the file is malformed
            KeyStorageError: If the file cannot be opened, locked or read
        """
        return self._key.get()

    def _key_path(self) -> Path:
        path = self._config.get(CONFIG_KEY_PATH)
        if path is None or not str(path).strip():
            raise ConfigurationError("File for EdDSA signer is not set")
        return self._config.resolve_key_path(path)

    def _load(self) -> tuple[bytes, bytes]:
        path = self._key_path()

        with ZeroizeContext() as wipe:
            # both hex lines plus CRLF terminators
            raw = wipe.track(read_key_file(path, KEY_LENGTH * 2 + 4, self._logger))
            pair = parse_key_pair(raw)

        self._logger.debug("Loaded %s from %s", self.VARIANT, path)
        return pair

    def generate(self, write: Optional[Union[str, Path]] = None) -> Optional[str]:
        """
        Generate a fresh Ed25519 key pair.

        Args:
            write: Target key file, relative to paths.key_dir unless absolute.
                When None the pair is returned instead.

        Returns:
            "<hex public>\\n<hex private>" when write is None, otherwise None

        Raises:
            KeyStorageError: If the key file cannot be locked or written
        """
        with ZeroizeContext() as wipe:
            private_key = Ed25519PrivateKey.generate()
            seed = wipe.track(bytearray(private_key.private_bytes_raw()))
            public = wipe.track(bytearray(private_key.public_key().public_bytes_raw()))
            key_pair = wipe.track(seed + public)

            private_hex = wipe.track(hexlify_into(key_pair))
            payload = wipe.track(hexlify_into(public) + b"\n" + private_hex)

            if write is None:
                return payload.decode("ascii")

            target = self._config.resolve_key_path(write)
            write_key_file(target, payload, self._logger)

        self._logger.info("Generated %s at %s", self.VARIANT, target)
        return None

    def persist(self) -> None:
        """Generate a key pair into signing.eddsa_key_path."""
        self.generate(self._key_path())

    @staticmethod
    def generate_key() -> str:
        """Create a new key pair as two hex lines."""
        private_key = Ed25519PrivateKey.generate()
        public = private_key.public_key().public_bytes_raw()
        return public.hex() + "\n" + (private_key.private_bytes_raw() + public).hex()

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"EdDSASignerKey(loaded={self._key.loaded})"
