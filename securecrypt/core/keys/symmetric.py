"""
Symmetric Keys
==============

Loaders and generators for the single-secret keys:

    AppKey             - authenticated encryption key  (encryption.key, 32 bytes)
    HmacKey            - keyed-MAC signing key         (signing.key, 64 bytes)
    Blake2bHashingKey  - keyed BLAKE2b hashing key     (hashing.key, 64 bytes)

Key values are base64 text, optionally prefixed with "base64:". A value
of the form "file:<path>" names a key file instead; it is read once under
a shared lock and holds the same base64 text. Relative paths live under
paths.key_dir.

Generated keys are built in bytearrays that are zeroed on exit. The
CSPRNG output (secrets.token_bytes) is an immutable bytes object and is
left to the garbage collector, as is the decoded key that gets cached.
"""

from __future__ import annotations

import binascii
import logging
import secrets
from pathlib import Path
from typing import ClassVar, Final, Optional, Union

from securecrypt.core.config import CryptoConfig
from securecrypt.core.errors import ConfigurationError
from securecrypt.core.keys.cache import KeyRing, LazyKey
from securecrypt.core.keys.storage import read_key_file, write_key_file
from securecrypt.core.memory.zeroization import ZeroizeContext
from securecrypt.utils.encoding import KEY_PREFIX, b64encode_into, decode_key, encode_key

FILE_PREFIX: Final[str] = "file:"

logger = logging.getLogger(__name__)


class SymmetricKey:
    """
    Loader and generator for one configured symmetric key.

    Subclasses pin the configuration path, key length and variant name.

    Usage:
        key = AppKey(config)
        raw = key.get_key()          # loaded once, then cached

        text = key.generate()        # fresh "base64:..." value
        key.generate("/etc/app/app.key")   # persisted under an exclusive lock
    """

    CONFIG_KEY_PATH: ClassVar[str]
    KEY_LENGTH: ClassVar[int]
    VARIANT: ClassVar[str]

    __slots__ = ("_config", "_logger", "_key")

    def __init__(
        self,
        config: CryptoConfig,
        ring: Optional[KeyRing] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._logger = log or logger
        self._key: LazyKey[bytes] = (ring if ring is not None else KeyRing()).handle(
            self.VARIANT, self._load
        )

    def get_key(self) -> bytes:
        """
        Get the raw key bytes, loading them on first use.

        Raises:
            ConfigurationError: If the key is unset, not base64 or the wrong length
            KeyStorageError: If a key file cannot be read
        """
        return self._key.get()

    def _load(self) -> bytes:
        value = self._config.get(self.CONFIG_KEY_PATH)

        if value is None or not str(value).strip():
            raise ConfigurationError(
                f"{self.VARIANT} is not set (configure {self.CONFIG_KEY_PATH})"
            )

        value = str(value).strip()
        if value.startswith(FILE_PREFIX):
            key = self._load_file(self._config.resolve_key_path(value[len(FILE_PREFIX):]))
        else:
            key = self._decode(value)

        self._logger.debug("Loaded %s", self.VARIANT)
        return key

    def _load_file(self, path: Path) -> bytes:
        # base64 of the key, the optional prefix and a line terminator
        max_size = len(KEY_PREFIX) + 4 * (self.KEY_LENGTH // 3 + 1) + 2
        with ZeroizeContext() as wipe:
            raw = wipe.track(read_key_file(path, max_size, self._logger))
            try:
                text = raw.decode("ascii")
            except UnicodeDecodeError as exc:
                raise ConfigurationError(f"{self.VARIANT} file is not base64 text") from exc
            return self._decode(text.strip())

    def _decode(self, value: str) -> bytes:
        try:
            key = decode_key(value)
        except (binascii.Error, ValueError) as exc:
            raise ConfigurationError(f"{self.VARIANT} is not valid base64") from exc

        if len(key) != self.KEY_LENGTH:
            raise ConfigurationError(
                f"{self.VARIANT} must decode to exactly {self.KEY_LENGTH} bytes"
            )
        return key

    @classmethod
    def generate_key(cls) -> str:
        """Create a new random key as "base64:..." text."""
        return encode_key(secrets.token_bytes(cls.KEY_LENGTH))

    def generate(self, write: Optional[Union[str, Path]] = None) -> Optional[str]:
        """
        Generate a fresh key.

        Args:
            write: Target key file, relative to paths.key_dir unless absolute.
                When None the key is returned instead.

        Returns:
            "base64:..." text when write is None, otherwise None

        Raises:
            KeyStorageError: If the key file cannot be locked or written
        """
        with ZeroizeContext() as wipe:
            raw = wipe.track(bytearray(secrets.token_bytes(self.KEY_LENGTH)))

            if write is None:
                encoded = wipe.track(b64encode_into(raw, prefix=KEY_PREFIX.encode("ascii")))
                return encoded.decode("ascii")

            target = self._config.resolve_key_path(write)
            payload = wipe.track(b64encode_into(raw, prefix=KEY_PREFIX.encode("ascii"), suffix=b"\n"))
            write_key_file(target, payload, self._logger)

        self._logger.info("Generated %s at %s", self.VARIANT, target)
        return None

    def persist(self) -> None:
        """
        Generate a key into the file named by the configured "file:" value.

        Raises:
            ConfigurationError: If the configured value is not a "file:" reference
        """
        value = self._config.get(self.CONFIG_KEY_PATH)
        if value is None or not str(value).startswith(FILE_PREFIX):
            raise ConfigurationError(
                f"File for {self.VARIANT} is not set ({self.CONFIG_KEY_PATH} needs a file: value)"
            )
        self.generate(str(value)[len(FILE_PREFIX):])

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"{type(self).__name__}(loaded={self._key.loaded})"


class AppKey(SymmetricKey):
    """Key for the authenticated encryptors."""

    CONFIG_KEY_PATH = "encryption.key"
    KEY_LENGTH = 32
    VARIANT = "app key"

    __slots__ = ()


class HmacKey(SymmetricKey):
    """Key for the keyed-MAC signers."""

    CONFIG_KEY_PATH = "signing.key"
    KEY_LENGTH = 64
    VARIANT = "signing key"

    __slots__ = ()


class Blake2bHashingKey(SymmetricKey):
    """Key for the keyed BLAKE2b hasher."""

    CONFIG_KEY_PATH = "hashing.key"
    KEY_LENGTH = 64
    VARIANT = "hashing key"

    __slots__ = ()
