"""
Crypto Service Container
========================

Builds the configured encryptor, encoder, signers and hashers.

Driver names are resolved into closed enums when the container is
created, so a typo in configuration fails at startup with
ConfigurationError instead of at first use. Components are built lazily
and share one KeyRing, so each key is loaded at most once.

Usage:
    services = CryptoServices(CryptoConfig.load())

    token = services.encryptor.encrypt({"id": 1})
    signature = services.signer.sign("payload")
    digest = services.hasher.hash("abc")
    services.public_key_signer.verify("payload", ed_signature)
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import cached_property
from typing import Optional, TypeVar

from securecrypt.core.config import CryptoConfig
from securecrypt.core.crypto.aead import AeadEncryptor
from securecrypt.core.crypto.aes_gcm import AesGcm256Encryptor
from securecrypt.core.crypto.chacha20 import ChaCha20Poly1305Encryptor
from securecrypt.core.crypto.xchacha20 import XChaCha20Poly1305Encryptor
from securecrypt.core.encoding.encoders import BytesEncoder, Encoder, JsonEncoder, PickleEncoder
from securecrypt.core.errors import ConfigurationError
from securecrypt.core.hashing.hashers import Blake2b, HashFunction, KeyedBlake2b, Sha256, Sha512
from securecrypt.core.keys.cache import Generator, KeyRing
from securecrypt.core.keys.eddsa import EdDSASignerKey
from securecrypt.core.keys.symmetric import AppKey, Blake2bHashingKey, HmacKey
from securecrypt.core.logging import configure_logging
from securecrypt.core.signing.eddsa import EdDSA
from securecrypt.core.signing.mac import HmacBlake2b, HmacSha256, HmacSha512, HmacSigner


class Cipher(str, Enum):
    AES_256_GCM = "aes-256-gcm"
    CHACHA20_POLY1305 = "chacha20-poly1305"
    XCHACHA20_POLY1305 = "xchacha20-poly1305"


class EncoderDriver(str, Enum):
    JSON = "json"
    PICKLE = "pickle"
    BYTES = "bytes"


class SigningDriver(str, Enum):
    HMAC_SHA256 = "hmac-sha256"
    HMAC_SHA512 = "hmac-sha512"
    HMAC_BLAKE2B = "hmac-blake2b"


class HashingDriver(str, Enum):
    BLAKE2B = "blake2b"
    SHA256 = "sha256"
    SHA512 = "sha512"


class KeyKind(str, Enum):
    APP = "app"
    HMAC = "hmac"
    HASHING = "hashing"
    EDDSA = "eddsa"


E = TypeVar("E", bound=Enum)


def resolve_driver(enum_cls: type[E], value: object, path: str) -> E:
    """
    Map a configured driver name onto its enum member.

    Raises:
        ConfigurationError: If the name is not one of the known drivers
    """
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        known = ", ".join(member.value for member in enum_cls)
        raise ConfigurationError(
            f"Unknown {path} driver {value!r} (expected one of: {known})"
        ) from None


class CryptoServices:
    """
    Lazily built, configuration-selected crypto components.

    Attributes are built on first access and cached for the lifetime of
    the container.
    """

    def __init__(
        self,
        config: Optional[CryptoConfig] = None,
        log: Optional[logging.Logger] = None,
        setup_logging: bool = False,
    ) -> None:
        self._config = config or CryptoConfig.get_instance()

        if setup_logging:
            configure_logging(self._config.logging)
        self._logger = log or logging.getLogger("securecrypt")

        self._cipher = resolve_driver(Cipher, self._config.encryption.cipher, "encryption.cipher")
        self._encoder_driver = resolve_driver(EncoderDriver, self._config.encoder.driver, "encoder.driver")
        self._signing_driver = resolve_driver(SigningDriver, self._config.signing.driver, "signing.driver")
        self._hashing_driver = resolve_driver(HashingDriver, self._config.hashing.driver, "hashing.driver")

        self._ring = KeyRing()

    @property
    def config(self) -> CryptoConfig:
        return self._config

    @property
    def cipher(self) -> Cipher:
        return self._cipher

    @property
    def key_ring(self) -> KeyRing:
        return self._ring

    # Key loaders

    @cached_property
    def app_key(self) -> AppKey:
        return AppKey(self._config, self._ring, self._logger)

    @cached_property
    def hmac_key(self) -> HmacKey:
        return HmacKey(self._config, self._ring, self._logger)

    @cached_property
    def hashing_key(self) -> Blake2bHashingKey:
        return Blake2bHashingKey(self._config, self._ring, self._logger)

    @cached_property
    def eddsa_key(self) -> EdDSASignerKey:
        return EdDSASignerKey(self._config, self._ring, self._logger)

    @property
    def generators(self) -> dict[KeyKind, Generator]:
        """Every key generator, by kind."""
        return {kind: self.generator(kind) for kind in KeyKind}

    def generator(self, kind: KeyKind | str) -> Generator:
        """Get the generator for one kind of key ("app", "hmac", "hashing", "eddsa")."""
        match resolve_driver(KeyKind, kind.value if isinstance(kind, KeyKind) else kind, "key"):
            case KeyKind.APP:
                return self.app_key
            case KeyKind.HMAC:
                return self.hmac_key
            case KeyKind.HASHING:
                return self.hashing_key
            case KeyKind.EDDSA:
                return self.eddsa_key

    # Components

    @cached_property
    def encoder(self) -> Encoder:
        match self._encoder_driver:
            case EncoderDriver.JSON:
                return JsonEncoder(
                    sort_keys=self._config.encoder.json_sort_keys,
                    ensure_ascii=self._config.encoder.json_ensure_ascii,
                )
            case EncoderDriver.PICKLE:
                return PickleEncoder(self._config.encoder.pickle_protocol)
            case EncoderDriver.BYTES:
                return BytesEncoder()

    @cached_property
    def encryptor(self) -> AeadEncryptor:
        match self._cipher:
            case Cipher.AES_256_GCM:
                return AesGcm256Encryptor(self.app_key, self.encoder)
            case Cipher.CHACHA20_POLY1305:
                return ChaCha20Poly1305Encryptor(self.app_key, self.encoder)
            case Cipher.XCHACHA20_POLY1305:
                return XChaCha20Poly1305Encryptor(self.app_key, self.encoder)

    @cached_property
    def signer(self) -> HmacSigner:
        match self._signing_driver:
            case SigningDriver.HMAC_SHA256:
                return HmacSha256(self.hmac_key)
            case SigningDriver.HMAC_SHA512:
                return HmacSha512(self.hmac_key)
            case SigningDriver.HMAC_BLAKE2B:
                digest_size = self._config.signing.blake2b_digest_size
                try:
                    return HmacBlake2b(self.hmac_key, digest_size)
                except ValueError as exc:
                    raise ConfigurationError(f"Invalid signing.blake2b_digest_size: {exc}") from exc

    @cached_property
    def public_key_signer(self) -> EdDSA:
        return EdDSA(self.eddsa_key)

    @cached_property
    def hasher(self) -> HashFunction:
        match self._hashing_driver:
            case HashingDriver.BLAKE2B:
                return Blake2b(self._config.hashing.output_length, self._logger)
            case HashingDriver.SHA256:
                return Sha256(self._logger)
            case HashingDriver.SHA512:
                return Sha512(self._logger)

    @cached_property
    def keyed_hasher(self) -> KeyedBlake2b:
        return KeyedBlake2b(self.hashing_key, self._config.hashing.output_length, self._logger)

    def __repr__(self) -> str:
        return (
            f"CryptoServices(cipher={self._cipher.value}, encoder={self._encoder_driver.value}, "
            f"signing={self._signing_driver.value}, hashing={self._hashing_driver.value})"
        )
