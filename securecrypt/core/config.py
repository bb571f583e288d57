"""
Crypto Configuration Module
===========================

Provides immutable, environment-aware configuration for the crypto services.

Features:
- Immutable configuration after initialization
- Environment variable override support (SECURECRYPT_ prefix)
- Dotted-path lookup used by key loaders ("signing.eddsa_key_path")
- Key values are never included in repr() or the config hash
- OS-aware default key directory
"""

from __future__ import annotations

import hashlib
import os
import platform
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Final, Mapping, Optional

from securecrypt.core.errors import ConfigurationError


# Fields holding key material or key locations
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "key", "secret", "private", "token", "password",
})

_MISSING: Final[object] = object()


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _get_default_key_dir() -> Path:
    """Get OS-appropriate default directory for persisted key files."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:  # Linux and others
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    return base / "SecureCrypt" / "keys"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    key_dir: Path = field(default_factory=_get_default_key_dir)

    def __post_init__(self) -> None:
        if not self.key_dir.is_absolute():
            raise ValueError(f"key_dir must be an absolute path: {self.key_dir}")


@dataclass(frozen=True, slots=True)
class EncryptionConfig:
    """Authenticated encryption settings."""

    cipher: str = "aes-256-gcm"
    key: Optional[str] = None


@dataclass(frozen=True, slots=True)
class EncoderConfig:
    """Payload serialization settings."""

    driver: str = "json"
    pickle_protocol: Optional[int] = None
    json_sort_keys: bool = False
    json_ensure_ascii: bool = False


@dataclass(frozen=True, slots=True)
class SigningConfig:
    """Symmetric and asymmetric signing settings."""

    driver: str = "hmac-sha256"
    key: Optional[str] = None
    eddsa_key_path: Optional[str] = None
    blake2b_digest_size: int = 64


@dataclass(frozen=True, slots=True)
class HashingConfig:
    """Hashing settings."""

    driver: str = "blake2b"
    key: Optional[str] = None
    output_length: int = 64


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


_SECTIONS: Final[dict[str, type]] = {
    "paths": PathConfig,
    "encryption": EncryptionConfig,
    "encoder": EncoderConfig,
    "signing": SigningConfig,
    "hashing": HashingConfig,
    "logging": LoggingConfig,
}


_PATH_FIELDS: Final[frozenset[str]] = frozenset({"key_dir", "log_dir"})
_INT_FIELDS: Final[frozenset[str]] = frozenset({"pickle_protocol"})


def _coerce(section: type, name: str, value: Any) -> Any:
    """Convert an environment string to the type of the target field."""
    if not isinstance(value, str):
        return value

    for f in fields(section):
        if f.name != name:
            continue
        if name in _PATH_FIELDS:
            return Path(value)
        if isinstance(f.default, bool):
            return value.lower() in {"1", "true", "yes", "on"}
        if isinstance(f.default, int) or name in _INT_FIELDS:
            return int(value)
        return value

    raise ConfigurationError(f"Unknown configuration option: {section.__name__}.{name}")


class CryptoConfig:
    """
    Centralized, immutable configuration with environment override support.

    Acts as the configuration provider for key loaders: get() resolves a
    dotted path ("encryption.key") to its value, or None when unset.

    Usage:
        config = CryptoConfig.load()
        cipher = config.encryption.cipher
        key_path = config.get("signing.eddsa_key_path")

        # Tests and embedding applications
        config = CryptoConfig.from_mapping({"encryption": {"key": "base64:..."}})
    """

    __slots__ = (
        "_paths", "_encryption", "_encoder", "_signing", "_hashing",
        "_logging", "_frozen", "_config_hash",
    )

    _instance: Optional[CryptoConfig] = None

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        encryption: Optional[EncryptionConfig] = None,
        encoder: Optional[EncoderConfig] = None,
        signing: Optional[SigningConfig] = None,
        hashing: Optional[HashingConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use CryptoConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_encryption", encryption or EncryptionConfig())
        object.__setattr__(self, "_encoder", encoder or EncoderConfig())
        object.__setattr__(self, "_signing", signing or SigningConfig())
        object.__setattr__(self, "_hashing", hashing or HashingConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Hash of the non-sensitive settings, for integrity checking."""
        parts = []
        for section in _SECTIONS:
            obj = getattr(self, f"_{section}")
            for f in fields(obj):
                if _is_sensitive_key(f.name):
                    continue
                parts.append(f"{section}.{f.name}={getattr(obj, f.name)}")
        return hashlib.sha256("|".join(parts).encode()).hexdigest()[:16]

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def encryption(self) -> EncryptionConfig:
        return self._encryption

    @property
    def encoder(self) -> EncoderConfig:
        return self._encoder

    @property
    def signing(self) -> SigningConfig:
        return self._signing

    @property
    def hashing(self) -> HashingConfig:
        return self._hashing

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        """Get configuration integrity hash."""
        return self._config_hash

    def get(self, path: str, default: Any = None) -> Any:
        """
        Resolve a dotted configuration path.

        Args:
            path: "<section>.<option>", e.g. "signing.eddsa_key_path"
            default: Returned when the option is unset (None)

        Returns:
            The configured value, or default

        Raises:
            ConfigurationError: If the path does not name a known option
        """
        section_name, _, option = path.partition(".")
        if section_name not in _SECTIONS or not option:
            raise ConfigurationError(f"Unknown configuration path: {path}")

        section = getattr(self, f"_{section_name}")
        value = getattr(section, option, _MISSING)
        if value is _MISSING:
            raise ConfigurationError(f"Unknown configuration path: {path}")

        return default if value is None else value

    @classmethod
    def from_mapping(cls, values: Mapping[str, Mapping[str, Any]]) -> CryptoConfig:
        """
        Build configuration from nested mappings.

        Example:
            CryptoConfig.from_mapping({
                "encryption": {"cipher": "chacha20-poly1305", "key": "base64:..."},
                "signing": {"eddsa_key_path": "/etc/app/eddsa.key"},
            })
        """
        kwargs: dict[str, Any] = {}
        for section_name, options in values.items():
            section = _SECTIONS.get(section_name)
            if section is None:
                raise ConfigurationError(f"Unknown configuration section: {section_name}")
            try:
                kwargs[section_name] = section(**{
                    name: _coerce(section, name, value) for name, value in options.items()
                })
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid {section_name} configuration: {exc}") from exc
        return cls(**kwargs)

    @classmethod
    def load(cls, env_prefix: str = "SECURECRYPT") -> CryptoConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables are prefixed with SECURECRYPT_ and use
        double underscores between section and option.

        Examples:
            SECURECRYPT_ENCRYPTION__CIPHER=chacha20-poly1305
            SECURECRYPT_ENCRYPTION__KEY=base64:...
            SECURECRYPT_SIGNING__EDDSA_KEY_PATH=/etc/app/eddsa.key
            SECURECRYPT_LOGGING__LEVEL=DEBUG

        Args:
            env_prefix: Prefix for environment variables (default: SECURECRYPT)

        Returns:
            Configured CryptoConfig instance
        """
        nested: dict[str, dict[str, Any]] = {}
        for config_key, value in cls._parse_env_overrides(env_prefix).items():
            section, _, option = config_key.partition(".")
            nested.setdefault(section, {})[option] = value
        return cls.from_mapping(nested)

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # SECURECRYPT_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")
                if "." not in config_key:
                    continue
                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> CryptoConfig:
        """Get or create the process-wide configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def resolve_key_path(self, path: str | Path) -> Path:
        """
        Resolve a key file location.

        Absolute paths are kept; relative ones live under paths.key_dir.
        """
        path = Path(path).expanduser()
        return path if path.is_absolute() else self._paths.key_dir / path

    def __repr__(self) -> str:
        """Safe string representation without key material."""
        return (
            f"CryptoConfig(hash={self._config_hash}, cipher={self._encryption.cipher}, "
            f"signing={self._signing.driver}, hashing={self._hashing.driver})"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("CryptoConfig is immutable after initialization")
        super().__setattr__(name, value)
