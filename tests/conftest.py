# --------------------------------------------------------------
# File: conftest.py
# Description: Shared fixtures: in-memory key loaders and isolated configuration.
# --------------------------------------------------------------

import secrets
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

import pytest

from securecrypt.core.config import CryptoConfig
from securecrypt.utils.encoding import decode_key


class InMemoryKeyLoader:
    """Loader serving a fixed key, accepting "base64:" text or raw bytes."""

    def __init__(self, key: Optional[bytes | str] = None, length: int = 32) -> None:
        if key is None:
            key = secrets.token_bytes(length)
        if isinstance(key, str):
            key = decode_key(key)
        self.key = key
        self.calls = 0

    def get_key(self) -> bytes:
        self.calls += 1
        return self.key


@pytest.fixture(autouse=True)
def _isolate_config() -> Iterator[None]:
    """Drop the process-wide configuration around every test."""
    CryptoConfig.reset_instance()
    yield
    CryptoConfig.reset_instance()


@pytest.fixture
def key_loader() -> Callable[..., InMemoryKeyLoader]:
    return InMemoryKeyLoader


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., CryptoConfig]:
    """Build a CryptoConfig whose key directory lives under tmp_path.

    Keyword arguments are sections, e.g. make_config(encryption={"key": ...}).
    """

    def _make(**sections: dict[str, Any]) -> CryptoConfig:
        values: dict[str, dict[str, Any]] = {"paths": {"key_dir": tmp_path / "keys"}}
        values.update(sections)
        return CryptoConfig.from_mapping(values)

    return _make
