"""
Key Loading Contracts and Load-Once Cache
=========================================

Key material is read from its source at most once per process. The
cached value is immutable and shared by every thread that asks for it.

    LazyKey   - load-once holder guarded by a lock
    KeyRing   - shared owner of LazyKey handles, one per key variant;
                the service container creates one and hands it to every
                loader it builds
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Generic, Optional, Protocol, TypeVar, Union, runtime_checkable

KeyMaterial = Union[bytes, tuple[bytes, bytes]]

K = TypeVar("K")


@runtime_checkable
class Loader(Protocol):
    """Capability returning the current key material."""

    def get_key(self) -> KeyMaterial:
        ...


@runtime_checkable
class Generator(Protocol):
    """Capability producing fresh key material, optionally persisted."""

    def generate(self, write: Optional[Union[str, Path]] = None) -> Optional[str]:
        ...


class LazyKey(Generic[K]):
    """
    Load-once holder for key material.

    The first get() runs the factory under a lock; concurrent first
    callers wait and then observe the same value. A factory that raises
    leaves the holder empty, so a later call can try again.
    """

    __slots__ = ("_factory", "_value", "_loaded", "_lock")

    def __init__(self, factory: Callable[[], K]) -> None:
        self._factory = factory
        self._value: Optional[K] = None
        self._loaded = False
        self._lock = threading.Lock()

    def get(self) -> K:
        if self._loaded:
            return self._value  # type: ignore[return-value]

        with self._lock:
            if not self._loaded:
                self._value = self._factory()
                self._loaded = True

        return self._value  # type: ignore[return-value]

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"LazyKey(loaded={self._loaded})"


class KeyRing:
    """
    Shared owner of the lazily loaded keys of one application.

    handle() returns the same LazyKey for the same variant, so every
    loader built against one ring shares one cached copy of each key.
    """

    __slots__ = ("_handles", "_lock")

    def __init__(self) -> None:
        self._handles: dict[str, LazyKey] = {}
        self._lock = threading.Lock()

    def handle(self, variant: str, factory: Callable[[], K]) -> LazyKey[K]:
        with self._lock:
            lazy = self._handles.get(variant)
            if lazy is None:
                lazy = LazyKey(factory)
                self._handles[variant] = lazy
            return lazy

    def is_loaded(self, variant: str) -> bool:
        lazy = self._handles.get(variant)
        return lazy is not None and lazy.loaded

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"KeyRing(variants={sorted(self._handles)})"
