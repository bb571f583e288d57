"""
Memory Zeroization Utilities
============================

Explicit wiping of buffers that held key material.

Python cannot guarantee erasure of immutable objects (bytes, str), so
every secret that passes through key generation is built in a
bytearray and wiped through these helpers before it leaves scope.
"""

from __future__ import annotations

import ctypes


def secure_zero(data: bytearray | memoryview) -> None:
    """
    Zero a mutable byte buffer in place.

    bytearrays are overwritten with ctypes.memset (zero, 0xFF, zero);
    writable memoryviews are overwritten through slice assignment.

    Args:
        data: Mutable byte buffer to zero
    """
    if len(data) == 0:
        return

    if isinstance(data, memoryview):
        if data.readonly:
            raise TypeError("Cannot zero a read-only memoryview")
        data[:] = bytes(len(data))
        return

    size = len(data)
    addr = ctypes.addressof((ctypes.c_char * size).from_buffer(data))
    ctypes.memset(addr, 0, size)
    ctypes.memset(addr, 0xFF, size)
    ctypes.memset(addr, 0, size)


def is_zeroed(data: bytearray | memoryview) -> bool:
    """Check whether every byte of a buffer is zero."""
    return not any(data)


class ZeroizeContext:
    """
    Context manager that zeroizes buffers on exit, normal or exceptional.

    Buffers can be handed over up front or tracked as they are created:

        with ZeroizeContext() as wipe:
            raw = wipe.track(bytearray(secrets.token_bytes(32)))
            encoded = wipe.track(bytearray(raw.hex(), "ascii"))
            write(encoded)
        # raw and encoded are now zeroed
    """

    __slots__ = ("_buffers",)

    def __init__(self, *buffers: bytearray) -> None:
        self._buffers: list[bytearray] = list(buffers)

    def track(self, buffer: bytearray) -> bytearray:
        """Register a buffer for zeroization and return it."""
        self._buffers.append(buffer)
        return buffer

    def wipe(self) -> None:
        """Zero every tracked buffer."""
        for buf in self._buffers:
            secure_zero(buf)

    def __enter__(self) -> ZeroizeContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.wipe()
