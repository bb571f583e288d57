"""
Memory Zeroization
==================

Explicit wiping of buffers that held key material.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- Only mutable buffers (bytearray, memoryview) can be wiped
- These are best-effort mitigations
"""

from securecrypt.core.memory.zeroization import (
    secure_zero,
    is_zeroed,
    ZeroizeContext,
)

__all__ = [
    "secure_zero",
    "is_zeroed",
    "ZeroizeContext",
]
