# --------------------------------------------------------------
# File: test_zeroization.py
# Description: Buffer wiping helpers.
# --------------------------------------------------------------

import pytest

from securecrypt.core.memory import ZeroizeContext, is_zeroed, secure_zero


def test_secure_zero_bytearray_and_memoryview():
    data = bytearray(b"secret")
    secure_zero(data)
    assert data == bytearray(6)

    backing = bytearray(b"secret")
    secure_zero(memoryview(backing)[1:4])
    assert backing == bytearray(b"s\x00\x00\x00et")

    secure_zero(bytearray())


def test_read_only_view_is_rejected():
    with pytest.raises(TypeError):
        secure_zero(memoryview(b"secret"))


def test_context_wipes_on_exception():
    up_front = bytearray(b"first")

    with pytest.raises(RuntimeError):
        with ZeroizeContext(up_front) as wipe:
            tracked = wipe.track(bytearray(b"second"))
            raise RuntimeError("boom")

    assert is_zeroed(up_front)
    assert is_zeroed(tracked)


def test_context_wipes_on_early_return():
    def produce():
        with ZeroizeContext() as wipe:
            buf = wipe.track(bytearray(b"secret"))
            return buf

    assert is_zeroed(produce())
