# --------------------------------------------------------------
# File: test_encoders.py
# Description: Payload encoders used by the encryptors.
# --------------------------------------------------------------

import pytest

from securecrypt.core.encoding import BytesEncoder, Encoder, JsonEncoder, PickleEncoder
from securecrypt.core.errors import SerializationError


def test_encoders_satisfy_protocol():
    for encoder in (JsonEncoder(), PickleEncoder(), BytesEncoder()):
        assert isinstance(encoder, Encoder)


def test_json_is_compact_utf8():
    encoder = JsonEncoder()

    assert encoder.serialize({"a": [1, 2]}) == b'{"a":[1,2]}'
    assert encoder.serialize("Zoë") == '"Zoë"'.encode("utf-8")
    assert encoder.deserialize(b'["data"]') == ["data"]


def test_json_options_are_forwarded():
    assert JsonEncoder(sort_keys=True).serialize({"b": 1, "a": 2}) == b'{"a":2,"b":1}'


def test_json_failures():
    with pytest.raises(SerializationError):
        JsonEncoder().serialize({1, 2})

    with pytest.raises(SerializationError):
        JsonEncoder().deserialize(b"{not json")

    with pytest.raises(SerializationError):
        JsonEncoder().deserialize(b"\xff")


def test_pickle_protocol_and_failures():
    assert PickleEncoder(2).deserialize(PickleEncoder(2).serialize((1, "a"))) == (1, "a")

    with pytest.raises(ValueError):
        PickleEncoder(99)

    with pytest.raises(SerializationError):
        PickleEncoder().serialize(lambda: None)

    with pytest.raises(SerializationError):
        PickleEncoder().deserialize(b"garbage")


def test_bytes_encoder():
    encoder = BytesEncoder()

    assert encoder.serialize("text") == b"text"
    assert encoder.serialize(bytearray(b"\x00")) == b"\x00"
    assert encoder.deserialize(b"\x01") == b"\x01"

    with pytest.raises(SerializationError):
        encoder.serialize(12)
