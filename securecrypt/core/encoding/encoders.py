"""
Payload Encoders
================

Turn application values into bytes before encryption and back after
decryption. The encryptor treats an encoder as an opaque pair of
serialize/deserialize functions.

Encoders:
    - JsonEncoder:   structured text (UTF-8 JSON)
    - PickleEncoder: compact binary, Python-native objects
    - BytesEncoder:  plain bytes/str passthrough

PickleEncoder only ever sees plaintext whose authentication tag has
already verified, so it never unpickles attacker-controlled bytes unless
the attacker holds the app key.
"""

from __future__ import annotations

import json
import pickle
from typing import Any, Optional, Protocol, runtime_checkable

from securecrypt.core.errors import SerializationError


@runtime_checkable
class Encoder(Protocol):
    """Serialization capability used by the authenticated encryptors."""

    def serialize(self, value: Any) -> bytes:
        ...

    def deserialize(self, data: bytes) -> Any:
        ...


class JsonEncoder:
    """
    UTF-8 JSON encoder.

    Extra keyword arguments are forwarded to json.dumps (e.g. sort_keys,
    default) so deployments can tune the output.
    """

    __slots__ = ("_dumps_options",)

    def __init__(self, **dumps_options: Any) -> None:
        dumps_options.setdefault("separators", (",", ":"))
        dumps_options.setdefault("ensure_ascii", False)
        self._dumps_options = dumps_options

    def serialize(self, value: Any) -> bytes:
        try:
            return json.dumps(value, **self._dumps_options).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Value is not JSON serializable: {exc}") from exc

    def deserialize(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError("Payload is not valid JSON") from exc


class PickleEncoder:
    """Compact binary encoder for arbitrary Python objects."""

    __slots__ = ("_protocol",)

    def __init__(self, protocol: Optional[int] = None) -> None:
        if protocol is not None and not 0 <= protocol <= pickle.HIGHEST_PROTOCOL:
            raise ValueError(f"Unsupported pickle protocol: {protocol}")
        self._protocol = protocol if protocol is not None else pickle.HIGHEST_PROTOCOL

    def serialize(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise SerializationError(f"Value cannot be pickled: {exc}") from exc

    def deserialize(self, data: bytes) -> Any:
        try:
            return pickle.loads(data)
        except (pickle.UnpicklingError, EOFError, ValueError, TypeError,
                AttributeError, ImportError, IndexError) as exc:
            raise SerializationError("Payload is not a valid pickle") from exc


class BytesEncoder:
    """
    Passthrough encoder for values that already are bytes or text.

    Text is encoded as UTF-8; deserialize always returns bytes.
    """

    __slots__ = ()

    def serialize(self, value: Any) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise SerializationError(
            f"BytesEncoder expects bytes or str, got {type(value).__name__}"
        )

    def deserialize(self, data: bytes) -> bytes:
        return bytes(data)
