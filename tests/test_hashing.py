# --------------------------------------------------------------
# File: test_hashing.py
# Description: Determinism, encoding and failure reporting of the hashers.
# --------------------------------------------------------------

import hashlib
import logging

import pytest

from securecrypt.core.errors import ConfigurationError
from securecrypt.core.hashing import Blake2b, KeyedBlake2b, Sha256, Sha512
from securecrypt.core.keys import Blake2bHashingKey
from securecrypt.utils.encoding import b64url_decode, b64url_encode


def test_keyed_digest_is_stable(key_loader):
    """Keyed digest of "abc" twice with the same key: same 64 bytes, same text."""
    hasher = KeyedBlake2b(key_loader(length=64))

    first = hasher.hash("abc")
    second = hasher.hash("abc")

    assert first == second
    assert len(b64url_decode(first)) == 64
    assert hasher.hash_raw("abc") == b64url_decode(first)


def test_keyed_digest_depends_on_input_and_key(key_loader):
    loader = key_loader(length=64)
    hasher = KeyedBlake2b(loader)

    assert hasher.hash("abc") != hasher.hash("abd")
    assert KeyedBlake2b(key_loader(length=64)).hash("abc") != hasher.hash("abc")

    expected = hashlib.blake2b(b"abc", key=loader.key, digest_size=64).digest()
    assert hasher.hash_raw(b"abc") == expected


def test_keyed_digest_with_configured_key(make_config):
    config = make_config(hashing={"key": Blake2bHashingKey.generate_key()})
    hasher = KeyedBlake2b(Blake2bHashingKey(config), output_length=32)

    assert len(hasher.hash_raw("abc")) == 32


def test_keyed_digest_without_key_raises(make_config):
    hasher = KeyedBlake2b(Blake2bHashingKey(make_config()))

    with pytest.raises(ConfigurationError):
        hasher.hash("abc")


@pytest.mark.parametrize(
    "hasher, reference",
    [
        (Blake2b(), lambda data: hashlib.blake2b(data).digest()),
        (Blake2b(32), lambda data: hashlib.blake2b(data, digest_size=32).digest()),
        (Sha256(), lambda data: hashlib.sha256(data).digest()),
        (Sha512(), lambda data: hashlib.sha512(data).digest()),
    ],
    ids=["blake2b-64", "blake2b-32", "sha256", "sha512"],
)
def test_unkeyed_digests_match_hashlib(hasher, reference):
    assert hasher.hash_raw("abc") == reference(b"abc")
    assert hasher.hash("abc") == b64url_encode(reference(b"abc"))
    assert "=" not in hasher.hash("abc")


def test_rejected_parameters_return_none_and_warn(caplog):
    log = logging.getLogger("tests.hashing")
    hasher = Blake2b(output_length=100, log=log)

    with caplog.at_level(logging.WARNING, logger="tests.hashing"):
        assert hasher.hash("abc") is None
        assert hasher.hash_raw("abc") is None

    assert "BLAKE2b rejected its input" in caplog.text
