# --------------------------------------------------------------
# File: test_encryption.py
# Description: Round trip, nonce and tamper tests for the AEAD encryptors.
# --------------------------------------------------------------

import pytest

from securecrypt.core.crypto import (
    AesGcm256Encryptor,
    ChaCha20Poly1305Encryptor,
    XChaCha20Poly1305Encryptor,
)
from securecrypt.core.encoding import BytesEncoder, PickleEncoder
from securecrypt.core.errors import (
    CryptoError,
    IntegrityError,
    MalformedPayloadError,
    SerializationError,
)
from securecrypt.core.keys import AppKey
from securecrypt.utils.encoding import b64url_decode

ENCRYPTORS = [AesGcm256Encryptor, ChaCha20Poly1305Encryptor, XChaCha20Poly1305Encryptor]


@pytest.fixture(params=ENCRYPTORS, ids=lambda cls: cls.ALGORITHM)
def encryptor_cls(request):
    return request.param


def test_generated_key_encrypts_and_decrypts_text(encryptor_cls, make_config):
    """Generate a key, encrypt text without serialization and read it back."""
    config = make_config(encryption={"key": encryptor_cls.generate_key()})
    encryptor = encryptor_cls(AppKey(config))

    token = encryptor.encrypt("hello world", serialize=False)
    assert encryptor.decrypt(token, serialize=False) == "hello world"

    token = encryptor.encrypt_string("hello world")
    assert encryptor.decrypt_string(token) == "hello world"


def test_serialized_value_round_trip(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())

    token = encryptor.encrypt(["data"])
    assert encryptor.decrypt(token) == ["data"]

    nested = {"user": 42, "roles": ["admin", "ops"], "name": "Zoë", "active": True}
    assert encryptor.decrypt(encryptor.encrypt(nested)) == nested


def test_ciphertext_is_unpadded_urlsafe_frame(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    token = encryptor.encrypt_string("abc")

    assert "=" not in token
    assert "+" not in token and "/" not in token

    frame = b64url_decode(token)
    assert len(frame) == encryptor_cls.NONCE_SIZE + len("abc") + encryptor_cls.TAG_SIZE


def test_same_plaintext_gives_different_ciphertexts(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())

    first = encryptor.encrypt_string("same")
    second = encryptor.encrypt_string("same")

    assert first != second
    assert b64url_decode(first)[:encryptor_cls.NONCE_SIZE] != b64url_decode(second)[:encryptor_cls.NONCE_SIZE]


def test_corrupted_ciphertext_string_fails(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    token = encryptor.encrypt("hello world")

    position = len(token) // 2
    replacement = "A" if token[position] != "A" else "B"
    corrupted = token[:position] + replacement + token[position + 1:]

    with pytest.raises(CryptoError):
        encryptor.decrypt(corrupted)


def test_every_flipped_frame_byte_is_rejected(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    frame = encryptor.encrypt_raw(b"secret payload")

    for index in range(len(frame)):
        tampered = bytearray(frame)
        tampered[index] ^= 0x01
        with pytest.raises(IntegrityError):
            encryptor.decrypt_raw(tampered)


def test_tampered_last_character_fails(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    token = encryptor.encrypt_string("tail")

    replacement = "A" if token[-1] != "A" else "B"
    with pytest.raises(CryptoError):
        encryptor.decrypt_string(token[:-1] + replacement)


def test_wrong_key_fails_integrity(encryptor_cls, key_loader):
    token = encryptor_cls(key_loader()).encrypt_string("hello")

    with pytest.raises(IntegrityError):
        encryptor_cls(key_loader()).decrypt_string(token)


def test_short_or_undecodable_payload_is_malformed(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())

    with pytest.raises(MalformedPayloadError):
        encryptor.decrypt_raw(b"\x00" * (encryptor_cls.NONCE_SIZE + encryptor_cls.TAG_SIZE - 1))

    with pytest.raises(MalformedPayloadError):
        encryptor.decrypt("not base64 at all!")


def test_empty_plaintext_round_trip(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    assert encryptor.decrypt_string(encryptor.encrypt_string("")) == ""


def test_pickle_and_bytes_encoders(encryptor_cls, key_loader):
    loader = key_loader()

    pickled = encryptor_cls(loader, PickleEncoder())
    value = {"tuple": (1, 2), "set": {"a"}, "bytes": b"\x00\xff"}
    assert pickled.decrypt(pickled.encrypt(value)) == value

    raw = encryptor_cls(loader, BytesEncoder())
    assert raw.decrypt(raw.encrypt(b"\x00\x01\x02")) == b"\x00\x01\x02"


def test_unserializable_values_raise(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())

    with pytest.raises(SerializationError):
        encryptor.encrypt(object())

    with pytest.raises(SerializationError):
        encryptor.encrypt(123, serialize=False)


def test_non_utf8_plaintext_cannot_be_read_as_text(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader())
    token = encryptor.encrypt(b"\xff\xfe", serialize=False)

    with pytest.raises(SerializationError):
        encryptor.decrypt_string(token)


def test_wrong_length_key_is_rejected(encryptor_cls, key_loader):
    encryptor = encryptor_cls(key_loader(length=16))

    with pytest.raises(CryptoError):
        encryptor.encrypt_string("x")



def test_xchacha_frames_carry_an_extended_nonce(key_loader):
    loader = key_loader()
    encryptor = XChaCha20Poly1305Encryptor(loader)

    frame = encryptor.encrypt_raw(b"payload")
    assert len(frame) == 24 + len(b"payload") + 16
    assert encryptor.decrypt_raw(frame) == b"payload"

    # A 12-byte nonce frame from the IETF variant does not verify here
    ietf_frame = ChaCha20Poly1305Encryptor(loader).encrypt_raw(b"payload")
    with pytest.raises(IntegrityError):
        encryptor.decrypt_raw(ietf_frame)
