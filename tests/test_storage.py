# --------------------------------------------------------------
# File: test_storage.py
# Description: Locked key file I/O and concurrent generation.
# --------------------------------------------------------------

import logging
import os
import threading

import pytest

import securecrypt.core.keys.storage as storage
from securecrypt.core.errors import KeyStorageError
from securecrypt.core.keys import EdDSASignerKey, parse_key_pair, read_key_file, write_key_file
from securecrypt.utils.paths import ensure_private_dir


def test_write_then_read(tmp_path):
    path = tmp_path / "nested" / "dir" / "secret.key"

    write_key_file(path, bytearray(b"first-content"))
    assert bytes(read_key_file(path, 100)) == b"first-content"

    write_key_file(path, b"short")
    assert path.read_bytes() == b"short"


def test_read_is_bounded_and_mutable(tmp_path):
    path = tmp_path / "secret.key"
    path.write_bytes(b"0123456789")

    data = read_key_file(path, 4)

    assert isinstance(data, bytearray)
    assert data == bytearray(b"0123")


def test_missing_or_empty_file_raises(tmp_path):
    with pytest.raises(KeyStorageError):
        read_key_file(tmp_path / "absent.key", 10)

    empty = tmp_path / "empty.key"
    empty.touch()
    with pytest.raises(KeyStorageError):
        read_key_file(empty, 10)


def test_storage_errors_are_os_errors(tmp_path):
    with pytest.raises(OSError):
        read_key_file(tmp_path / "absent.key", 10)


def test_lock_failure_is_fatal(tmp_path, monkeypatch):
    def refuse(handle, exclusive):
        raise OSError("lock refused")

    monkeypatch.setattr(storage, "_acquire", refuse)
    path = tmp_path / "secret.key"

    with pytest.raises(KeyStorageError, match="exclusive/writing"):
        write_key_file(path, b"payload")

    path.write_bytes(b"payload")
    with pytest.raises(KeyStorageError, match="shared/reading"):
        read_key_file(path, 10)


def test_unlock_failure_is_logged_not_raised(tmp_path, monkeypatch, caplog):
    def refuse(handle):
        raise OSError("unlock refused")

    monkeypatch.setattr(storage, "_release", refuse)
    log = logging.getLogger("tests.storage")
    path = tmp_path / "secret.key"

    with caplog.at_level(logging.WARNING, logger="tests.storage"):
        write_key_file(path, b"payload", log)
        data = read_key_file(path, 10, log)

    assert data == bytearray(b"payload")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert all("Error while unlocking file" in r.getMessage() for r in warnings)


def test_readers_take_shared_and_writers_exclusive_locks(tmp_path, monkeypatch):
    modes = []
    real_acquire = storage._acquire

    def recording(handle, exclusive):
        modes.append(exclusive)
        real_acquire(handle, exclusive)

    monkeypatch.setattr(storage, "_acquire", recording)
    path = tmp_path / "secret.key"

    write_key_file(path, b"payload")
    read_key_file(path, 10)

    assert modes == [True, False]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_new_files_and_directories_are_owner_only(tmp_path):
    path = tmp_path / "private" / "secret.key"
    write_key_file(path, b"payload")

    assert path.stat().st_mode & 0o777 == 0o600
    assert path.parent.stat().st_mode & 0o777 == 0o700


def test_ensure_private_dir_reports_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")

    with pytest.raises(KeyStorageError, match="was not created"):
        ensure_private_dir(blocker / "child")


def test_concurrent_generators_never_interleave(tmp_path, make_config):
    """Racing writers leave exactly one complete, well-formed key pair."""
    key_path = tmp_path / "keys" / "eddsa.key"
    config = make_config(signing={"eddsa_key_path": str(key_path)})
    errors = []

    def writer():
        try:
            for _ in range(10):
                EdDSASignerKey(config).generate(key_path)
                parse_key_pair(read_key_file(key_path, 193))
        except Exception as exc:  # collected and asserted below
            errors.append(exc)

    threads = [threading.Thread(target=writer) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    content = key_path.read_bytes()
    assert len(content) == 193
    public, private = parse_key_pair(content)
    assert private[32:] == public
