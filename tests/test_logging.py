# --------------------------------------------------------------
# File: test_logging.py
# Description: Key-material redaction and logger configuration.
# --------------------------------------------------------------

import json
import logging
from pathlib import Path

import pytest

from securecrypt.core.config import LoggingConfig
from securecrypt.core.keys import AppKey
from securecrypt.core.logging import (
    SecureLogFilter,
    StructuredLogFormatter,
    configure_logging,
    get_secure_logger,
    redact_key_material,
)


def _record(msg, args=()):
    return logging.LogRecord("tests", logging.INFO, __file__, 1, msg, args, None)


def test_filter_redacts_app_keys_in_message_and_args():
    key = AppKey.generate_key()
    secure_filter = SecureLogFilter()

    record = _record("loaded " + key)
    assert secure_filter.filter(record) is True
    assert key not in record.getMessage()
    assert "[REDACTED]" in record.getMessage()

    record = _record("configured %s", (key,))
    secure_filter.filter(record)
    assert key not in record.getMessage()


def test_filter_redacts_hex_and_assignments():
    secure_filter = SecureLogFilter()

    record = _record("pair " + "ab" * 32)
    secure_filter.filter(record)
    assert "ab" * 32 not in record.getMessage()

    record = _record("signing_key=hunter2")
    secure_filter.filter(record)
    assert "hunter2" not in record.getMessage()


def test_filter_leaves_ordinary_messages():
    record = _record("Generated %s at %s", ("app key", "app.key"))
    SecureLogFilter().filter(record)

    assert record.getMessage() == "Generated app key at app.key"


def test_structured_formatter_emits_json():
    payload = json.loads(StructuredLogFormatter().format(_record("hello")))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tests"


def test_configure_logging_writes_filtered_file(tmp_path):
    settings = LoggingConfig(level="DEBUG", enable_console=False, enable_file=True, log_dir=tmp_path)
    logger = configure_logging(settings, name="tests.configured")

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert all(any(isinstance(f, SecureLogFilter) for f in h.filters) for h in logger.handlers)

    key = AppKey.generate_key()
    logger.info("key is %s", key)
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "tests_configured.log").read_text()
    assert "key is" in content
    assert key not in content

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_get_secure_logger_is_idempotent():
    first = get_secure_logger("tests.idempotent", enable_console=True)
    count = len(first.handlers)

    assert get_secure_logger("tests.idempotent") is first
    assert len(first.handlers) == count


def test_redact_key_material_labels_each_kind():
    assert redact_key_material("using " + AppKey.generate_key()) == "using app_key=[REDACTED]"
    assert redact_key_material("hashing_key: abc123") == "secret=[REDACTED]"
    assert redact_key_material("nothing to hide") == "nothing to hide"


@pytest.mark.parametrize(
    "path",
    [
        "/var/lib/myapplication/production_keys/app_encryption",
        Path("/var/lib/myapplication/production_keys/app_encryption"),
        Path("/srv/applicationdata/persistentstorage/cryptographickeys/appkey"),
    ],
)
def test_generated_key_log_line_keeps_its_path(path):
    record = _record("Generated %s at %s", ("app key", path))
    SecureLogFilter().filter(record)

    assert record.getMessage() == f"Generated app key at {path}"


def test_persisted_key_path_reaches_the_log(tmp_path, make_config, caplog):
    key_path = tmp_path / "production_keys" / "app_encryption"
    loader = AppKey(make_config(), log=logging.getLogger("tests.persisted"))

    with caplog.at_level(logging.INFO, logger="tests.persisted"):
        loader.generate(key_path)

    record = caplog.records[-1]
    SecureLogFilter().filter(record)
    assert record.getMessage() == f"Generated app key at {key_path}"


def test_configure_logging_writes_json_lines(tmp_path):
    settings = LoggingConfig(enable_console=False, enable_file=True, enable_json=True, log_dir=tmp_path)
    logger = configure_logging(settings, name="tests.json")

    logger.info("structured %s", "entry")
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)

    line = (tmp_path / "tests_json.log").read_text().splitlines()[0]
    assert json.loads(line)["message"] == "structured entry"
