import hashlib
import logging

from remotecache.testutils import (
    new_silent_logger,
    random_data_and_digest,
    random_data_and_hash,
)

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_random_data_and_hash_consistent():
    data, hash_value = random_data_and_hash(1024)
    assert len(data) == 1024
    assert hashlib.sha256(data).hexdigest() == hash_value


def test_empty_blob_hash():
    data, hash_value = random_data_and_hash(0)
    assert data == b""
    assert hash_value == EMPTY_SHA256


def test_random_data_differs():
    first, _ = random_data_and_hash(64)
    second, _ = random_data_and_hash(64)
    assert first != second


def test_random_data_and_digest():
    data, digest = random_data_and_digest(256)
    assert digest.size_bytes == len(data)
    assert digest.hash == hashlib.sha256(data).hexdigest()


def test_silent_logger_emits_nothing(caplog):
    logger = new_silent_logger()
    with caplog.at_level(logging.DEBUG):
        logger.error("should not appear")
    assert caplog.records == []
    assert logger.propagate is False