"""Tests for CodecSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sqs_codec.algorithms import ChecksumAlgorithm, CompressionAlgorithm, EncodingAlgorithm
from sqs_codec.exceptions import UnsupportedAlgorithmError
from sqs_codec.metadata import CodecConfiguration
from sqs_codec.settings import SQS_MAX_MESSAGE_ATTRIBUTES, CodecSettings


def test_defaults() -> None:
    s = CodecSettings()
    assert s.compression is CompressionAlgorithm.NONE
    assert s.encoding is EncodingAlgorithm.NONE
    assert s.checksum is ChecksumAlgorithm.MD5
    assert s.prefer_smaller_payload is True
    assert s.max_message_attributes == SQS_MAX_MESSAGE_ATTRIBUTES == 10


def test_accepts_case_insensitive_ids() -> None:
    s = CodecSettings(compression="ZSTD", encoding="Base64-Std", checksum="SHA256")
    assert s.compression is CompressionAlgorithm.ZSTD
    assert s.encoding is EncodingAlgorithm.BASE64_STD
    assert s.checksum is ChecksumAlgorithm.SHA256


def test_unknown_id_raises_unsupported_algorithm() -> None:
    with pytest.raises(UnsupportedAlgorithmError, match="compression"):
        CodecSettings(compression="brotli")


def test_max_message_attributes_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        CodecSettings(max_message_attributes=0)


def test_settings_are_frozen() -> None:
    s = CodecSettings()
    with pytest.raises(ValidationError):
        s.checksum = ChecksumAlgorithm.NONE  # type: ignore[misc]


def test_configuration_reflects_settings() -> None:
    s = CodecSettings(compression="gzip", checksum="none")
    assert s.configuration() == CodecConfiguration(
        version=1,
        compression=CompressionAlgorithm.GZIP,
        encoding=EncodingAlgorithm.NONE,
        checksum=ChecksumAlgorithm.NONE,
    )


def test_with_returns_validated_copy() -> None:
    s = CodecSettings()
    changed = s.with_(compression="snappy", prefer_smaller_payload=False)
    assert changed.compression is CompressionAlgorithm.SNAPPY
    assert changed.prefer_smaller_payload is False
    assert s.compression is CompressionAlgorithm.NONE
    with pytest.raises(UnsupportedAlgorithmError):
        s.with_(checksum="crc32")
