"""Envelope metadata — the compact ``key=value;...`` string in ``x-codec-meta``.

Canonical form::

    v=1;c=zstd;e=base64;h=md5;s=<checksum>;l=12

``s`` is omitted exactly when the checksum algorithm is ``none``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .algorithms import ChecksumAlgorithm, CompressionAlgorithm, EncodingAlgorithm
from .exceptions import (
    ChecksumMismatchError,
    DuplicateKeyError,
    MalformedMetadataError,
    MissingChecksumAlgorithmError,
    MissingChecksumValueError,
    UnsupportedVersionError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

CODEC_METADATA_ATTRIBUTE = "x-codec-meta"
CODEC_VERSION = 1

VERSION_KEY = "v"
COMPRESSION_KEY = "c"
ENCODING_KEY = "e"
CHECKSUM_ALGORITHM_KEY = "h"
CHECKSUM_VALUE_KEY = "s"
RAW_LENGTH_KEY = "l"

# Keys whose value may not be empty.
_NON_EMPTY_KEYS = frozenset(
    {VERSION_KEY, COMPRESSION_KEY, ENCODING_KEY, CHECKSUM_ALGORITHM_KEY}
)
_INTEGER = re.compile(r"[+-]?[0-9]+")


def coerce_algorithm(enum_cls: Any, value: Any) -> Any:
    """Pydantic ``mode="before"`` helper: accept members or case-insensitive ids."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        return enum_cls.from_id(value)
    return value


class CodecConfiguration(BaseModel):
    """Which algorithms were (or will be) applied to a message body."""

    model_config = ConfigDict(frozen=True)

    version: int = CODEC_VERSION
    compression: CompressionAlgorithm = CompressionAlgorithm.NONE
    encoding: EncodingAlgorithm = EncodingAlgorithm.NONE
    checksum: ChecksumAlgorithm = ChecksumAlgorithm.NONE

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value != CODEC_VERSION:
            raise UnsupportedVersionError(str(value))
        return value

    @field_validator("compression", mode="before")
    @classmethod
    def _compression_id(cls, value: Any) -> Any:
        return coerce_algorithm(CompressionAlgorithm, value)

    @field_validator("encoding", mode="before")
    @classmethod
    def _encoding_id(cls, value: Any) -> Any:
        return coerce_algorithm(EncodingAlgorithm, value)

    @field_validator("checksum", mode="before")
    @classmethod
    def _checksum_id(cls, value: Any) -> Any:
        return coerce_algorithm(ChecksumAlgorithm, value)

    @property
    def requires_decoding(self) -> bool:
        return (
            self.compression is not CompressionAlgorithm.NONE
            or self.encoding is not EncodingAlgorithm.NONE
        )

    @property
    def requires_checksum(self) -> bool:
        return self.checksum is not ChecksumAlgorithm.NONE

    def effective(self) -> CodecConfiguration:
        """Return a copy with the effective encoding substituted."""
        encoding = EncodingAlgorithm.effective_for(self.compression, self.encoding)
        if encoding is self.encoding:
            return self
        return self.model_copy(update={"encoding": encoding})


class EnvelopeMetadata(BaseModel):
    """Configuration plus checksum and raw length of one encoded message.

    ``checksum_value`` is present if and only if the configuration declares
    a checksum algorithm; any other combination cannot be constructed.
    """

    model_config = ConfigDict(frozen=True)

    configuration: CodecConfiguration
    checksum_value: str | None = None
    raw_length: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _checksum_presence(self) -> EnvelopeMetadata:
        if not self.configuration.requires_checksum:
            if self.checksum_value is not None:
                raise MissingChecksumAlgorithmError()
        elif self.checksum_value is None or not self.checksum_value.strip():
            raise MissingChecksumValueError(CHECKSUM_VALUE_KEY)
        return self

    @classmethod
    def for_payload(
        cls, configuration: CodecConfiguration, payload: bytes
    ) -> EnvelopeMetadata:
        """Describe *payload* (the raw, pre-compression bytes)."""
        checksum_value = None
        if configuration.requires_checksum:
            checksum_value = configuration.checksum.implementation.checksum(payload)
        return cls(
            configuration=configuration,
            checksum_value=checksum_value,
            raw_length=len(payload),
        )

    @classmethod
    def parse(cls, raw: str) -> EnvelopeMetadata:
        return parse_metadata(raw)

    def format(self) -> str:
        return format_metadata(self)

    def verify(self, payload: bytes) -> None:
        """Recompute the checksum over decoded *payload* and compare exactly.

        Raises:
            ChecksumMismatchError: If the checksums differ.
        """
        if not self.configuration.requires_checksum:
            return
        algorithm = self.configuration.checksum
        if algorithm.implementation.checksum(payload) != self.checksum_value:
            raise ChecksumMismatchError(algorithm.id)


def format_metadata(metadata: EnvelopeMetadata) -> str:
    """Serialize *metadata* in canonical, order-fixed form."""
    configuration = metadata.configuration
    segments = [
        f"{VERSION_KEY}={configuration.version}",
        f"{COMPRESSION_KEY}={configuration.compression.id}",
        f"{ENCODING_KEY}={configuration.encoding.id}",
        f"{CHECKSUM_ALGORITHM_KEY}={configuration.checksum.id}",
    ]
    if metadata.checksum_value is not None:
        segments.append(f"{CHECKSUM_VALUE_KEY}={metadata.checksum_value}")
    segments.append(f"{RAW_LENGTH_KEY}={metadata.raw_length}")
    return ";".join(segments)


def parse_metadata(raw: str) -> EnvelopeMetadata:
    """Parse an ``x-codec-meta`` value.

    Raises:
        MalformedMetadataError: Blank input, a segment without ``=``, an empty
            key, or an empty value for ``v``/``c``/``e``/``h``.
        DuplicateKeyError: A key repeated (after lower-casing).
        UnsupportedVersionError: ``v`` is not an integer or not supported.
        UnsupportedAlgorithmError: Unknown ``c``/``e``/``h`` id.
        MissingChecksumValueError: ``h`` set but ``s`` missing or blank.
        MissingChecksumAlgorithmError: ``s`` present while ``h`` is ``none``.
    """
    values = _tokenize(raw)

    version = _strict(values, VERSION_KEY, _parse_version, CODEC_VERSION)
    compression = _strict(
        values, COMPRESSION_KEY, CompressionAlgorithm.from_id, CompressionAlgorithm.NONE
    )
    encoding = _strict(
        values, ENCODING_KEY, EncodingAlgorithm.from_id, EncodingAlgorithm.NONE
    )
    checksum = _strict(
        values, CHECKSUM_ALGORITHM_KEY, ChecksumAlgorithm.from_id, ChecksumAlgorithm.NONE
    )
    checksum_value = _checksum_value(values, checksum)
    raw_length = _lenient(values, RAW_LENGTH_KEY, _parse_length, 0)

    return EnvelopeMetadata(
        configuration=CodecConfiguration(
            version=version,
            compression=compression,
            encoding=encoding,
            checksum=checksum,
        ),
        checksum_value=checksum_value,
        raw_length=raw_length,
    )


def _tokenize(raw: str) -> dict[str, str]:
    if not raw or not raw.strip():
        raise MalformedMetadataError(raw)
    values: dict[str, str] = {}
    for segment in raw.split(";"):
        entry = segment.strip()
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        key = key.strip().lower()
        value = value.strip()
        if not sep or not key:
            raise MalformedMetadataError(raw)
        if not value and key in _NON_EMPTY_KEYS:
            raise MalformedMetadataError(raw)
        if key in values:
            raise DuplicateKeyError(key)
        values[key] = value
    return values


def _strict(
    values: dict[str, str], key: str, parse: Callable[[str], T], default: T
) -> T:
    """Absent -> *default*; present -> *parse* (which raises on bad input)."""
    raw = values.get(key)
    if raw is None:
        return default
    return parse(raw)


def _lenient(
    values: dict[str, str], key: str, parse: Callable[[str], T], default: T
) -> T:
    """Absent, blank or unparsable -> *default*; never raises."""
    raw = values.get(key)
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


def _parse_version(raw: str) -> int:
    if not _INTEGER.fullmatch(raw) or int(raw) != CODEC_VERSION:
        raise UnsupportedVersionError(raw)
    return int(raw)


def _parse_length(raw: str) -> int:
    if not _INTEGER.fullmatch(raw):
        raise ValueError(f"not an integer: {raw!r}")
    length = int(raw)
    if length < 0:
        raise ValueError(f"negative length: {length}")
    return length


def _checksum_value(values: dict[str, str], checksum: ChecksumAlgorithm) -> str | None:
    value = values.get(CHECKSUM_VALUE_KEY)
    if checksum is ChecksumAlgorithm.NONE:
        if value is not None:
            raise MissingChecksumAlgorithmError()
        return None
    if not value:
        raise MissingChecksumValueError(CHECKSUM_VALUE_KEY)
    return value
