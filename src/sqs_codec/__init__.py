"""Payload envelope codec for SQS — compression, encoding, checksums, metadata."""

from __future__ import annotations

from .algorithms import (
    AlgorithmFamily,
    ChecksumAlgorithm,
    CompressionAlgorithm,
    EncodingAlgorithm,
    resolve,
)
from .attributes import ensure_codec_attribute_requested
from .codec import Codec
from .engine import CodecMessage, EnvelopeEngine
from .exceptions import (
    AttributeBudgetExceededError,
    ChecksumMismatchError,
    ChecksumValidationError,
    CodecConnectionError,
    CodecError,
    CodecMetadataError,
    DuplicateKeyError,
    InvalidPayloadError,
    MalformedMetadataError,
    MissingChecksumAlgorithmError,
    MissingChecksumValueError,
    UnavailableAlgorithmError,
    UnsupportedAlgorithmError,
    UnsupportedVersionError,
)
from .interceptor import SqsCodecInterceptor
from .metadata import (
    CODEC_METADATA_ATTRIBUTE,
    CODEC_VERSION,
    CodecConfiguration,
    EnvelopeMetadata,
    format_metadata,
    parse_metadata,
)
from .settings import CodecSettings

__all__ = [
    "CODEC_METADATA_ATTRIBUTE",
    "CODEC_VERSION",
    "AlgorithmFamily",
    "AttributeBudgetExceededError",
    "ChecksumAlgorithm",
    "ChecksumMismatchError",
    "ChecksumValidationError",
    "Codec",
    "CodecConfiguration",
    "CodecConnectionError",
    "CodecError",
    "CodecMessage",
    "CodecMetadataError",
    "CodecSettings",
    "CompressionAlgorithm",
    "DuplicateKeyError",
    "EncodingAlgorithm",
    "EnvelopeEngine",
    "EnvelopeMetadata",
    "InvalidPayloadError",
    "MalformedMetadataError",
    "MissingChecksumAlgorithmError",
    "MissingChecksumValueError",
    "SqsCodecInterceptor",
    "UnavailableAlgorithmError",
    "UnsupportedAlgorithmError",
    "UnsupportedVersionError",
    "ensure_codec_attribute_requested",
    "format_metadata",
    "parse_metadata",
    "resolve",
]
