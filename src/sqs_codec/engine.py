"""EnvelopeEngine — outbound encode and inbound decode decisions for one message."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .algorithms import CompressionAlgorithm, EncodingAlgorithm
from .attributes import attribute_value, has_codec_metadata, string_attribute
from .codec import Codec
from .exceptions import (
    AttributeBudgetExceededError,
    InvalidPayloadError,
    MalformedMetadataError,
)
from .metadata import CODEC_METADATA_ATTRIBUTE, CodecConfiguration, EnvelopeMetadata
from .settings import CodecSettings

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodecMessage:
    """Body and attributes produced by one encode/decode call."""

    body: str
    attributes: dict[str, Any] = field(default_factory=dict)


class EnvelopeEngine:
    """Applies :class:`CodecSettings` to outbound messages and reverses them inbound.

    Stateless apart from its settings; one instance may serve any number of
    messages concurrently. Every method either returns a complete result or
    raises a :class:`~sqs_codec.exceptions.CodecError` without touching its
    inputs.
    """

    def __init__(self, settings: CodecSettings | None = None) -> None:
        self.settings = settings or CodecSettings()

    # ── Outbound ────────────────────────────────────────────────────

    def encode_outbound(
        self, body: str, attributes: Mapping[str, Any] | None = None
    ) -> CodecMessage:
        """Encode *body* and attach the ``x-codec-meta`` attribute.

        Messages that already carry the attribute were encoded upstream; they
        are verified and returned unchanged.

        Raises:
            AttributeBudgetExceededError: Too many attributes for the transport.
            CodecError: Pre-encoded message with invalid metadata, body or checksum.
        """
        attributes = attributes or {}
        if has_codec_metadata(attributes):
            logger.debug(
                "Message already carries %s; skipping outbound encoding",
                CODEC_METADATA_ATTRIBUTE,
            )
            metadata = self._metadata(attributes)
            payload = self._decode_payload(body, metadata.configuration)
            metadata.verify(payload)
            self._check_attribute_count(len(attributes))
            return CodecMessage(body=body, attributes=dict(attributes))

        payload = body.encode("utf-8")
        configuration = self.settings.configuration().effective()
        encoded = Codec(configuration.compression, configuration.encoding).encode(
            payload
        )
        if self._should_send_raw(payload, encoded, configuration):
            logger.debug(
                "Compressed body is larger than raw body (%d > %d bytes); sending raw",
                len(encoded),
                len(payload),
            )
            encoded = payload
            configuration = configuration.model_copy(
                update={
                    "compression": CompressionAlgorithm.NONE,
                    "encoding": EncodingAlgorithm.NONE,
                }
            )

        metadata = EnvelopeMetadata.for_payload(configuration, payload)
        merged = dict(attributes)
        merged[CODEC_METADATA_ATTRIBUTE] = string_attribute(metadata.format())
        self._check_attribute_count(len(merged))
        return CodecMessage(body=encoded.decode("utf-8"), attributes=merged)

    def _should_send_raw(
        self, payload: bytes, encoded: bytes, configuration: CodecConfiguration
    ) -> bool:
        return (
            self.settings.prefer_smaller_payload
            and configuration.compression is not CompressionAlgorithm.NONE
            and len(encoded) > len(payload)
        )

    def _check_attribute_count(self, count: int) -> None:
        maximum = self.settings.max_message_attributes
        if count > maximum:
            raise AttributeBudgetExceededError(count, maximum)

    # ── Inbound ─────────────────────────────────────────────────────

    def decode_inbound(
        self, body: str, attributes: Mapping[str, Any] | None = None
    ) -> CodecMessage:
        """Decode *body* according to its ``x-codec-meta`` attribute.

        Messages without the attribute, or whose metadata declares no
        transform and no checksum, are returned unchanged. The attribute is
        kept on decoded messages.

        Raises:
            CodecMetadataError: Malformed, duplicate-key or unsupported metadata.
            UnsupportedAlgorithmError: Unknown algorithm id in the metadata.
            InvalidPayloadError: The body cannot be decoded.
            ChecksumValidationError: Missing or mismatching checksum.
        """
        attributes = attributes or {}
        if not has_codec_metadata(attributes):
            return CodecMessage(body=body, attributes=dict(attributes))

        metadata = self._metadata(attributes)
        configuration = metadata.configuration
        if not configuration.requires_decoding and not configuration.requires_checksum:
            return CodecMessage(body=body, attributes=dict(attributes))

        payload = self._decode_payload(body, configuration)
        metadata.verify(payload)
        if not configuration.requires_decoding:
            return CodecMessage(body=body, attributes=dict(attributes))
        try:
            decoded = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidPayloadError("Decoded payload is not valid UTF-8", e) from e
        return CodecMessage(body=decoded, attributes=dict(attributes))

    # ── Shared ──────────────────────────────────────────────────────

    @staticmethod
    def _metadata(attributes: Mapping[str, Any]) -> EnvelopeMetadata:
        raw = attribute_value(attributes, CODEC_METADATA_ATTRIBUTE)
        if raw is None:
            raise MalformedMetadataError(str(raw))
        return EnvelopeMetadata.parse(raw)

    @staticmethod
    def _decode_payload(body: str, configuration: CodecConfiguration) -> bytes:
        payload = body.encode("utf-8")
        if not configuration.requires_decoding:
            return payload
        return Codec(configuration.compression, configuration.encoding).decode(payload)
