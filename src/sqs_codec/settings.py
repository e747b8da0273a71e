"""CodecSettings — outbound algorithm choice and transport limits."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .algorithms import ChecksumAlgorithm, CompressionAlgorithm, EncodingAlgorithm
from .metadata import CODEC_VERSION, CodecConfiguration, coerce_algorithm

SQS_MAX_MESSAGE_ATTRIBUTES = 10


class CodecSettings(BaseModel):
    """Configuration for outbound encoding.

    Algorithm fields accept enum members or case-insensitive ids
    (``CodecSettings(compression="ZSTD")``); unknown ids raise
    :class:`~sqs_codec.exceptions.UnsupportedAlgorithmError`.

    Attributes:
        compression: Compression applied to outbound bodies.
        encoding: Encoding applied after compression; upgraded to ``base64``
            when compression is used with ``none``.
        checksum: Checksum over the raw body, verified on receipt.
        prefer_smaller_payload: Send the raw body when compression would
            make it larger.
        max_message_attributes: Attribute ceiling of the transport.
    """

    model_config = ConfigDict(frozen=True)

    compression: CompressionAlgorithm = CompressionAlgorithm.NONE
    encoding: EncodingAlgorithm = EncodingAlgorithm.NONE
    checksum: ChecksumAlgorithm = ChecksumAlgorithm.MD5
    prefer_smaller_payload: bool = True
    max_message_attributes: int = Field(default=SQS_MAX_MESSAGE_ATTRIBUTES, ge=1)

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

    def configuration(self) -> CodecConfiguration:
        return CodecConfiguration(
            version=CODEC_VERSION,
            compression=self.compression,
            encoding=self.encoding,
            checksum=self.checksum,
        )

    def with_(self, **changes: Any) -> CodecSettings:
        """Return a validated copy with *changes* applied."""
        return self.model_validate({**self.model_dump(), **changes})
