"""Text-safe encodings applied after compression."""

from __future__ import annotations

import base64
import binascii
import re
from enum import Enum
from types import MappingProxyType

from ..exceptions import InvalidPayloadError
from .base import Encoder, lookup_id
from .compression import CompressionAlgorithm

_URL_SAFE_ALPHABET = re.compile(rb"[A-Za-z0-9_-]*={0,2}")


def _pad(encoded: bytes) -> bytes:
    # Unpadded input is accepted; the alphabet itself is still validated.
    return encoded + b"=" * (-len(encoded) % 4)


class Base64Encoder:
    """URL-safe Base64 alphabet (``-`` and ``_``), padded."""

    def encode(self, payload: bytes) -> bytes:
        return base64.urlsafe_b64encode(payload)

    def decode(self, encoded: bytes) -> bytes:
        padded = _pad(encoded)
        if not _URL_SAFE_ALPHABET.fullmatch(padded):
            raise InvalidPayloadError("Invalid base64 payload: not URL-safe alphabet")
        try:
            return base64.urlsafe_b64decode(padded)
        except (binascii.Error, ValueError) as e:
            raise InvalidPayloadError("Invalid base64 payload", e) from e


class StandardBase64Encoder:
    """Standard Base64 alphabet (``+`` and ``/``), padded."""

    def encode(self, payload: bytes) -> bytes:
        return base64.b64encode(payload)

    def decode(self, encoded: bytes) -> bytes:
        try:
            return base64.b64decode(_pad(encoded), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidPayloadError("Invalid base64 payload", e) from e


class NoOpEncoder:
    def encode(self, payload: bytes) -> bytes:
        return payload

    def decode(self, encoded: bytes) -> bytes:
        return encoded


class EncodingAlgorithm(str, Enum):
    """Encoding that makes compressed bytes safe for a text-only body."""

    BASE64 = "base64"
    BASE64_STD = "base64-std"
    NONE = "none"

    @property
    def id(self) -> str:
        return self.value

    @property
    def implementation(self) -> Encoder:
        return _IMPLEMENTATIONS[self]

    @classmethod
    def from_id(cls, value: str) -> EncodingAlgorithm:
        """Resolve a case-insensitive id; ``base64-url`` is an alias of ``base64``."""
        return lookup_id("encoding", _BY_ID, value)

    @classmethod
    def effective_for(
        cls,
        compression: CompressionAlgorithm,
        encoding: EncodingAlgorithm,
    ) -> EncodingAlgorithm:
        """Return the encoding actually applied.

        Compressed bytes are binary, so ``none`` is upgraded to ``base64``
        whenever a compression algorithm is in use.
        """
        if encoding is cls.NONE and compression is not CompressionAlgorithm.NONE:
            return cls.BASE64
        return encoding


_IMPLEMENTATIONS: MappingProxyType[EncodingAlgorithm, Encoder] = MappingProxyType(
    {
        EncodingAlgorithm.BASE64: Base64Encoder(),
        EncodingAlgorithm.BASE64_STD: StandardBase64Encoder(),
        EncodingAlgorithm.NONE: NoOpEncoder(),
    }
)

_BY_ID: MappingProxyType[str, EncodingAlgorithm] = MappingProxyType(
    {
        **{algorithm.value: algorithm for algorithm in EncodingAlgorithm},
        "base64-url": EncodingAlgorithm.BASE64,
    }
)
