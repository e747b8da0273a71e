"""Compression algorithms: zstd, snappy, gzip and a no-op pass-through."""

from __future__ import annotations

import gzip
import zlib
from enum import Enum
from types import MappingProxyType

import snappy
import zstandard as zstd

from ..exceptions import InvalidPayloadError
from .base import Compressor, lookup_id


class ZstdCompressor:
    """Zstandard frames with the content size written to the frame header."""

    def __init__(self, level: int = 3) -> None:
        self._level = level

    def compress(self, payload: bytes) -> bytes:
        return zstd.ZstdCompressor(level=self._level).compress(payload)

    def decompress(self, payload: bytes) -> bytes:
        try:
            return zstd.ZstdDecompressor().decompress(payload)
        except zstd.ZstdError as e:
            raise InvalidPayloadError("Invalid zstd payload", e) from e


class SnappyCompressor:
    """Snappy raw block format."""

    def compress(self, payload: bytes) -> bytes:
        return bytes(snappy.compress(payload))

    def decompress(self, payload: bytes) -> bytes:
        try:
            return bytes(snappy.uncompress(payload))
        except Exception as e:  # noqa: BLE001
            raise InvalidPayloadError("Invalid snappy payload", e) from e


class GzipCompressor:
    """RFC 1952 gzip members; mtime is pinned so output is deterministic."""

    def compress(self, payload: bytes) -> bytes:
        return gzip.compress(payload, mtime=0)

    def decompress(self, payload: bytes) -> bytes:
        try:
            return gzip.decompress(payload)
        except (OSError, EOFError, zlib.error) as e:
            raise InvalidPayloadError("Invalid gzip payload", e) from e


class NoOpCompressor:
    def compress(self, payload: bytes) -> bytes:
        return payload

    def decompress(self, payload: bytes) -> bytes:
        return payload


class CompressionAlgorithm(str, Enum):
    """Compression applied to the payload before encoding."""

    ZSTD = "zstd"
    SNAPPY = "snappy"
    GZIP = "gzip"
    NONE = "none"

    @property
    def id(self) -> str:
        return self.value

    @property
    def implementation(self) -> Compressor:
        return _IMPLEMENTATIONS[self]

    @classmethod
    def from_id(cls, value: str) -> CompressionAlgorithm:
        """Resolve a case-insensitive id, e.g. ``"ZSTD"`` -> ``ZSTD``."""
        return lookup_id("compression", _BY_ID, value)


_IMPLEMENTATIONS: MappingProxyType[CompressionAlgorithm, Compressor] = (
    MappingProxyType(
        {
            CompressionAlgorithm.ZSTD: ZstdCompressor(),
            CompressionAlgorithm.SNAPPY: SnappyCompressor(),
            CompressionAlgorithm.GZIP: GzipCompressor(),
            CompressionAlgorithm.NONE: NoOpCompressor(),
        }
    )
)

_BY_ID: MappingProxyType[str, CompressionAlgorithm] = MappingProxyType(
    {algorithm.value: algorithm for algorithm in CompressionAlgorithm}
)
