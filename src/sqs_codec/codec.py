"""Codec — composes one compression and one encoding into an encode/decode pair."""

from __future__ import annotations

from .algorithms import CompressionAlgorithm, EncodingAlgorithm


class Codec:
    """Byte transform: compress then encode; decode then decompress.

    The encoding is the *effective* one (see
    :meth:`EncodingAlgorithm.effective_for`), so a compressed body is always
    text-safe.
    """

    def __init__(
        self,
        compression: CompressionAlgorithm = CompressionAlgorithm.NONE,
        encoding: EncodingAlgorithm = EncodingAlgorithm.NONE,
    ) -> None:
        self.compression = compression
        self.encoding = EncodingAlgorithm.effective_for(compression, encoding)
        self._compressor = compression.implementation
        self._encoder = self.encoding.implementation

    def encode(self, payload: bytes) -> bytes:
        return self._encoder.encode(self._compressor.compress(payload))

    def decode(self, encoded: bytes) -> bytes:
        """Invert :meth:`encode`.

        Raises:
            InvalidPayloadError: If *encoded* is not valid for this codec.
        """
        return self._compressor.decompress(self._encoder.decode(encoded))

    def __repr__(self) -> str:
        return (
            f"Codec(compression={self.compression.id!r}, "
            f"encoding={self.encoding.id!r})"
        )
