"""Algorithm registry — compression, encoding and checksum strategies."""

from __future__ import annotations

from .base import Compressor, Digestor, Encoder
from .checksum import ChecksumAlgorithm
from .compression import CompressionAlgorithm
from .encoding import EncodingAlgorithm
from .registry import AlgorithmFamily, resolve

__all__ = [
    "AlgorithmFamily",
    "ChecksumAlgorithm",
    "CompressionAlgorithm",
    "Compressor",
    "Digestor",
    "Encoder",
    "EncodingAlgorithm",
    "resolve",
]
