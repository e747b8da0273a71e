"""AlgorithmFamily and resolve() — id lookup across the three families."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from .checksum import ChecksumAlgorithm
from .compression import CompressionAlgorithm
from .encoding import EncodingAlgorithm

if TYPE_CHECKING:
    from .base import Compressor, Digestor, Encoder


class AlgorithmFamily(str, Enum):
    """The closed set of algorithm families carried in the envelope metadata."""

    COMPRESSION = "compression"
    ENCODING = "encoding"
    CHECKSUM = "checksum"


def resolve(
    family: AlgorithmFamily | str, value: str
) -> Compressor | Encoder | Digestor:
    """Return the strategy registered under *value* in *family*.

    Args:
        family: ``"compression"``, ``"encoding"`` or ``"checksum"``.
        value: Case-insensitive algorithm id.

    Raises:
        UnsupportedAlgorithmError: If *value* is blank or unknown.
        ValueError: If *family* is not one of the three families.
    """
    family = AlgorithmFamily(family)
    if family is AlgorithmFamily.COMPRESSION:
        return CompressionAlgorithm.from_id(value).implementation
    if family is AlgorithmFamily.ENCODING:
        return EncodingAlgorithm.from_id(value).implementation
    return ChecksumAlgorithm.from_id(value).implementation
