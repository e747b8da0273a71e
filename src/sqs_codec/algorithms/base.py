"""Strategy protocols shared by the algorithm families."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from ..exceptions import UnsupportedAlgorithmError

if TYPE_CHECKING:
    from collections.abc import Mapping

T = TypeVar("T")


@runtime_checkable
class Compressor(Protocol):
    """Reversible byte-level compression."""

    def compress(self, payload: bytes) -> bytes: ...

    def decompress(self, payload: bytes) -> bytes: ...


@runtime_checkable
class Encoder(Protocol):
    """Reversible byte-to-text-safe-bytes encoding."""

    def encode(self, payload: bytes) -> bytes: ...

    def decode(self, encoded: bytes) -> bytes: ...


@runtime_checkable
class Digestor(Protocol):
    """Computes a printable checksum over raw payload bytes."""

    def checksum(self, payload: bytes) -> str: ...


def lookup_id(family: str, by_id: Mapping[str, T], value: str) -> T:
    """Case-insensitive lookup of *value* in *by_id*.

    Raises:
        UnsupportedAlgorithmError: If *value* is blank or unknown.
    """
    key = value.strip().lower()
    if not key or key not in by_id:
        raise UnsupportedAlgorithmError(family, value)
    return by_id[key]
