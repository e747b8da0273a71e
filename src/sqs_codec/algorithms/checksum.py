"""Checksum algorithms certifying the original (pre-compression) payload."""

from __future__ import annotations

import base64
import hashlib
from enum import Enum
from types import MappingProxyType

from ..exceptions import UnavailableAlgorithmError
from .base import Digestor, lookup_id


def _render(digest: bytes) -> str:
    return base64.urlsafe_b64encode(digest).decode("ascii")


class Md5Digestor:
    def checksum(self, payload: bytes) -> str:
        return _render(hashlib.md5(payload, usedforsecurity=False).digest())


class Sha256Digestor:
    def checksum(self, payload: bytes) -> str:
        return _render(hashlib.sha256(payload).digest())


class UndigestedDigestor:
    """Placeholder for ``none``; asking it for a checksum is a programming error."""

    def checksum(self, payload: bytes) -> str:  # noqa: ARG002
        raise UnavailableAlgorithmError("Digestor algorithm is none")


class ChecksumAlgorithm(str, Enum):
    """Integrity checksum stored in the envelope metadata."""

    MD5 = "md5"
    SHA256 = "sha256"
    NONE = "none"

    @property
    def id(self) -> str:
        return self.value

    @property
    def implementation(self) -> Digestor:
        return _IMPLEMENTATIONS[self]

    @classmethod
    def from_id(cls, value: str) -> ChecksumAlgorithm:
        return lookup_id("checksum", _BY_ID, value)


_IMPLEMENTATIONS: MappingProxyType[ChecksumAlgorithm, Digestor] = MappingProxyType(
    {
        ChecksumAlgorithm.MD5: Md5Digestor(),
        ChecksumAlgorithm.SHA256: Sha256Digestor(),
        ChecksumAlgorithm.NONE: UndigestedDigestor(),
    }
)

_BY_ID: MappingProxyType[str, ChecksumAlgorithm] = MappingProxyType(
    {algorithm.value: algorithm for algorithm in ChecksumAlgorithm}
)
