"""Codec exceptions for sqs-codec."""

from __future__ import annotations


class CodecError(Exception):
    """Root exception for the entire sqs-codec package."""


class UnsupportedAlgorithmError(CodecError):
    """Raised when an algorithm id cannot be resolved within its family."""

    def __init__(self, family: str, value: str) -> None:
        self.family = family
        self.value = value
        super().__init__(f"Unsupported {family} algorithm: {value!r}")


class UnavailableAlgorithmError(CodecError):
    """Raised when a strategy cannot perform the requested operation."""


class CodecMetadataError(CodecError):
    """Base class for errors in the envelope metadata attribute."""


class MalformedMetadataError(CodecMetadataError):
    """Raised when the metadata string does not follow the key=value grammar."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Unsupported codec metadata: {raw!r}")


class DuplicateKeyError(CodecMetadataError):
    """Raised when a metadata key appears more than once."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Duplicate codec metadata key: {key}")


class UnsupportedVersionError(CodecMetadataError):
    """Raised when the metadata declares a codec version this package can't read."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Unsupported codec version: {raw}")


class ChecksumValidationError(CodecError):
    """Base class for checksum presence and integrity failures."""


class MissingChecksumValueError(ChecksumValidationError):
    """Raised when a checksum algorithm is declared without a checksum value."""

    def __init__(self, key: str = "s") -> None:
        self.key = key
        super().__init__(f"Missing required codec metadata key: {key}")


class MissingChecksumAlgorithmError(ChecksumValidationError):
    """Raised when a checksum value is present but no algorithm is declared."""

    def __init__(self) -> None:
        super().__init__("Missing required checksum algorithm")


class ChecksumMismatchError(ChecksumValidationError):
    """Raised when the recomputed checksum differs from the declared one."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(f"Payload checksum mismatch ({algorithm})")


class InvalidPayloadError(CodecError):
    """Raised when an encoded body cannot be decoded or decompressed."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class AttributeBudgetExceededError(CodecError):
    """Raised when a message would carry more attributes than the transport allows."""

    def __init__(self, actual: int, maximum: int) -> None:
        self.actual = actual
        self.maximum = maximum
        super().__init__(
            f"SQS supports at most {maximum} message attributes, "
            f"but request has {actual}; reduce custom attributes"
        )


class CodecConnectionError(CodecError):
    """Raised when connectivity to the queue service fails."""
