"""SQS transport adapter (optional extra: sqs-codec[sqs])."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .consumer import SQSCodecConsumer
from .publisher import SQSCodecPublisher

__all__ = [
    "SQSCodecConsumer",
    "SQSCodecPublisher",
    "SQSConnectionManager",
]
