"""SQSCodecPublisher — sends codec-encoded messages with FIFO support."""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING, Any

from ..interceptor import SEND_MESSAGE, SEND_MESSAGE_BATCH, SqsCodecInterceptor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .connection import SQSConnectionManager


def _message_body(message: Any) -> str:
    """Render *message* as the text body SQS carries."""
    if isinstance(message, str):
        return message
    if isinstance(message, (bytes, bytearray)):
        return bytes(message).decode("utf-8")
    if hasattr(message, "model_dump_json"):
        return str(message.model_dump_json())
    return json.dumps(message)


class SQSCodecPublisher:
    """Publishes to SQS through a :class:`SqsCodecInterceptor`.

    Encoding happens before the client is touched, so codec errors (e.g. too
    many attributes) never reach the network.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        interceptor: SqsCodecInterceptor | None = None,
    ) -> None:
        """Configure publisher.

        Args:
            connection: Shared connection manager.
            interceptor: Codec hooks; default SqsCodecInterceptor.default().
        """
        self._connection = connection
        self._interceptor = interceptor or SqsCodecInterceptor.default()

    async def publish(
        self,
        queue: str,
        message: Any,
        *,
        message_attributes: Mapping[str, Any] | None = None,
        queue_url: str | None = None,
        **send_kwargs: Any,
    ) -> dict[str, Any]:
        """Encode and send one message; returns the ``SendMessage`` response."""
        queue_url = queue_url or await self._connection.get_queue_url(queue)
        params: dict[str, Any] = {
            "QueueUrl": queue_url,
            "MessageBody": _message_body(message),
            "MessageAttributes": dict(message_attributes or {}),
            **send_kwargs,
        }
        if queue_url.endswith(".fifo"):
            params.setdefault("MessageGroupId", "default")
            params.setdefault("MessageDeduplicationId", str(uuid.uuid4()))
        request = self._interceptor.modify_request(SEND_MESSAGE, params)
        client = await self._connection.get_client()
        return dict(await client.send_message(**request))

    async def publish_batch(
        self,
        queue: str,
        messages: Sequence[Any],
        *,
        message_attributes: Sequence[Mapping[str, Any] | None] | None = None,
        queue_url: str | None = None,
    ) -> dict[str, Any]:
        """Encode and send up to 10 messages in one ``SendMessageBatch`` call.

        Entry ids are the message indexes as strings. Returns the raw
        response, whose ``Failed`` list is left to the caller.
        """
        queue_url = queue_url or await self._connection.get_queue_url(queue)
        attributes = list(message_attributes or [None] * len(messages))
        if len(attributes) != len(messages):
            raise ValueError("message_attributes must match messages in length")
        fifo = queue_url.endswith(".fifo")
        entries: list[dict[str, Any]] = []
        for index, (message, attrs) in enumerate(zip(messages, attributes)):
            entry: dict[str, Any] = {
                "Id": str(index),
                "MessageBody": _message_body(message),
                "MessageAttributes": dict(attrs or {}),
            }
            if fifo:
                entry["MessageGroupId"] = "default"
                entry["MessageDeduplicationId"] = str(uuid.uuid4())
            entries.append(entry)
        request = self._interceptor.modify_request(
            SEND_MESSAGE_BATCH, {"QueueUrl": queue_url, "Entries": entries}
        )
        client = await self._connection.get_client()
        return dict(await client.send_message_batch(**request))

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()
