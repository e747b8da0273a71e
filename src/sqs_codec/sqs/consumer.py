"""SQSCodecConsumer — long-polling consumer that decodes codec envelopes."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import CodecError
from ..interceptor import RECEIVE_MESSAGE, SqsCodecInterceptor

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence

    from .connection import SQSConnectionManager

logger = logging.getLogger(__name__)


class SQSCodecConsumer:
    """Receives from SQS, decodes each message, and dispatches to handlers.

    Messages are decoded independently: one corrupt message does not block
    the rest of a batch. A message that fails to decode is not deleted, so
    the queue's own redrive policy decides its fate.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        interceptor: SqsCodecInterceptor | None = None,
        wait_time_seconds: int = 20,
        visibility_timeout: int = 30,
        max_messages: int = 10,
        message_attribute_names: Sequence[str] = ("All",),
        on_codec_error: (
            Callable[[dict[str, Any], CodecError], Coroutine[Any, Any, None]] | None
        ) = None,
    ) -> None:
        """Configure consumer.

        Args:
            connection: Shared connection manager.
            interceptor: Codec hooks; default SqsCodecInterceptor.default().
            wait_time_seconds: Long-poll wait.
            visibility_timeout: Visibility timeout for received messages.
            max_messages: Messages per receive call (1-10).
            message_attribute_names: Attributes to request; ``x-codec-meta``
                is added unless already covered.
            on_codec_error: Async callable (raw message, error) invoked when a
                message cannot be decoded.
        """
        self._connection = connection
        self._interceptor = interceptor or SqsCodecInterceptor.default()
        self._wait_time_seconds = wait_time_seconds
        self._visibility_timeout = visibility_timeout
        self._max_messages = max_messages
        self._message_attribute_names = list(message_attribute_names)
        self._on_codec_error = on_codec_error
        self._handlers: dict[
            str, Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]
        ] = {}
        self._running = False

    async def subscribe(
        self,
        queue: str,
        handler: Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]],
    ) -> None:
        """Register an async ``handler(body, attributes)`` for *queue*."""
        self._handlers[queue] = handler

    async def receive(self, queue: str) -> list[dict[str, Any]]:
        """Receive one batch from *queue* and return the raw SQS messages.

        The ``MessageAttributeNames`` sent always include ``x-codec-meta``.
        Bodies are not decoded; see :meth:`SqsCodecInterceptor.decode_message`.
        """
        queue_url = await self._connection.get_queue_url(queue)
        client = await self._connection.get_client()
        request = self._interceptor.modify_request(
            RECEIVE_MESSAGE,
            {
                "QueueUrl": queue_url,
                "MaxNumberOfMessages": self._max_messages,
                "WaitTimeSeconds": self._wait_time_seconds,
                "VisibilityTimeout": self._visibility_timeout,
                "MessageAttributeNames": self._message_attribute_names,
            },
        )
        out = await client.receive_message(**request)
        return list(out.get("Messages", []))

    async def _process_message(
        self,
        client: Any,
        queue_url: str,
        msg: dict[str, Any],
        handler: Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]],
    ) -> None:
        """Decode one message, invoke handler, then delete or release it."""
        receipt = msg["ReceiptHandle"]
        try:
            decoded = self._interceptor.decode_message(msg)
        except CodecError as e:
            logger.exception(
                "Failed to decode SQS message %s", msg.get("MessageId", "?")
            )
            await self._notify_codec_error(msg, e)
            return
        try:
            attributes = dict(decoded.get("MessageAttributes") or {})
            await handler(decoded["Body"], attributes)
        except Exception:  # noqa: BLE001
            logger.warning(
                "Handler failed for SQS message %s; releasing for redelivery",
                msg.get("MessageId", "?"),
                exc_info=True,
            )
            await client.change_message_visibility(
                QueueUrl=queue_url,
                ReceiptHandle=receipt,
                VisibilityTimeout=0,
            )
            return
        await client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt)

    async def _notify_codec_error(self, msg: dict[str, Any], error: CodecError) -> None:
        if self._on_codec_error is None:
            return
        try:
            await self._on_codec_error(msg, error)
        except Exception:  # noqa: BLE001
            logger.warning(
                "on_codec_error callback failed for SQS message %s",
                msg.get("MessageId", "?"),
                exc_info=True,
            )

    async def run(self) -> None:
        """Poll SQS and dispatch to handlers. Call after subscribe()."""
        self._running = True
        client = await self._connection.get_client()
        while self._running:
            for queue, handler in list(self._handlers.items()):
                queue_url = await self._connection.get_queue_url(queue)
                try:
                    messages = await self.receive(queue)
                except Exception:  # noqa: BLE001
                    logger.warning("Receive failed for %s", queue, exc_info=True)
                    await asyncio.sleep(1)
                    continue
                for msg in messages:
                    if not self._running:
                        break
                    try:
                        await self._process_message(client, queue_url, msg, handler)
                    except Exception:  # noqa: BLE001
                        logger.warning(
                            "Processing failed for SQS message %s",
                            msg.get("MessageId", "?"),
                            exc_info=True,
                        )

    async def stop(self) -> None:
        """Stop the consumer loop."""
        self._running = False

    async def health_check(self) -> bool:
        """Return True if SQS is reachable."""
        return await self._connection.health_check()
