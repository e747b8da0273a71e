"""Unit tests for SQSCodecConsumer with mocked connection (no real AWS)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from sqs_codec.engine import EnvelopeEngine
from sqs_codec.exceptions import ChecksumMismatchError, CodecError
from sqs_codec.interceptor import SEND_MESSAGE, SqsCodecInterceptor
from sqs_codec.metadata import CODEC_METADATA_ATTRIBUTE
from sqs_codec.settings import CodecSettings
from sqs_codec.sqs.consumer import SQSCodecConsumer

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123/my-queue"
BODY = '{"event_type":"OrderCreated","lines":[' + ",".join(['"A-1"'] * 100) + "]}"


@pytest.fixture
def interceptor() -> SqsCodecInterceptor:
    return SqsCodecInterceptor(EnvelopeEngine(CodecSettings(compression="gzip")))


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.receive_message = AsyncMock(return_value={"Messages": []})
    client.delete_message = AsyncMock()
    client.change_message_visibility = AsyncMock()
    return client


@pytest.fixture
def mock_connection(mock_client: MagicMock) -> MagicMock:
    conn = MagicMock()
    conn.get_client = AsyncMock(return_value=mock_client)
    conn.get_queue_url = AsyncMock(return_value=QUEUE_URL)
    conn.health_check = AsyncMock(return_value=True)
    return conn


@pytest.fixture
def consumer(
    mock_connection: MagicMock, interceptor: SqsCodecInterceptor
) -> SQSCodecConsumer:
    return SQSCodecConsumer(
        mock_connection, interceptor=interceptor, message_attribute_names=["tenant"]
    )


def _encoded_message(
    interceptor: SqsCodecInterceptor, body: str = BODY, receipt: str = "rh-1"
) -> dict[str, Any]:
    sent = interceptor.modify_request(
        SEND_MESSAGE, {"QueueUrl": QUEUE_URL, "MessageBody": body}
    )
    return {
        "MessageId": f"id-{receipt}",
        "ReceiptHandle": receipt,
        "Body": sent["MessageBody"],
        "MessageAttributes": sent["MessageAttributes"],
    }


@pytest.mark.asyncio
async def test_receive_requests_codec_attribute(
    consumer: SQSCodecConsumer, mock_client: MagicMock
) -> None:
    mock_client.receive_message.return_value = {"Messages": [{"Body": "x"}]}
    messages = await consumer.receive("my-queue")
    assert messages == [{"Body": "x"}]
    kwargs = mock_client.receive_message.call_args.kwargs
    assert kwargs["QueueUrl"] == QUEUE_URL
    assert kwargs["MaxNumberOfMessages"] == 10
    assert kwargs["WaitTimeSeconds"] == 20
    assert kwargs["MessageAttributeNames"] == ["tenant", CODEC_METADATA_ATTRIBUTE]


@pytest.mark.asyncio
async def test_receive_with_all_attributes_is_unchanged(
    mock_connection: MagicMock, mock_client: MagicMock
) -> None:
    consumer = SQSCodecConsumer(mock_connection)
    await consumer.receive("my-queue")
    kwargs = mock_client.receive_message.call_args.kwargs
    assert kwargs["MessageAttributeNames"] == ["All"]


@pytest.mark.asyncio
async def test_process_message_decodes_and_deletes(
    consumer: SQSCodecConsumer,
    interceptor: SqsCodecInterceptor,
    mock_client: MagicMock,
) -> None:
    handler = AsyncMock()
    message = _encoded_message(interceptor)
    await consumer._process_message(mock_client, QUEUE_URL, message, handler)
    body, attributes = handler.call_args.args
    assert body == BODY
    assert CODEC_METADATA_ATTRIBUTE in attributes
    mock_client.delete_message.assert_called_once_with(
        QueueUrl=QUEUE_URL, ReceiptHandle="rh-1"
    )


@pytest.mark.asyncio
async def test_process_message_without_metadata_passes_body_through(
    consumer: SQSCodecConsumer, mock_client: MagicMock
) -> None:
    handler = AsyncMock()
    message = {"MessageId": "m", "ReceiptHandle": "rh", "Body": "legacy"}
    await consumer._process_message(mock_client, QUEUE_URL, message, handler)
    handler.assert_awaited_once_with("legacy", {})
    mock_client.delete_message.assert_called_once()


@pytest.mark.asyncio
async def test_decode_failure_is_logged_and_not_deleted(
    mock_connection: MagicMock,
    interceptor: SqsCodecInterceptor,
    mock_client: MagicMock,
    caplog: pytest.LogCaptureFixture,
) -> None:
    on_codec_error = AsyncMock()
    consumer = SQSCodecConsumer(
        mock_connection, interceptor=interceptor, on_codec_error=on_codec_error
    )
    handler = AsyncMock()
    message = _encoded_message(interceptor)
    message["MessageAttributes"] = _encoded_message(interceptor, body="other" * 50)[
        "MessageAttributes"
    ]
    with caplog.at_level(logging.ERROR, logger="sqs_codec.sqs.consumer"):
        await consumer._process_message(mock_client, QUEUE_URL, message, handler)
    handler.assert_not_called()
    mock_client.delete_message.assert_not_called()
    assert "Failed to decode SQS message id-rh-1" in caplog.text
    raw, error = on_codec_error.call_args.args
    assert raw is message
    assert isinstance(error, ChecksumMismatchError)
    assert isinstance(error, CodecError)


@pytest.mark.asyncio
async def test_handler_failure_releases_message(
    consumer: SQSCodecConsumer,
    interceptor: SqsCodecInterceptor,
    mock_client: MagicMock,
) -> None:
    handler = AsyncMock(side_effect=RuntimeError("boom"))
    await consumer._process_message(
        mock_client, QUEUE_URL, _encoded_message(interceptor), handler
    )
    mock_client.change_message_visibility.assert_called_once_with(
        QueueUrl=QUEUE_URL, ReceiptHandle="rh-1", VisibilityTimeout=0
    )
    mock_client.delete_message.assert_not_called()


@pytest.mark.asyncio
async def test_run_dispatches_batch_until_stopped(
    consumer: SQSCodecConsumer,
    interceptor: SqsCodecInterceptor,
    mock_client: MagicMock,
) -> None:
    received: list[str] = []

    async def handler(body: str, attributes: dict[str, Any]) -> None:
        received.append(body)
        if len(received) == 2:
            await consumer.stop()

    mock_client.receive_message.return_value = {
        "Messages": [
            _encoded_message(interceptor, receipt="rh-1"),
            {"MessageId": "m-2", "ReceiptHandle": "rh-2", "Body": "plain"},
            _encoded_message(interceptor, receipt="rh-3"),
        ]
    }
    await consumer.subscribe("my-queue", handler)
    await asyncio.wait_for(consumer.run(), timeout=5)
    assert received == [BODY, "plain"]
    assert mock_client.delete_message.call_count == 2


@pytest.mark.asyncio
async def test_run_survives_receive_errors(
    consumer: SQSCodecConsumer, mock_client: MagicMock, monkeypatch: Any
) -> None:
    monkeypatch.setattr(asyncio, "sleep", AsyncMock())
    calls = 0

    async def receive_message(**kwargs: Any) -> dict[str, Any]:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("network")
        await consumer.stop()
        return {"Messages": []}

    mock_client.receive_message = receive_message
    await consumer.subscribe("my-queue", AsyncMock())
    await asyncio.wait_for(consumer.run(), timeout=5)
    assert calls == 2


@pytest.mark.asyncio
async def test_failing_codec_error_callback_is_logged(
    mock_connection: MagicMock,
    mock_client: MagicMock,
    caplog: pytest.LogCaptureFixture,
) -> None:
    on_codec_error = AsyncMock(side_effect=RuntimeError("alerting down"))
    consumer = SQSCodecConsumer(mock_connection, on_codec_error=on_codec_error)
    message = {
        "MessageId": "m-bad",
        "ReceiptHandle": "rh",
        "Body": "x",
        "MessageAttributes": {CODEC_METADATA_ATTRIBUTE: "v=9"},
    }
    with caplog.at_level(logging.WARNING, logger="sqs_codec.sqs.consumer"):
        await consumer._process_message(mock_client, QUEUE_URL, message, AsyncMock())
    on_codec_error.assert_awaited_once()
    mock_client.delete_message.assert_not_called()
    assert "on_codec_error callback failed for SQS message m-bad" in caplog.text


@pytest.mark.asyncio
async def test_run_continues_after_delete_failure(
    consumer: SQSCodecConsumer,
    interceptor: SqsCodecInterceptor,
    mock_client: MagicMock,
) -> None:
    received: list[str] = []

    async def handler(body: str, attributes: dict[str, Any]) -> None:
        received.append(body)
        if len(received) == 2:
            await consumer.stop()

    mock_client.delete_message.side_effect = [RuntimeError("throttled"), None]
    mock_client.receive_message.return_value = {
        "Messages": [
            _encoded_message(interceptor, receipt="rh-1"),
            _encoded_message(interceptor, receipt="rh-2"),
        ]
    }
    await consumer.subscribe("my-queue", handler)
    await asyncio.wait_for(consumer.run(), timeout=5)
    assert received == [BODY, BODY]
    assert mock_client.delete_message.call_count == 2


@pytest.mark.asyncio
async def test_health_check_delegates_to_connection(
    consumer: SQSCodecConsumer, mock_connection: MagicMock
) -> None:
    assert await consumer.health_check() is True
    mock_connection.health_check.assert_called_once()
