"""SqsCodecInterceptor — applies the envelope engine to SQS API calls.

Works on the plain dictionaries botocore/aiobotocore use for request
parameters and parsed responses, so it can sit in front of any SQS client::

    interceptor = SqsCodecInterceptor(EnvelopeEngine(CodecSettings(compression="zstd")))
    interceptor.register(client.meta.events)
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any

from .attributes import ensure_codec_attribute_requested
from .engine import EnvelopeEngine

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SEND_MESSAGE = "SendMessage"
SEND_MESSAGE_BATCH = "SendMessageBatch"
RECEIVE_MESSAGE = "ReceiveMessage"


class SqsCodecInterceptor:
    """Request/response hooks for ``SendMessage``, ``SendMessageBatch`` and
    ``ReceiveMessage``.

    ``modify_request`` and ``modify_response`` never mutate their arguments;
    they return the original object when nothing changes and a copy
    otherwise. Errors propagate before any result is produced, so a batch
    with one bad entry yields no request at all.
    """

    def __init__(self, engine: EnvelopeEngine | None = None) -> None:
        self._engine = engine or EnvelopeEngine()

    @classmethod
    def default(cls) -> SqsCodecInterceptor:
        """No compression, no encoding, MD5 checksum."""
        return cls(EnvelopeEngine())

    @property
    def engine(self) -> EnvelopeEngine:
        return self._engine

    # ── Requests ────────────────────────────────────────────────────

    def modify_request(
        self, operation_name: str, params: Mapping[str, Any]
    ) -> Mapping[str, Any]:
        if operation_name == SEND_MESSAGE:
            return self._encode_entry(params)
        if operation_name == SEND_MESSAGE_BATCH:
            entries = [self._encode_entry(entry) for entry in params.get("Entries", [])]
            return {**params, "Entries": entries}
        if operation_name == RECEIVE_MESSAGE:
            return self._ensure_attributes_requested(params)
        return params

    def _encode_entry(self, entry: Mapping[str, Any]) -> dict[str, Any]:
        encoded = self._engine.encode_outbound(
            entry.get("MessageBody", ""),
            entry.get("MessageAttributes") or {},
        )
        return {
            **entry,
            "MessageBody": encoded.body,
            "MessageAttributes": encoded.attributes,
        }

    @staticmethod
    def _ensure_attributes_requested(params: Mapping[str, Any]) -> Mapping[str, Any]:
        current = list(params.get("MessageAttributeNames") or [])
        names = ensure_codec_attribute_requested(current)
        if names == current:
            return params
        return {**params, "MessageAttributeNames": names}

    # ── Responses ───────────────────────────────────────────────────

    def modify_response(
        self, operation_name: str, response: Mapping[str, Any]
    ) -> Mapping[str, Any]:
        if operation_name != RECEIVE_MESSAGE:
            return response
        messages = response.get("Messages")
        if not messages:
            return response
        return {**response, "Messages": [self.decode_message(m) for m in messages]}

    def decode_message(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """Decode one received message (``Body`` / ``MessageAttributes``)."""
        decoded = self._engine.decode_inbound(
            message.get("Body", ""),
            message.get("MessageAttributes") or {},
        )
        result = dict(message)
        result["Body"] = decoded.body
        return result

    # ── botocore event hooks ────────────────────────────────────────

    def register(self, events: Any) -> None:
        """Register on a botocore ``HierarchicalEmitter`` (``client.meta.events``).

        botocore handlers communicate by mutating the dictionaries they are
        given, so the hooks copy the interceptor's result back in place.
        """
        for operation_name in (SEND_MESSAGE, SEND_MESSAGE_BATCH, RECEIVE_MESSAGE):
            events.register(
                f"before-parameter-build.sqs.{operation_name}",
                partial(self._on_before_parameter_build, operation_name),
                unique_id=f"sqs-codec-request-{operation_name}",
            )
        events.register(
            f"after-call.sqs.{RECEIVE_MESSAGE}",
            self._on_after_receive,
            unique_id="sqs-codec-response",
        )
        logger.debug("Registered SQS codec hooks on %r", events)

    def _on_before_parameter_build(
        self, operation_name: str, params: dict[str, Any], **kwargs: Any
    ) -> None:
        modified = self.modify_request(operation_name, params)
        if modified is not params:
            params.clear()
            params.update(modified)

    def _on_after_receive(self, parsed: dict[str, Any], **kwargs: Any) -> None:
        modified = self.modify_response(RECEIVE_MESSAGE, parsed)
        if modified is not parsed:
            parsed["Messages"] = modified["Messages"]
