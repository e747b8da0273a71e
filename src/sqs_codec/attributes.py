"""Helpers for SQS-shaped message attribute maps."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypedDict

from .exceptions import MalformedMetadataError
from .metadata import CODEC_METADATA_ATTRIBUTE

if TYPE_CHECKING:
    from collections.abc import Iterable

ALL_ATTRIBUTES = "All"
ALL_ATTRIBUTES_WILDCARD = ".*"


class MessageAttributeValue(TypedDict, total=False):
    """One entry of ``MessageAttributes`` as botocore expects it."""

    DataType: str
    StringValue: str
    BinaryValue: bytes


def string_attribute(value: str) -> MessageAttributeValue:
    return {"DataType": "String", "StringValue": value}


def attribute_value(attributes: Mapping[str, Any], name: str) -> str | None:
    """Return the string value of attribute *name*, or None when absent.

    Plain ``str`` values are accepted as well as ``MessageAttributeValue``.
    """
    value = attributes.get(name)
    if value is None or isinstance(value, str):
        return value
    if not isinstance(value, Mapping):
        raise MalformedMetadataError(repr(value))
    string_value = value.get("StringValue")
    return None if string_value is None else str(string_value)


def has_codec_metadata(attributes: Mapping[str, Any]) -> bool:
    return CODEC_METADATA_ATTRIBUTE in attributes


def ensure_codec_attribute_requested(names: Iterable[str] | None) -> list[str]:
    """Return *names* with the envelope attribute added if not already covered.

    Only ``All``, ``.*`` and the exact name cover it. A ``prefix.*`` wildcard
    matches names starting with ``prefix.``, never ``x-codec-meta``.
    """
    requested = list(names or [])
    covering = (ALL_ATTRIBUTES, ALL_ATTRIBUTES_WILDCARD, CODEC_METADATA_ATTRIBUTE)
    if any(name in covering for name in requested):
        return requested
    requested.append(CODEC_METADATA_ATTRIBUTE)
    return requested
