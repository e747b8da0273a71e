"""Shared fixtures for sqs-codec tests."""

from __future__ import annotations

import pytest

from sqs_codec.engine import EnvelopeEngine
from sqs_codec.settings import CodecSettings


@pytest.fixture
def settings() -> CodecSettings:
    return CodecSettings()


@pytest.fixture
def engine(settings: CodecSettings) -> EnvelopeEngine:
    return EnvelopeEngine(settings)

