"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
from typing import Callable

import pytest

from tnetstrings import Decoder


@pytest.fixture
def sample_mapping() -> dict:
    """Mapping with every scalar type and nested containers."""
    return {
        "name": "probe-7",
        "depth": -1250,
        "ratio": 0.125,
        "active": True,
        "note": None,
        "tags": ["a", "b"],
        "limits": {"max": 100, "min": 0},
    }


@pytest.fixture
def decoder_for() -> Callable[[bytes], Decoder]:
    """Factory building a decoder over in-memory bytes."""

    def factory(data: bytes) -> Decoder:
        return Decoder(io.BytesIO(data))

    return factory
