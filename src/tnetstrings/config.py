"""Codec configuration.

This module provides the configuration dataclass shared by the encoder and
decoder. A single instance can be reused across any number of calls.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for encoding and decoding.

    Attributes:
        max_depth: Maximum nesting depth of dictionaries and lists (default 256).
            Deeper input fails with NestingTooDeep instead of exhausting the
            interpreter stack.

        encoding: Text encoding used for str values and str targets
            (default "utf-8"). String frames themselves carry raw bytes.

        raw_strings: If True, string frames decoded into a dynamically-typed
            target are returned as bytes instead of text (default False).
            Use this for streams carrying arbitrary binary payloads.

    Examples:
        ```python
        from tnetstrings import CodecConfig, decode

        # Binary-safe dynamic decoding
        config = CodecConfig(raw_strings=True)
        decode(b"3:\\xff\\x00\\x01,", config=config)  # b"\\xff\\x00\\x01"

        # Shallow documents only
        config = CodecConfig(max_depth=8)
        ```
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    encoding: str = "utf-8"
    raw_strings: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")

        try:
            codecs.lookup(self.encoding)
        except LookupError as err:
            raise ValueError(f"Unknown text encoding: {self.encoding}") from err


DEFAULT_CONFIG = CodecConfig()
