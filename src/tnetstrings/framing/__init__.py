"""Frame reading and writing for tnetstrings.

This module provides the SIZE ":" PAYLOAD TAG framing rule shared by the
encoder and decoder.
"""

from __future__ import annotations

from .basic import SIZE_DIGIT_LIMIT, TAGS, ByteSink, Frame, FrameReader, Tag, frame, write_frame

__all__ = [
    "Tag",
    "TAGS",
    "SIZE_DIGIT_LIMIT",
    "Frame",
    "FrameReader",
    "ByteSink",
    "frame",
    "write_frame",
]
