#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Media classes handled by the Media Optimizer.
"""

from enum import Enum
from pathlib import Path
from typing import FrozenSet

from ..config import (
    IMAGE_EXT, VIDEO_EXT, DOC_EXT,
    IMAGE_MIN_BYTES, VIDEO_MIN_BYTES, DOC_MIN_BYTES,
)


class MediaClass(Enum):
    """Image, Video or Document, each with its own allow-list and threshold."""

    IMAGE = ("image", "Image", frozenset(IMAGE_EXT), IMAGE_MIN_BYTES)
    VIDEO = ("video", "Video", frozenset(VIDEO_EXT), VIDEO_MIN_BYTES)
    DOCUMENT = ("doc", "Document", frozenset(DOC_EXT), DOC_MIN_BYTES)

    def __init__(self, key: str, label: str, extensions: FrozenSet[str], min_size_bytes: int):
        self.key = key
        self.label = label
        self.extensions = extensions
        self.min_size_bytes = min_size_bytes

    @classmethod
    def from_key(cls, key: str) -> "MediaClass":
        for media_class in cls:
            if media_class.key == key:
                return media_class
        raise ValueError(f"Unknown media class: {key}")

    def matches_extension(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def accepts_size(self, size_bytes: int) -> bool:
        return size_bytes >= self.min_size_bytes

    @property
    def manifest_stem(self) -> str:
        """File stem of this class's manifest (``image`` -> ``image.man``)."""
        return self.key
