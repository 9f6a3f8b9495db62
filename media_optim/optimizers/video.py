#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Video transcoding through HandBrakeCLI.
"""

from pathlib import Path
from typing import List

from ..config import (
    HANDBRAKE_BIN, DEFAULT_VIDEO_QUALITY, DEFAULT_VIDEO_MAX_WIDTH,
    DEFAULT_VIDEO_MAX_HEIGHT, DEFAULT_VIDEO_FRAMERATE, DEFAULT_VIDEO_ENCODER,
)
from .base import ExternalOptimizer, replace_in_place


class VideoTranscoder(ExternalOptimizer):
    """Re-encodes one video at a time; HandBrake spreads work across cores itself."""

    binary = HANDBRAKE_BIN
    label = "Video Transcoder"

    def __init__(self, quality: int = DEFAULT_VIDEO_QUALITY,
                 max_width: int = DEFAULT_VIDEO_MAX_WIDTH,
                 max_height: int = DEFAULT_VIDEO_MAX_HEIGHT,
                 encoder: str = DEFAULT_VIDEO_ENCODER,
                 timeout: float = 0, binary: str = None):
        super().__init__(timeout=timeout, binary=binary)
        self.quality = quality
        self.max_width = max_width
        self.max_height = max_height
        self.encoder = encoder

    def build_args(self, source: Path, dest: Path) -> List[str]:
        return [
            "--pfr", str(DEFAULT_VIDEO_FRAMERATE),
            "--optimize",
            "--encoder", self.encoder,
            "--quality", str(self.quality),
            "--two-pass",
            "--turbo",
            "--maxWidth", str(self.max_width),
            "--maxHeight", str(self.max_height),
            "--input", str(source),
            "--output", str(dest),
        ]

    def optimize(self, source: Path) -> None:
        """Transcode ``source`` and overwrite it. No backup of the original is kept."""
        source = Path(source)
        replace_in_place(self.binary, source, lambda dest: self.run(self.build_args(source, dest)))
