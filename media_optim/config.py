#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the Media Optimizer.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Set

# File type categories
IMAGE_EXT: Set[str] = {
    ".png", ".bgp", ".gif", ".hdr", ".jpg", ".jpeg", ".rif", ".tif", ".tiff", ".webp",
}
VIDEO_EXT: Set[str] = {
    ".webm", ".3gp", ".3g2", ".asf", ".avi", ".drc", ".flv", ".m2v", ".mkv", ".m4p",
    ".m4v", ".mng", ".mp2", ".mp4", ".mpe", ".mpeg", ".mpg", ".mpv", ".mov", ".mxf",
    ".nsv", ".ogv", ".ogg", ".qt", ".rm", ".rmvb", ".roq", ".svi", ".wmv", ".yuv",
}
DOC_EXT: Set[str] = {".pdf"}

# Minimum sizes (inclusive)
IMAGE_MIN_BYTES = 101
VIDEO_MIN_BYTES = 10 * 1024 + 1
DOC_MIN_BYTES = 10 * 1024 + 1

# Path fragments never scanned, besides hidden components
SKIPPED_PATH_MARKERS: FrozenSet[str] = frozenset({".dropbox.cache"})

# Manifest layout
DEFAULT_MANIFEST_NAME = ".optim"
MANIFEST_SUFFIX = ".man"
REDUCTION_SUFFIX = "_reduction"
FIELD_DELIMITER = "|"

# Hashing
DEFAULT_HASH_ALGORITHM = "sha256"
SUPPORTED_HASH_ALGORITHMS = ("sha256", "md5")
HASH_CHUNK_BYTES = 1024 * 1024

# Processing defaults
DEFAULT_CHUNK_SIZE = 8
DEFAULT_LOOKUP_WORKERS = 8
DEFAULT_HASH_WORKERS = 4

# Image defaults
DEFAULT_IMAGE_LOSSY_QUALITY = 85
DEFAULT_IMAGE_MAX_WIDTH = 3840
DEFAULT_IMAGE_MAX_HEIGHT = 2160

# Video defaults
DEFAULT_VIDEO_QUALITY = 20
DEFAULT_VIDEO_MAX_WIDTH = 1920
DEFAULT_VIDEO_MAX_HEIGHT = 1080
DEFAULT_VIDEO_FRAMERATE = 30
DEFAULT_VIDEO_ENCODER = "x264"

# Document policy
DOC_RESOLUTION_DPI = 72

# Per-invocation timeouts in seconds (0 disables)
DEFAULT_IMAGE_TIMEOUT = 15 * 60
DEFAULT_VIDEO_TIMEOUT = 6 * 60 * 60
DEFAULT_DOC_TIMEOUT = 15 * 60
TIMEOUT_ENV_VAR = "MEDIA_OPTIM_TIMEOUT_SECONDS"

# External tools
IMAGE_OPTIM_BIN = "image_optim"
HANDBRAKE_BIN = "HandBrakeCLI"
GHOSTSCRIPT_BIN = "gs"


@dataclass
class OptimizeSettings:
    """Options consumed by an optimization run."""
    path: Path = field(default_factory=Path.cwd)
    file: Optional[Path] = None

    image: bool = True
    image_lossy: bool = True
    image_lossy_quality: int = DEFAULT_IMAGE_LOSSY_QUALITY
    image_max_size: bool = True
    image_max_width: int = DEFAULT_IMAGE_MAX_WIDTH
    image_max_height: int = DEFAULT_IMAGE_MAX_HEIGHT
    image_metadata: bool = False

    video: bool = True
    video_quality: int = DEFAULT_VIDEO_QUALITY
    video_max_width: int = DEFAULT_VIDEO_MAX_WIDTH
    video_max_height: int = DEFAULT_VIDEO_MAX_HEIGHT

    doc: bool = True

    manifest: bool = True
    manifest_name: str = DEFAULT_MANIFEST_NAME
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    chunk_size: int = DEFAULT_CHUNK_SIZE
    lookup_workers: int = DEFAULT_LOOKUP_WORKERS
    hash_workers: int = DEFAULT_HASH_WORKERS

    image_timeout: float = DEFAULT_IMAGE_TIMEOUT
    video_timeout: float = DEFAULT_VIDEO_TIMEOUT
    doc_timeout: float = DEFAULT_DOC_TIMEOUT

    silent: bool = False
    dependency_check: bool = True

    def __post_init__(self):
        self.path = Path(self.path)
        if self.file is not None:
            self.file = Path(self.file)
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
        if self.lookup_workers < 1:
            raise ValueError(f"lookup_workers must be at least 1, got {self.lookup_workers}")
        if self.hash_algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(f"Unsupported hash algorithm: {self.hash_algorithm}")
        if not 1 <= self.image_lossy_quality <= 100:
            raise ValueError(f"image_lossy_quality must be within 1..100, got {self.image_lossy_quality}")

    @property
    def root(self) -> Path:
        """Directory that holds the manifest directory."""
        if self.file is not None:
            return self.file.parent
        return self.path

    @property
    def manifest_dir(self) -> Path:
        return self.root / self.manifest_name

    def timeouts(self) -> Dict[str, float]:
        """Per-class timeouts, with the environment override applied."""
        override = os.getenv(TIMEOUT_ENV_VAR)
        if override is not None and override.strip():
            seconds = float(override)
            return {"image": seconds, "video": seconds, "doc": seconds}
        return {"image": self.image_timeout, "video": self.video_timeout, "doc": self.doc_timeout}
