#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Image optimization: optional Pillow downscale, then one image_optim call per batch.
"""

import logging
import warnings
from pathlib import Path
from typing import List, Sequence

from PIL import Image

from ..config import (
    IMAGE_OPTIM_BIN, DEFAULT_IMAGE_LOSSY_QUALITY,
    DEFAULT_IMAGE_MAX_WIDTH, DEFAULT_IMAGE_MAX_HEIGHT,
)
from .base import ExternalOptimizer, move_over, temporary_sibling

logger = logging.getLogger(__name__)
logging.getLogger("PIL.TiffImagePlugin").setLevel(logging.WARNING)

# Suppress PIL warnings
warnings.filterwarnings("ignore", category=UserWarning,
                        message=".*Palette images with Transparency expressed in bytes.*")

WRITABLE_FORMATS = {"JPEG", "PNG", "GIF", "TIFF", "WEBP"}
QUALITY_FORMATS = {"JPEG", "WEBP"}


class ImageDownscaler:
    """Shrinks oversized images in place, preserving aspect ratio."""

    def __init__(self, max_width: int = DEFAULT_IMAGE_MAX_WIDTH,
                 max_height: int = DEFAULT_IMAGE_MAX_HEIGHT,
                 quality: int = DEFAULT_IMAGE_LOSSY_QUALITY,
                 lossy: bool = True, keep_metadata: bool = False):
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality
        self.lossy = lossy
        self.keep_metadata = keep_metadata

    def downscale(self, path: Path) -> bool:
        """Resize ``path`` if it exceeds the limits. Returns True if rewritten."""
        path = Path(path)
        try:
            with Image.open(path) as img:
                width, height = img.size
                if width <= self.max_width and height <= self.max_height:
                    return False
                fmt = img.format
                if fmt not in WRITABLE_FORMATS or getattr(img, "is_animated", False):
                    logger.debug("Not downscaling %s (%s)", path, fmt)
                    return False
                img.load()
                exif = img.info.get("exif")
                resized = img.copy()
            resized.thumbnail((self.max_width, self.max_height), Image.Resampling.LANCZOS)

            save_kwargs = {"format": fmt}
            if self.keep_metadata and exif:
                save_kwargs["exif"] = exif
            if fmt in QUALITY_FORMATS:
                save_kwargs["quality"] = self.quality if self.lossy else 100
            tmp = temporary_sibling(path)
            try:
                resized.save(tmp, **save_kwargs)
                move_over(tmp, path)
            finally:
                if tmp.exists():
                    tmp.unlink()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.debug("Leaving %s to the optimizer, downscale failed: %s", path, e)
            return False

        logger.debug("Downscaled %s from %dx%d to %dx%d", path, width, height, *resized.size)
        return True


class ImageOptimizer(ExternalOptimizer):
    """Wraps image_optim, which optimizes a list of files in place."""

    binary = IMAGE_OPTIM_BIN
    label = "Image Optimizer"

    def __init__(self, lossy: bool = True, quality: int = DEFAULT_IMAGE_LOSSY_QUALITY,
                 keep_metadata: bool = False, downscaler: ImageDownscaler = None,
                 timeout: float = 0, binary: str = None):
        super().__init__(timeout=timeout, binary=binary)
        self.lossy = lossy
        self.quality = quality
        self.keep_metadata = keep_metadata
        self.downscaler = downscaler

    def build_args(self, paths: Sequence[Path]) -> List[str]:
        args = ["--skip-missing-workers", "--no-svgo", "--no-progress"]
        if self.lossy:
            args += ["--allow-lossy", "--jpegoptim-max-quality", str(self.quality)]
        if self.keep_metadata:
            args += ["--jpegtran-copy-chunks", "--pngout-copy-chunks"]
        args.append("--")
        args.extend(str(Path(p).absolute()) for p in paths)
        return args

    def optimize_batch(self, paths: Sequence[Path]) -> None:
        """Optimize every path in place with a single tool invocation."""
        if not paths:
            return
        if self.downscaler is not None:
            for path in paths:
                self.downscaler.downscale(path)
        self.run(self.build_args(paths), cwd=Path("/"))
