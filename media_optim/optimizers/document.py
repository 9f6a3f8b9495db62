#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
PDF compression through Ghostscript.
"""

from pathlib import Path
from typing import List

from ..config import GHOSTSCRIPT_BIN, DOC_RESOLUTION_DPI
from .base import ExternalOptimizer, replace_in_place

BASE_FONTS = [
    "/Courier", "/Courier-Bold", "/Courier-Oblique", "/Courier-BoldOblique",
    "/Helvetica", "/Helvetica-Bold", "/Helvetica-Oblique", "/Helvetica-BoldOblique",
    "/Times-Roman", "/Times-Bold", "/Times-Italic", "/Times-BoldItalic",
    "/Symbol", "/ZapfDingbats", "/Arial",
]


class DocumentCompressor(ExternalOptimizer):
    """Downsamples images to 72 DPI and subsets fonts, one document at a time."""

    binary = GHOSTSCRIPT_BIN
    label = "Document Compressor"

    def build_args(self, source: Path, dest: Path) -> List[str]:
        dpi = str(DOC_RESOLUTION_DPI)
        return [
            "-f", str(source),
            "-o", str(dest),
            "-dPDFSETTINGS=/screen",
            "-dDownsampleColorImages=true",
            "-dDownsampleGrayImages=true",
            "-dDownsampleMonoImages=true",
            f"-dColorImageResolution={dpi}",
            f"-dGrayImageResolution={dpi}",
            f"-dMonoImageResolution={dpi}",
            "-dConvertCMYKImagesToRGB=true",
            "-dDetectDuplicateImages=true",
            "-dEmbedAllFonts=false",
            "-dSubsetFonts=true",
            "-dCompressFonts=true",
            "-c", ".setpdfwrite <</AlwaysEmbed [ ]>> setdistillerparams",
            "-c", ".setpdfwrite <</NeverEmbed [" + " ".join(BASE_FONTS) + "]>> setdistillerparams",
        ]

    def optimize(self, source: Path) -> None:
        """Compress ``source`` and overwrite it."""
        source = Path(source)
        replace_in_place(self.binary, source, lambda dest: self.run(self.build_args(source, dest)))
