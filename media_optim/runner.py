#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Run coordination for the Media Optimizer.
Drives scan, change detection and dispatch for each enabled media class.
"""

import logging
from typing import List, Optional

from .config import OptimizeSettings
from .dispatch.dispatcher import Dispatcher, work_set_bytes
from .manifest.store import ManifestStore
from .models.identity import ScannedFile
from .models.media_class import MediaClass
from .models.results import DispatchResult, RunSummary
from .optimizers.document import DocumentCompressor
from .optimizers.image import ImageDownscaler, ImageOptimizer
from .optimizers.tools import check_dependencies
from .optimizers.video import VideoTranscoder
from .progress import ProgressObserver
from .scanning.detector import ChangeDetector
from .scanning.fingerprint import Fingerprinter
from .scanning.scanner import FingerprintScanner
from .utils.time import utc_now_str

logger = logging.getLogger(__name__)


def build_dispatcher(settings: OptimizeSettings, store: ManifestStore,
                     scanner: FingerprintScanner) -> Dispatcher:
    """Wire the external optimizers from ``settings``."""
    timeouts = settings.timeouts()
    downscaler = None
    if settings.image_max_size:
        downscaler = ImageDownscaler(
            max_width=settings.image_max_width,
            max_height=settings.image_max_height,
            quality=settings.image_lossy_quality,
            lossy=settings.image_lossy,
            keep_metadata=settings.image_metadata,
        )
    return Dispatcher(
        store=store,
        scanner=scanner,
        image_optimizer=ImageOptimizer(
            lossy=settings.image_lossy,
            quality=settings.image_lossy_quality,
            keep_metadata=settings.image_metadata,
            downscaler=downscaler,
            timeout=timeouts["image"],
        ),
        video_transcoder=VideoTranscoder(
            quality=settings.video_quality,
            max_width=settings.video_max_width,
            max_height=settings.video_max_height,
            timeout=timeouts["video"],
        ),
        document_compressor=DocumentCompressor(timeout=timeouts["doc"]),
        chunk_size=settings.chunk_size,
    )


class OptimizationRunner:
    """
    Coordinates one optimization run.

    Media classes are processed one after another. Within a class the order is
    load manifest, scan, diff, dispatch. Any error aborts the whole run; the
    manifest already holds every unit completed before it.
    """

    def __init__(self, settings: OptimizeSettings,
                 store: Optional[ManifestStore] = None,
                 scanner: Optional[FingerprintScanner] = None,
                 detector: Optional[ChangeDetector] = None,
                 dispatcher: Optional[Dispatcher] = None):
        self.settings = settings
        self.store = store or ManifestStore(settings.manifest_dir, enabled=settings.manifest)
        self.scanner = scanner or FingerprintScanner(
            Fingerprinter(settings.hash_algorithm), hash_workers=settings.hash_workers
        )
        self.detector = detector or ChangeDetector(lookup_workers=settings.lookup_workers)
        self.dispatcher = dispatcher or build_dispatcher(settings, self.store, self.scanner)

    def enabled_classes(self) -> List[MediaClass]:
        enabled = []
        if self.settings.image:
            enabled.append(MediaClass.IMAGE)
        if self.settings.video:
            enabled.append(MediaClass.VIDEO)
        if self.settings.doc:
            enabled.append(MediaClass.DOCUMENT)
        return enabled

    def run(self) -> RunSummary:
        """Execute the run and return the merged per-class results."""
        self._print_header()

        if not self.settings.manifest:
            logger.warning("Manifest disabled: every file will be processed again. "
                           "Repeated runs degrade lossy formats; do not run this more than once.")

        if self.settings.dependency_check:
            check_dependencies(self.settings)
        else:
            logger.info("Skipping dependency checks")

        summary = RunSummary()
        with self.store:
            for media_class in self.enabled_classes():
                summary.merge(self.process_class(media_class))

        self._print_summary(summary)
        return summary

    def process_class(self, media_class: MediaClass) -> DispatchResult:
        """Scan, diff and dispatch a single media class."""
        known = self.store.load(media_class)
        if known:
            logger.info("%s %s files were previously optimized.", f"{len(known):,}", media_class.key)

        logger.info("Searching for %s files...", media_class.key)
        scanned = self._scan(media_class)
        work_set = self.detector.detect(known, scanned)

        result = DispatchResult(
            media_class=media_class,
            files_found=len(scanned),
            files_previously_optimized=len(scanned) - len(work_set),
        )
        logger.info("Found %s %s files, %s need optimization (%.1f MB)",
                    f"{len(scanned):,}", media_class.key, f"{len(work_set):,}",
                    work_set_bytes(work_set) / (1024 ** 2))
        if not work_set:
            return result

        observer = ProgressObserver(
            f"{media_class.label} Processing", total=len(work_set), disable=self.settings.silent
        )
        with observer.attach(self.store, media_class):
            self.dispatcher.dispatch(media_class, work_set, result)
        return result

    def _scan(self, media_class: MediaClass) -> List[ScannedFile]:
        if self.settings.file is not None:
            item = self.scanner.scan_file(self.settings.file, media_class)
            return [item] if item else []
        return self.scanner.scan(self.settings.path, media_class)

    def _print_header(self):
        if self.settings.silent:
            return
        target = self.settings.file if self.settings.file is not None else self.settings.path
        classes = ", ".join(mc.key for mc in self.enabled_classes()) or "none"
        print("=" * 80)
        print(f"MEDIA OPTIMIZER RUN - {utc_now_str()}")
        print("=" * 80)
        print(f"Target: {target}")
        print(f"Media classes: {classes}")
        print(f"Manifest: {self.settings.manifest_dir if self.settings.manifest else 'Disabled'}")
        print(f"Image batch size: {self.settings.chunk_size}, hash: {self.settings.hash_algorithm}")
        print()

    def _print_summary(self, summary: RunSummary):
        if self.settings.silent:
            return
        for result in summary.results:
            print(f"  - {result.media_class.label}: {result.files_processed:,} processed, "
                  f"{result.files_modified:,} modified, {result.bytes_saved / 1024:,.1f} KB saved")
        print("=" * 80)
        print(f"COMPLETE - {utc_now_str()}: {summary.files_processed:,} files, "
              f"{summary.bytes_saved / (1024 ** 2):,.1f} MB saved")
        print("=" * 80)
