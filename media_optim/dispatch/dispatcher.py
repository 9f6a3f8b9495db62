#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Optimization dispatch for the Media Optimizer.
Hands work items to the external optimizers and ledgers the outcome.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..config import DEFAULT_CHUNK_SIZE
from ..errors import OptimizerInvocationError
from ..manifest.store import ManifestStore
from ..models.identity import ReductionRecord, WorkItem
from ..models.media_class import MediaClass
from ..models.results import DispatchResult
from ..optimizers.document import DocumentCompressor
from ..optimizers.image import ImageOptimizer
from ..optimizers.video import VideoTranscoder
from ..scanning.scanner import FingerprintScanner
from .batcher import make_batches

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Runs the per-class optimizer over a work set.

    Images go out in batches of ``chunk_size`` per tool invocation; videos and
    documents go one file at a time. A unit is complete only once its new
    identity (and any positive reduction) has been written. Any failure
    propagates and ends the run.
    """

    def __init__(self, store: ManifestStore, scanner: FingerprintScanner,
                 image_optimizer: Optional[ImageOptimizer] = None,
                 video_transcoder: Optional[VideoTranscoder] = None,
                 document_compressor: Optional[DocumentCompressor] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.store = store
        self.scanner = scanner
        self.image_optimizer = image_optimizer or ImageOptimizer()
        self.video_transcoder = video_transcoder or VideoTranscoder()
        self.document_compressor = document_compressor or DocumentCompressor()
        self.chunk_size = chunk_size
        self._handlers: Dict[MediaClass, Callable[[Sequence[WorkItem], DispatchResult], None]] = {
            MediaClass.IMAGE: self._dispatch_images,
            MediaClass.VIDEO: self._dispatch_videos,
            MediaClass.DOCUMENT: self._dispatch_documents,
        }

    def dispatch(self, media_class: MediaClass, work_set: Sequence[WorkItem],
                 result: Optional[DispatchResult] = None) -> DispatchResult:
        """Process every work item of ``media_class`` and return the aggregate."""
        if result is None:
            result = DispatchResult(media_class=media_class)
        if work_set:
            self._handlers[media_class](work_set, result)
        return result

    def _dispatch_images(self, work_set: Sequence[WorkItem], result: DispatchResult):
        batches = make_batches(work_set, self.chunk_size)
        for chunk_idx, batch in enumerate(batches):
            logger.debug("Image batch %d/%d (%d files)", chunk_idx + 1, len(batches), len(batch))
            self.image_optimizer.optimize_batch([item.absolute_path for item in batch])
            for item in batch:
                self._complete_unit(MediaClass.IMAGE, item, result, self.image_optimizer.binary)

    def _dispatch_videos(self, work_set: Sequence[WorkItem], result: DispatchResult):
        for item in work_set:
            logger.debug("Transcoding %s", item.absolute_path)
            self.video_transcoder.optimize(item.absolute_path)
            self._complete_unit(MediaClass.VIDEO, item, result, self.video_transcoder.binary)

    def _dispatch_documents(self, work_set: Sequence[WorkItem], result: DispatchResult):
        for item in work_set:
            logger.debug("Compressing %s", item.absolute_path)
            self.document_compressor.optimize(item.absolute_path)
            self._complete_unit(MediaClass.DOCUMENT, item, result, self.document_compressor.binary)

    def _complete_unit(self, media_class: MediaClass, item: WorkItem,
                       result: DispatchResult, tool: str):
        """Re-fingerprint a processed file, then write its identity and reduction."""
        try:
            new_identity = self.scanner.refingerprint(item.absolute_path)
        except OSError as e:
            raise OptimizerInvocationError(
                tool, f"cannot read result {item.absolute_path}: {e.strerror or e}"
            ) from e

        modified = new_identity != item.identity
        reduction = item.original_size_bytes - new_identity.size_bytes if modified else 0

        self.store.append(media_class, new_identity)
        if reduction > 0:
            record = ReductionRecord(identity=new_identity, bytes_saved=reduction)
            self.store.append_reduction(media_class, record)
            result.reductions.append(record)
        elif reduction < 0:
            logger.info("%s grew by %s bytes", item.absolute_path, f"{-reduction:,}")

        result.record_unit(item.original_size_bytes, modified, reduction)


def work_set_bytes(work_set: List[WorkItem]) -> int:
    """Total original size of a work set, used for the workload estimate."""
    return sum(item.original_size_bytes for item in work_set)
