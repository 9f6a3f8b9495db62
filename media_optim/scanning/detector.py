#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Change detection for the Media Optimizer.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import FrozenSet, Iterable, List, Sequence

from ..config import DEFAULT_LOOKUP_WORKERS
from ..dispatch.batcher import make_batches
from ..models.identity import Identity, ScannedFile, WorkItem

logger = logging.getLogger(__name__)

DEFAULT_SHARD_SIZE = 2048


class ChangeDetector:
    """Computes the work set: scanned identities absent from the manifest."""

    def __init__(self, lookup_workers: int = DEFAULT_LOOKUP_WORKERS,
                 shard_size: int = DEFAULT_SHARD_SIZE):
        self.lookup_workers = max(1, lookup_workers)
        self.shard_size = max(1, shard_size)

    def detect(self, manifest: Iterable[Identity], scanned: Sequence[ScannedFile]) -> List[WorkItem]:
        """
        Return a WorkItem for every scanned file whose identity is not in ``manifest``.

        Identities compare as whole tuples. Lookups run in shards, at most
        ``lookup_workers`` at a time, each round joined before the next starts.
        Output follows scan order.
        """
        known: FrozenSet[Identity] = frozenset(manifest)
        if not scanned:
            return []
        if not known:
            return [self._to_work_item(item) for item in scanned]

        shards = make_batches(scanned, self.shard_size)
        partials: List[List[WorkItem]] = [[] for _ in shards]

        with ThreadPoolExecutor(max_workers=self.lookup_workers) as executor:
            for round_start in range(0, len(shards), self.lookup_workers):
                round_indices = range(round_start, min(round_start + self.lookup_workers, len(shards)))
                futures = {
                    idx: executor.submit(self._lookup_shard, known, shards[idx])
                    for idx in round_indices
                }
                wait(futures.values())
                for idx, future in futures.items():
                    partials[idx] = future.result()

        work_set = [item for partial in partials for item in partial]
        logger.debug("Change detection: %d scanned, %d known, %d new or changed",
                     len(scanned), len(known), len(work_set))
        return work_set

    def _lookup_shard(self, known: FrozenSet[Identity], shard: Sequence[ScannedFile]) -> List[WorkItem]:
        return [self._to_work_item(item) for item in shard if item.identity not in known]

    @staticmethod
    def _to_work_item(item: ScannedFile) -> WorkItem:
        return WorkItem(
            absolute_path=item.path.absolute(),
            original_size_bytes=item.identity.size_bytes,
            identity=item.identity,
        )
