#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File discovery and fingerprinting for the Media Optimizer.
Walks a root directory and fingerprints every file of a media class.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional

from ..config import DEFAULT_HASH_WORKERS
from ..errors import ScanError
from ..models.identity import Identity, ScannedFile
from ..models.media_class import MediaClass
from ..utils.path import is_hidden_or_cache
from .fingerprint import Fingerprinter

logger = logging.getLogger(__name__)


class FingerprintScanner:
    """Enumerates candidate files under a root and computes their identities."""

    def __init__(self, fingerprinter: Optional[Fingerprinter] = None,
                 hash_workers: int = DEFAULT_HASH_WORKERS):
        self.fingerprinter = fingerprinter or Fingerprinter()
        self.hash_workers = max(1, hash_workers)
        self.last_stats: Dict[str, int] = {}

    def scan(self, root: Path, media_class: MediaClass) -> List[ScannedFile]:
        """
        Fingerprint every regular file of ``media_class`` under ``root``.

        Hidden paths and sync-client caches are excluded, as are files below
        the class's minimum size. Unreadable files are skipped; an unreadable
        root raises ScanError.

        Returns:
            Scanned files in no particular order.
        """
        root = Path(root)
        if not root.is_dir():
            raise ScanError(root, "not a directory")

        stats = {
            'total_scanned': 0,
            'candidates': 0,
            'filtered_small': 0,
            'permission_errors': 0,
        }
        start_time = time.perf_counter()

        candidates: List[Path] = []
        try:
            entries = os.scandir(root)
            with entries:
                self._scan_entries(entries, media_class, candidates, stats)
        except OSError as e:
            raise ScanError(root, e.strerror or str(e)) from e

        scanned = self._fingerprint_candidates(candidates, stats)

        elapsed = time.perf_counter() - start_time
        self.last_stats = stats
        logger.info("Scanned %s items under %s in %.1fs: %s %s files",
                    f"{stats['total_scanned']:,}", root, elapsed,
                    f"{len(scanned):,}", media_class.key)
        if stats['permission_errors']:
            logger.info("  - Skipped %s unreadable entries", f"{stats['permission_errors']:,}")
        return scanned

    def scan_file(self, path: Path, media_class: MediaClass) -> Optional[ScannedFile]:
        """
        Fingerprint one file if it belongs to ``media_class``.

        The file is the scan root here, so an unreadable file raises ScanError.
        """
        path = Path(path)
        if not media_class.matches_extension(path):
            return None
        try:
            if not path.is_file():
                raise ScanError(path, "not a regular file")
            if not media_class.accepts_size(path.stat().st_size):
                return None
            return ScannedFile(path=path, identity=self.fingerprinter.fingerprint(path))
        except OSError as e:
            raise ScanError(path, e.strerror or str(e)) from e

    def refingerprint(self, path: Path) -> Identity:
        """Fingerprint a processed file without any class filtering."""
        return self.fingerprinter.fingerprint(path)

    def _scan_entries(self, entries, media_class: MediaClass,
                      candidates: List[Path], stats: dict):
        """Recursively collect candidate paths."""
        for entry in entries:
            stats['total_scanned'] += 1
            if is_hidden_or_cache((entry.name,)):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    with os.scandir(entry.path) as sub_entries:
                        self._scan_entries(sub_entries, media_class, candidates, stats)
                elif entry.is_file(follow_symlinks=False):
                    path = Path(entry.path)
                    if not media_class.matches_extension(path):
                        continue
                    size = entry.stat(follow_symlinks=False).st_size
                    if not media_class.accepts_size(size):
                        stats['filtered_small'] += 1
                        continue
                    candidates.append(path)
                    stats['candidates'] += 1
            except OSError as e:
                logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
                stats['permission_errors'] += 1

    def _fingerprint_candidates(self, candidates: List[Path], stats: dict) -> List[ScannedFile]:
        """Hash candidates with a bounded thread pool."""
        scanned: List[ScannedFile] = []
        if not candidates:
            return scanned

        with ThreadPoolExecutor(max_workers=self.hash_workers) as executor:
            results = executor.map(self._safe_fingerprint, candidates)
            for path, identity in zip(candidates, results):
                if identity is None:
                    stats['permission_errors'] += 1
                    continue
                scanned.append(ScannedFile(path=path, identity=identity))
        return scanned

    def _safe_fingerprint(self, path: Path) -> Optional[Identity]:
        try:
            return self.fingerprinter.fingerprint(path)
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            return None
