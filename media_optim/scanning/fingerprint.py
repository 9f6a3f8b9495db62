#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Identity computation for the Media Optimizer.
"""

import hashlib
from pathlib import Path

from ..config import DEFAULT_HASH_ALGORITHM, HASH_CHUNK_BYTES, SUPPORTED_HASH_ALGORITHMS
from ..models.identity import Identity


class Fingerprinter:
    """Computes (basename, size, content hash) identities."""

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM):
        if algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.algorithm = algorithm

    def fingerprint(self, path: Path) -> Identity:
        """Fingerprint a single file. OSError propagates to the caller."""
        path = Path(path)
        size_bytes = path.stat().st_size
        return Identity(
            relative_name=path.name,
            size_bytes=size_bytes,
            content_hash=self.compute_hash(path),
        )

    def compute_hash(self, path: Path) -> str:
        """Hex digest of the full file contents."""
        h = hashlib.new(self.algorithm)
        with Path(path).open('rb') as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_BYTES), b""):
                h.update(chunk)
        return h.hexdigest()
