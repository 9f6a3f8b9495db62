#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for file identities in the Media Optimizer.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Identity:
    """Fingerprint of a file's optimized state.

    Only the basename is kept, so the same name, size and hash found in
    two different directories is one identity.
    """
    relative_name: str
    size_bytes: int
    content_hash: str


@dataclass(frozen=True)
class WorkItem:
    """A file selected for processing because its identity is not in the manifest."""
    absolute_path: Path
    original_size_bytes: int
    identity: Identity


@dataclass(frozen=True)
class ReductionRecord:
    """Bytes saved on one file, ledgered only when positive."""
    identity: Identity
    bytes_saved: int


@dataclass(frozen=True)
class ScannedFile:
    """A scanned file and the identity computed for it."""
    path: Path
    identity: Identity
