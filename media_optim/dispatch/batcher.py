#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Fixed-size partitioning of work sets.
"""

from typing import List, Sequence, TypeVar

from ..config import DEFAULT_CHUNK_SIZE

T = TypeVar("T")


def chunk_count(total: int, chunk_size: int) -> int:
    """Number of chunks needed for ``total`` items."""
    return (total + chunk_size - 1) // chunk_size


def make_batches(items: Sequence[T], chunk_size: int = DEFAULT_CHUNK_SIZE) -> List[List[T]]:
    """
    Partition ``items`` into consecutive chunks of at most ``chunk_size``.

    Every item lands in exactly one chunk; only the last chunk may be short.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    items = list(items)
    total_chunks = chunk_count(len(items), chunk_size)
    batches = []
    for chunk_idx in range(total_chunks):
        start_idx = chunk_idx * chunk_size
        end_idx = min(start_idx + chunk_size, len(items))
        batches.append(items[start_idx:end_idx])
    return batches
