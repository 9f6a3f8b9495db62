"""Batching and optimizer dispatch for the Media Optimizer."""

from .batcher import make_batches, chunk_count
from .dispatcher import Dispatcher, work_set_bytes

__all__ = ['make_batches', 'chunk_count', 'Dispatcher', 'work_set_bytes']
