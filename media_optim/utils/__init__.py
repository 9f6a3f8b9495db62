"""Utility functions for the Media Optimizer."""

from .time import utc_now_str
from .path import ensure_dir, is_hidden_or_cache

__all__ = ['utc_now_str', 'ensure_dir', 'is_hidden_or_cache']
