#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path utility functions for the Media Optimizer.
"""

from pathlib import Path
from typing import Iterable

from ..config import SKIPPED_PATH_MARKERS


def ensure_dir(p: Path) -> None:
    """Ensure directory exists, creating it if necessary."""
    p.mkdir(parents=True, exist_ok=True)


def is_hidden_or_cache(parts: Iterable[str]) -> bool:
    """True if any path component is hidden or belongs to a sync-client cache."""
    for part in parts:
        if part.startswith("."):
            return True
        if any(marker in part for marker in SKIPPED_PATH_MARKERS):
            return True
    return False
