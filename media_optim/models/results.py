#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Result aggregates returned by dispatchers and merged by the runner.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

from .identity import ReductionRecord
from .media_class import MediaClass


@dataclass
class DispatchResult:
    """Outcome of dispatching one media class's work set."""
    media_class: MediaClass
    files_found: int = 0
    files_previously_optimized: int = 0
    files_processed: int = 0
    files_modified: int = 0
    bytes_processed: int = 0
    bytes_saved: int = 0
    reductions: List[ReductionRecord] = field(default_factory=list)

    def record_unit(self, original_size: int, modified: bool, reduction: int):
        self.files_processed += 1
        self.bytes_processed += original_size
        if modified:
            self.files_modified += 1
        if reduction > 0:
            self.bytes_saved += reduction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "media_class": self.media_class.key,
            "files_found": self.files_found,
            "files_previously_optimized": self.files_previously_optimized,
            "files_processed": self.files_processed,
            "files_modified": self.files_modified,
            "bytes_processed": self.bytes_processed,
            "bytes_saved": self.bytes_saved,
            "reductions": [
                {**asdict(record.identity), "bytes_saved": record.bytes_saved}
                for record in self.reductions
            ],
        }


@dataclass
class RunSummary:
    """Sum of every class's DispatchResult for one run."""
    results: List[DispatchResult] = field(default_factory=list)

    def merge(self, result: DispatchResult):
        self.results.append(result)

    @property
    def files_processed(self) -> int:
        return sum(r.files_processed for r in self.results)

    @property
    def files_modified(self) -> int:
        return sum(r.files_modified for r in self.results)

    @property
    def bytes_processed(self) -> int:
        return sum(r.bytes_processed for r in self.results)

    @property
    def bytes_saved(self) -> int:
        return sum(r.bytes_saved for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files_processed": self.files_processed,
            "files_modified": self.files_modified,
            "bytes_processed": self.bytes_processed,
            "bytes_saved": self.bytes_saved,
            "classes": [r.to_dict() for r in self.results],
        }
