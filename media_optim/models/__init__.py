"""Data models for the Media Optimizer."""

from .identity import Identity, ScannedFile, WorkItem, ReductionRecord
from .media_class import MediaClass
from .results import DispatchResult, RunSummary

__all__ = ['Identity', 'ScannedFile', 'WorkItem', 'ReductionRecord', 'MediaClass', 'DispatchResult', 'RunSummary']
