"""Media Optimizer - incremental, manifest-tracked media optimization."""

__version__ = "1.0.0"
__author__ = "Media Tool Team"

# Import key classes for convenient top-level access
from .config import OptimizeSettings
from .runner import OptimizationRunner
from .manifest import ManifestStore
from .scanning import Fingerprinter, FingerprintScanner, ChangeDetector
from .dispatch import Dispatcher, make_batches
from .progress import ProgressObserver
from .models import Identity, WorkItem, ReductionRecord, MediaClass, DispatchResult, RunSummary

__all__ = [
    # Core classes
    'OptimizeSettings',
    'OptimizationRunner',
    'ManifestStore',

    # Pipeline components
    'Fingerprinter',
    'FingerprintScanner',
    'ChangeDetector',
    'Dispatcher',
    'make_batches',
    'ProgressObserver',

    # Data models
    'Identity',
    'WorkItem',
    'ReductionRecord',
    'MediaClass',
    'DispatchResult',
    'RunSummary',

    # Package metadata
    '__version__',
    '__author__'
]
