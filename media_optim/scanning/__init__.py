"""Scanning and change detection for the Media Optimizer."""

from .fingerprint import Fingerprinter
from .scanner import FingerprintScanner
from .detector import ChangeDetector

__all__ = [
    'Fingerprinter',
    'FingerprintScanner',
    'ChangeDetector',
]
