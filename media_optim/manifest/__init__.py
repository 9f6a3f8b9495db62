"""Manifest persistence for the Media Optimizer."""

from .store import ManifestStore
from .codec import encode_identity, decode_identity, encode_reduction, decode_reduction

__all__ = ['ManifestStore', 'encode_identity', 'decode_identity', 'encode_reduction', 'decode_reduction']
