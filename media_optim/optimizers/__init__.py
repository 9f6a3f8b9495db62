"""External optimizer collaborators for the Media Optimizer."""

from .base import ExternalOptimizer
from .image import ImageOptimizer, ImageDownscaler
from .video import VideoTranscoder
from .document import DocumentCompressor
from .tools import check_dependencies, tool_status

__all__ = [
    'ExternalOptimizer',
    'ImageOptimizer',
    'ImageDownscaler',
    'VideoTranscoder',
    'DocumentCompressor',
    'check_dependencies',
    'tool_status',
]
