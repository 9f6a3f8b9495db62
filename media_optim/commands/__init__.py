"""Command implementations for the Media Optimizer CLI."""

from .optimize import OptimizeCommand
from .report import cmd_show_report
from .deps import cmd_check_deps

__all__ = ['OptimizeCommand', 'cmd_show_report', 'cmd_check_deps']
