"""Exception types raised by the Media Optimizer.

Every error here is fatal to a run. Nothing is retried: the append-only
manifest lets the next run continue after the last completed unit.
"""

from pathlib import Path
from typing import Optional, Sequence


class OptimizeError(Exception):
    """Base class for all optimizer failures."""


class ScanError(OptimizeError):
    """The scan root itself could not be read."""

    def __init__(self, root: Path, reason: str):
        super().__init__(f"Cannot scan {root}: {reason}")
        self.root = root
        self.reason = reason


class OptimizerInvocationError(OptimizeError):
    """An external optimizer was missing, exited non-zero, or lost its output."""

    def __init__(self, tool: str, message: str, command: Optional[Sequence[str]] = None,
                 returncode: Optional[int] = None):
        super().__init__(f"{tool}: {message}")
        self.tool = tool
        self.command = list(command) if command else None
        self.returncode = returncode


class OptimizerTimeoutError(OptimizerInvocationError):
    """An external optimizer did not finish within its time limit."""

    def __init__(self, tool: str, seconds: float, command: Optional[Sequence[str]] = None):
        super().__init__(tool, f"timed out after {seconds:g} seconds", command=command)
        self.seconds = seconds


class ManifestWriteError(OptimizeError):
    """A manifest or reduction ledger line could not be persisted."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot write manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestParseError(OptimizeError):
    """A persisted manifest line does not decode to a record."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"Malformed manifest line {line!r}: {reason}")
        self.line = line
        self.reason = reason


class DependencyError(OptimizeError):
    """A required external tool is not installed."""

    def __init__(self, missing: Sequence[str]):
        super().__init__("Missing required tools: " + ", ".join(missing))
        self.missing = list(missing)


class ManifestReadError(OptimizeError):
    """An existing manifest could not be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read manifest {path}: {reason}")
        self.path = path
        self.reason = reason
