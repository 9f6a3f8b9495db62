#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Subprocess plumbing shared by the external optimizers.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..errors import OptimizerInvocationError, OptimizerTimeoutError

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 400


class ExternalOptimizer:
    """An external command-line tool that optimizes files."""

    binary: str = ""
    label: str = ""

    def __init__(self, timeout: float = 0, binary: Optional[str] = None):
        self.timeout = timeout
        if binary:
            self.binary = binary

    def available(self) -> bool:
        return shutil.which(self.binary) is not None

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> None:
        """Run the tool to completion. Missing tool, timeout or non-zero exit raise."""
        cmd: List[str] = [self.binary, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.timeout if self.timeout and self.timeout > 0 else None,
                check=False,
            )
        except FileNotFoundError as e:
            raise OptimizerInvocationError(self.binary, "not installed or not on PATH", command=cmd) from e
        except subprocess.TimeoutExpired as e:
            raise OptimizerTimeoutError(self.binary, self.timeout, command=cmd) from e
        except OSError as e:
            raise OptimizerInvocationError(self.binary, f"could not start: {e}", command=cmd) from e

        if proc.returncode != 0:
            stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
            detail = f": {stderr[-STDERR_TAIL_CHARS:]}" if stderr else ""
            raise OptimizerInvocationError(
                self.binary, f"exited with status {proc.returncode}{detail}",
                command=cmd, returncode=proc.returncode,
            )


def temporary_sibling(source: Path) -> Path:
    """Hidden path next to ``source``; scans never pick it up."""
    return source.with_name(f".{source.stem}.optim-tmp{source.suffix}")


def move_over(tmp: Path, source: Path) -> None:
    """Replace ``source`` with ``tmp``, keeping the permission bits of ``source``."""
    shutil.copymode(source, tmp)
    os.replace(tmp, source)


def replace_in_place(tool: str, source: Path, produce: Callable[[Path], None]) -> None:
    """
    Have ``produce`` write an optimized copy of ``source`` to a temporary
    sibling, then atomically move it over ``source``.
    """
    tmp = temporary_sibling(source)
    try:
        produce(tmp)
        if not tmp.exists() or tmp.stat().st_size == 0:
            raise OptimizerInvocationError(tool, f"produced no output for {source}")
        move_over(tmp, source)
    finally:
        if tmp.exists():
            tmp.unlink()
