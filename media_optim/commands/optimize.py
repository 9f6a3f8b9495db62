#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Optimize command (thin wrapper).
All run logic lives in `runner.py`; this keeps only the CLI-facing `OptimizeCommand`.
"""

from ..config import OptimizeSettings
from ..jsonio import success
from ..models.results import RunSummary
from ..runner import OptimizationRunner


class OptimizeCommand:
    def __init__(self, settings: OptimizeSettings):
        self.settings = settings
        self.engine = OptimizationRunner(settings)

    def execute(self, as_json: bool = False) -> int:
        """Run an optimization pass by delegating to OptimizationRunner."""
        summary: RunSummary = self.engine.run()
        if as_json:
            return success("optimize", summary.to_dict())
        return 0
