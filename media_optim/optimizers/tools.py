#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
External tool discovery for the Media Optimizer.
"""

import shutil
from typing import Dict, List

from ..config import IMAGE_OPTIM_BIN, HANDBRAKE_BIN, GHOSTSCRIPT_BIN, OptimizeSettings
from ..errors import DependencyError

TOOL_BY_CLASS = {
    "image": IMAGE_OPTIM_BIN,
    "video": HANDBRAKE_BIN,
    "doc": GHOSTSCRIPT_BIN,
}


def tool_status() -> Dict[str, Dict[str, object]]:
    """Availability of every external tool, keyed by media class."""
    status = {}
    for key, binary in TOOL_BY_CLASS.items():
        location = shutil.which(binary)
        status[key] = {"tool": binary, "available": location is not None, "path": location}
    return status


def required_tools(settings: OptimizeSettings) -> List[str]:
    tools = []
    if settings.image:
        tools.append(IMAGE_OPTIM_BIN)
    if settings.video:
        tools.append(HANDBRAKE_BIN)
    if settings.doc:
        tools.append(GHOSTSCRIPT_BIN)
    return tools


def check_dependencies(settings: OptimizeSettings) -> None:
    """Raise DependencyError if any tool for an enabled class is missing."""
    missing = [tool for tool in required_tools(settings) if shutil.which(tool) is None]
    if missing:
        raise DependencyError(missing)
