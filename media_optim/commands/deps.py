#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Dependency check command for the Media Optimizer.
"""

import logging

from ..jsonio import success
from ..optimizers.tools import tool_status


def cmd_check_deps(as_json: bool = False) -> int:
    """Report which external tools are installed. Returns 1 if any is missing."""
    logger = logging.getLogger(__name__)
    status = tool_status()
    missing = [info["tool"] for info in status.values() if not info["available"]]
    code = 1 if missing else 0

    if as_json:
        return success("check-deps", {"tools": status, "missing": missing}, code=code)

    for key, info in status.items():
        if info["available"]:
            logger.info("%-6s %s: %s", key, info["tool"], info["path"])
        else:
            logger.warning("%-6s %s: not found", key, info["tool"])
    return code
