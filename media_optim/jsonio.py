#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Machine-readable output for ``media-optim --json``.

Every command writes exactly one JSON object to stdout:

    {"result": "success", "command": "optimize", "version": "1.0.0", "data": {...}}
    {"result": "error", "command": "optimize", "version": "1.0.0", "error": "..."}

Banners and progress bars are suppressed and logging is moved to stderr, so
stdout can be piped straight into ``jq`` from cron jobs.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

from . import __version__


def enable_json_logging():
    """Route logging to stderr and keep only errors."""
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    logging.basicConfig(stream=sys.stderr, level=logging.ERROR)


def _emit(result: str, command: str, **fields: Any):
    payload: Dict[str, Any] = {"result": result, "command": command, "version": __version__}
    payload.update(fields)
    # surrogateescape'd file names are not valid UTF-8; keep them as escapes
    sys.stdout.write(json.dumps(payload, ensure_ascii=True) + "\n")
    sys.stdout.flush()


def success(command: str, data: Dict[str, Any] | list | None = None,
            meta: Optional[Dict[str, Any]] = None, code: int = 0) -> int:
    """Emit a success payload and return ``code`` as the process exit status."""
    fields: Dict[str, Any] = {"data": data if data is not None else {}}
    if meta:
        fields["meta"] = meta
    _emit("success", command, **fields)
    return code


def error(command: str, message: str, debug: Optional[Dict[str, Any]] = None, code: int = 1) -> int:
    fields: Dict[str, Any] = {"error": message}
    if debug:
        fields["debug"] = debug
    _emit("error", command, **fields)
    return code
