#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Reduction report for the Media Optimizer.

Reads the manifests and reduction ledgers after a run; nothing here is
used while optimizing.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..jsonio import success
from ..manifest.store import ManifestStore
from ..models.media_class import MediaClass


def build_report(manifest_dir: Path) -> Dict[str, Any]:
    """Per-class counts and totals from the persisted ledgers."""
    store = ManifestStore(manifest_dir)
    classes: Dict[str, Any] = {}
    for media_class in MediaClass:
        identities = store.load(media_class)
        reductions = store.load_reductions(media_class)
        classes[media_class.key] = {
            "optimized_files": len(identities),
            "optimized_bytes": sum(i.size_bytes for i in identities),
            "reduced_files": len(reductions),
            "bytes_saved": sum(r.bytes_saved for r in reductions),
        }
    return {
        "manifest_dir": str(manifest_dir),
        "exists": Path(manifest_dir).is_dir(),
        "classes": classes,
        "total_bytes_saved": sum(c["bytes_saved"] for c in classes.values()),
        "total_optimized_files": sum(c["optimized_files"] for c in classes.values()),
    }


def cmd_show_report(manifest_dir: Path, as_json: bool = False) -> Dict[str, Any]:
    """Show what previous runs optimized and saved.

    Args:
        manifest_dir: Directory holding the ``*.man`` files.
        as_json: If True, emit a single JSON object to stdout instead of logs.

    Returns:
        The report dict (returned regardless of output mode).
    """
    logger = logging.getLogger(__name__)
    results = build_report(manifest_dir)

    if as_json:
        success("report", results)
        return results

    if not results["exists"]:
        logger.info("No manifest found at %s", manifest_dir)
        return results

    logger.info("=== Optimization Report: %s ===", manifest_dir)
    for key, stats in results["classes"].items():
        logger.info("%s: %s optimized (%.1f MB), %s reduced, %.1f MB saved",
                    key, f"{stats['optimized_files']:,}", stats["optimized_bytes"] / (1024 ** 2),
                    f"{stats['reduced_files']:,}", stats["bytes_saved"] / (1024 ** 2))
    logger.info("Total saved: %.1f MB across %s files",
                results["total_bytes_saved"] / (1024 ** 2), f"{results['total_optimized_files']:,}")
    return results
