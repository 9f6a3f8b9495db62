#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the Media Optimizer.
"""

import argparse
import sys
import logging
from pathlib import Path

from .config import (
    OptimizeSettings, DEFAULT_MANIFEST_NAME, DEFAULT_CHUNK_SIZE, DEFAULT_LOOKUP_WORKERS,
    DEFAULT_HASH_WORKERS, DEFAULT_HASH_ALGORITHM, SUPPORTED_HASH_ALGORITHMS,
    DEFAULT_IMAGE_LOSSY_QUALITY, DEFAULT_IMAGE_MAX_WIDTH, DEFAULT_IMAGE_MAX_HEIGHT,
    DEFAULT_VIDEO_QUALITY, DEFAULT_VIDEO_MAX_WIDTH, DEFAULT_VIDEO_MAX_HEIGHT,
    DEFAULT_IMAGE_TIMEOUT, DEFAULT_VIDEO_TIMEOUT, DEFAULT_DOC_TIMEOUT,
)
from .commands.optimize import OptimizeCommand
from .commands.report import cmd_show_report
from .commands.deps import cmd_check_deps
from .jsonio import enable_json_logging, error


def setup_logging(verbose: bool):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Media Optimizer - incremental image, video and PDF optimization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Optimize the current directory (safe to run nightly)
  %(prog)s optimize

  # Optimize a folder, images only, lossless
  %(prog)s optimize --path /srv/uploads --no-video --no-doc --no-image-lossy

  # Optimize one file
  %(prog)s optimize --file /srv/uploads/report.pdf

  # What have previous runs saved?
  %(prog)s report --path /srv/uploads --json

  # Which external tools are installed?
  %(prog)s check-deps
        """
    )

    # Global options
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON instead of human-readable text")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _add_optimize_parser(subparsers)
    _add_report_parser(subparsers)
    subparsers.add_parser("check-deps", help="Report availability of the external optimizers")

    return parser


def _add_optimize_parser(subparsers):
    """Add optimize command parser."""
    opt = subparsers.add_parser("optimize", help="Optimize new or changed media files")
    target = opt.add_mutually_exclusive_group()
    target.add_argument("--path", "-p", type=Path, default=Path.cwd(),
                        help="Directory to optimize recursively (default: current directory)")
    target.add_argument("--file", "-f", type=Path,
                        help="Optimize a single file instead of a directory")

    image = opt.add_argument_group("images")
    image.add_argument("--image", "-i", action=argparse.BooleanOptionalAction, default=True,
                       help="Optimize images")
    image.add_argument("--image-lossy", action=argparse.BooleanOptionalAction, default=True,
                       help="Allow lossy image compression")
    image.add_argument("--image-lossy-quality", type=int, default=DEFAULT_IMAGE_LOSSY_QUALITY,
                       help=f"Quality used for lossy compression, 1-100 (default: {DEFAULT_IMAGE_LOSSY_QUALITY})")
    image.add_argument("--image-max-size", action=argparse.BooleanOptionalAction, default=True,
                       help="Downscale images larger than the maximum width/height")
    image.add_argument("--image-max-width", type=int, default=DEFAULT_IMAGE_MAX_WIDTH,
                       help=f"Maximum image width (default: {DEFAULT_IMAGE_MAX_WIDTH})")
    image.add_argument("--image-max-height", type=int, default=DEFAULT_IMAGE_MAX_HEIGHT,
                       help=f"Maximum image height (default: {DEFAULT_IMAGE_MAX_HEIGHT})")
    image.add_argument("--image-metadata", action=argparse.BooleanOptionalAction, default=False,
                       help="Preserve image metadata")
    image.add_argument("--image-timeout", type=float, default=DEFAULT_IMAGE_TIMEOUT,
                       help=f"Seconds allowed per image batch, 0 disables (default: {DEFAULT_IMAGE_TIMEOUT})")

    video = opt.add_argument_group("videos")
    video.add_argument("--video", action=argparse.BooleanOptionalAction, default=True,
                       help="Optimize videos (always lossy)")
    video.add_argument("--video-quality", type=int, default=DEFAULT_VIDEO_QUALITY,
                       help=f"Constant quality for the encoder (default: {DEFAULT_VIDEO_QUALITY})")
    video.add_argument("--video-max-width", type=int, default=DEFAULT_VIDEO_MAX_WIDTH,
                       help=f"Maximum video width (default: {DEFAULT_VIDEO_MAX_WIDTH})")
    video.add_argument("--video-max-height", type=int, default=DEFAULT_VIDEO_MAX_HEIGHT,
                       help=f"Maximum video height (default: {DEFAULT_VIDEO_MAX_HEIGHT})")
    video.add_argument("--video-timeout", type=float, default=DEFAULT_VIDEO_TIMEOUT,
                       help=f"Seconds allowed per video, 0 disables (default: {DEFAULT_VIDEO_TIMEOUT})")

    doc = opt.add_argument_group("documents")
    doc.add_argument("--doc", action=argparse.BooleanOptionalAction, default=True,
                     help="Optimize PDFs (always lossy)")
    doc.add_argument("--doc-timeout", type=float, default=DEFAULT_DOC_TIMEOUT,
                     help=f"Seconds allowed per document, 0 disables (default: {DEFAULT_DOC_TIMEOUT})")

    manifest = opt.add_argument_group("manifest")
    manifest.add_argument("--manifest", "-m", action=argparse.BooleanOptionalAction, default=True,
                          help="Remember optimized files so repeated runs skip them")
    manifest.add_argument("--manifest-name", default=DEFAULT_MANIFEST_NAME,
                          help=f"Name of the manifest folder (default: {DEFAULT_MANIFEST_NAME})")
    manifest.add_argument("--hash-algorithm", choices=SUPPORTED_HASH_ALGORITHMS,
                          default=DEFAULT_HASH_ALGORITHM,
                          help=f"Content digest for file identities (default: {DEFAULT_HASH_ALGORITHM})")

    opt.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                     help=f"Images per optimizer invocation (default: {DEFAULT_CHUNK_SIZE})")
    opt.add_argument("--lookup-workers", type=int, default=DEFAULT_LOOKUP_WORKERS,
                     help=f"Concurrent manifest lookup shards (default: {DEFAULT_LOOKUP_WORKERS})")
    opt.add_argument("--hash-workers", type=int, default=DEFAULT_HASH_WORKERS,
                     help=f"Threads used to hash files (default: {DEFAULT_HASH_WORKERS})")
    opt.add_argument("--silent", "-s", action="store_true",
                     help="Suppress banners and progress bars")
    opt.add_argument("--dependency-check", "-d", action=argparse.BooleanOptionalAction, default=True,
                     help="Verify external tools are installed before starting")


def _add_report_parser(subparsers):
    """Add report command parser."""
    report = subparsers.add_parser("report", help="Summarize previous runs from the manifest")
    report.add_argument("--path", "-p", type=Path, default=Path.cwd(),
                        help="Optimized directory (default: current directory)")
    report.add_argument("--manifest-name", default=DEFAULT_MANIFEST_NAME,
                        help=f"Name of the manifest folder (default: {DEFAULT_MANIFEST_NAME})")


def settings_from_args(args) -> OptimizeSettings:
    """Build run settings from parsed optimize arguments."""
    return OptimizeSettings(
        path=args.path,
        file=args.file,
        image=args.image,
        image_lossy=args.image_lossy,
        image_lossy_quality=args.image_lossy_quality,
        image_max_size=args.image_max_size,
        image_max_width=args.image_max_width,
        image_max_height=args.image_max_height,
        image_metadata=args.image_metadata,
        video=args.video,
        video_quality=args.video_quality,
        video_max_width=args.video_max_width,
        video_max_height=args.video_max_height,
        doc=args.doc,
        manifest=args.manifest,
        manifest_name=args.manifest_name,
        hash_algorithm=args.hash_algorithm,
        chunk_size=args.chunk_size,
        lookup_workers=args.lookup_workers,
        hash_workers=args.hash_workers,
        image_timeout=args.image_timeout,
        video_timeout=args.video_timeout,
        doc_timeout=args.doc_timeout,
        silent=args.silent,
        dependency_check=args.dependency_check,
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging based on --verbose (but suppress if JSON output requested)
    if args.json:
        enable_json_logging()
    else:
        setup_logging(args.verbose)

    logging.debug("Parsed arguments: %s", args)

    try:
        if args.command == "optimize":
            settings = settings_from_args(args)
            if args.json:
                # stdout carries only the JSON payload
                settings.silent = True
            if settings.file is None and not settings.path.is_dir():
                parser.error(f"--path {settings.path} is not a directory")
            return OptimizeCommand(settings).execute(as_json=args.json)

        elif args.command == "report":
            cmd_show_report(args.path / args.manifest_name, as_json=args.json)
            return 0

        elif args.command == "check-deps":
            return cmd_check_deps(as_json=args.json)

    except KeyboardInterrupt:
        if args.json:
            return error(args.command, "Operation interrupted by user", code=130)
        logging.warning("Operation interrupted by user.")
        if args.command == "optimize":
            print("💡 Completed files are in the manifest; re-run to continue where this stopped.")
        return 130
    except Exception as e:
        if args.json:
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            return error(args.command, str(e), debug=debug_info, code=1)
        logging.error("ERROR: %s", e, exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
