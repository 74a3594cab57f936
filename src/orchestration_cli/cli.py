"""CLI entry point for the video thumbnail pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from video_catalog.errors import CatalogError, ConfigurationMissing
from . import __version__
from .config import _load_env_file, load_settings
from .pipeline import run_catalog


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Optimize video thumbnails and generate the site's video data module"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--base-url", default=None, help="Public site URL (else PUBLIC_SITE_URL)"
    )
    parser.add_argument(
        "--records", type=Path, default=None, help="Video catalog JSON (default: src/data/videos.json)"
    )
    parser.add_argument(
        "--content-root", type=Path, default=None, help="Directory local thumbnails are relative to (default: public)"
    )
    parser.add_argument(
        "--image-subdir", default=None, help="Public subdirectory for optimized thumbnails (default: picture)"
    )
    parser.add_argument(
        "--output-dir", type=Path, default=None, help="Where optimized thumbnails are written (default: content root / subdir)"
    )
    parser.add_argument(
        "--module", type=Path, default=None, help="Generated data module path (default: src/data/allVideos.ts)"
    )
    parser.add_argument(
        "--timeout-ms", type=int, default=None, help="Per-download timeout in milliseconds (default: 100000)"
    )
    parser.add_argument(
        "--concurrency", type=int, default=None, help="Max records resolved at once (default: unbounded)"
    )
    parser.add_argument("--verbose", action="store_true", help="Log every failed attempt")

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv: list[str] | None = None) -> None:
    # Load .env if present (ignored if values already in env)
    _load_env_file()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    configure_logging(args.verbose)

    try:
        settings = load_settings(
            public_base_url=args.base_url,
            content_root=args.content_root,
            image_subdir=args.image_subdir,
            output_dir=args.output_dir,
            records_path=args.records,
            module_path=args.module,
            timeout_ms=args.timeout_ms,
            concurrency=args.concurrency,
        )
    except ConfigurationMissing as exc:
        parser.exit(1, f"Error: {exc}\n")

    try:
        summary = run_catalog(settings)
    except CatalogError as exc:
        parser.exit(1, f"Error: {exc}\n")

    print(f"Generated {summary.records} records -> {summary.module_path}")


if __name__ == "__main__":
    main()
