#!/usr/bin/env python
"""
Command-line interface for Shoreline Change Review

Usage:
    python cli.py detected.geojson baseline.geojson
    python cli.py detected.geojson baseline.geojson --output review.geojson --areas areas.json
"""

import os
import sys
import shlex
import argparse
import dataclasses

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from shoreline.config import get_config
from shoreline.errors import ShorelineError
from shoreline.pipeline import ShorelineReviewPipeline


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def build_config(args):
    """Overlay command-line options on the global configuration"""
    base = get_config()
    polygonizer = base.polygonizer
    if args.polygonizer:
        polygonizer = dataclasses.replace(polygonizer, command=shlex.split(args.polygonizer))

    return dataclasses.replace(
        base,
        detected_path=args.detected or base.detected_path,
        baseline_path=args.baseline or base.baseline_path,
        clip_baseline=base.clip_baseline and not args.no_clip,
        enable_quantitative=base.enable_quantitative and not args.no_quantitative,
        polygonizer=polygonizer
    )


def cmd_review(args):
    """Compare detected shoreline linework against the baseline"""
    setup_logging(args.verbose)

    try:
        config = build_config(args)
        pipeline = ShorelineReviewPipeline(config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Detected: {config.detected_path}")
    logger.info(f"Baseline: {config.baseline_path}")

    try:
        result = pipeline.run(config.detected_path, config.baseline_path)
    except ShorelineError as e:
        logger.error(f"Review failed at {e.stage or 'unknown'} stage: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if args.output:
        pipeline.save(result, args.output)
    else:
        print(pipeline.dumps(result))

    if args.areas:
        pipeline.save_areas(result, args.areas)

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Shoreline Change Review CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Review with the bundled sample data:
    python cli.py

  Review two files, writing the result to disk:
    python cli.py detected.geojson baseline.geojson --output review.geojson

  Use an external polygonizer executable:
    python cli.py detected.geojson baseline.geojson --polygonizer "./polygonize --wkt"
        """
    )
    parser.add_argument("detected", nargs="?", help="Detected shoreline GeoJSON")
    parser.add_argument("baseline", nargs="?", help="Baseline shoreline GeoJSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--output", "-o", help="Write the feature collection here instead of stdout")
    parser.add_argument("--areas", help="Write the quantitative area reports to this JSON file")
    parser.add_argument("--no-clip", action="store_true", help="Do not clip the baseline to the detected extent")
    parser.add_argument("--no-quantitative", action="store_true", help="Skip the quantitative review")
    parser.add_argument("--polygonizer", help="External polygonizer command (WKT file path is appended)")
    parser.set_defaults(func=cmd_review)

    args = parser.parse_args(argv)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
