"""
Floor-plan Geometry Engine - Main CLI

Builds the 3D geometry of a JSON floor plan and prints a summary.

Usage:
    python -m floorplan_geometry.main <plan.json> [--roof hipped] [--verbose]

Example:
    python -m floorplan_geometry.main ./plans/house.json --log-file build.log
"""

import argparse
import dataclasses
import logging
import sys
import time
from typing import Optional

from . import __version__
from .generators.building_generator import rebuild_building, BuildingResult
from .io.plan_loader import load_plan, PlanLoadError
from .models.building import RoofType


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file. If provided, logs will be written to file.
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)


def print_summary(result: BuildingResult, elapsed: float) -> None:
    """Print the build summary of one rebuild."""
    stats = result.stats
    print(f"\nBuilt {stats['rooms']} rooms in {elapsed * 1000:.1f} ms")
    print(f"Building contours: {stats['building_contours']}")
    print(f"Walls: {stats['walls']}, opening panels: {stats['opening_panels']}")
    print(
        f"Roof drafts: {stats['roof_drafts']}"
        + (" (built per room)" if stats['roof_per_room'] else "")
    )
    print(f"Geometry: {stats['vertices']} vertices, {stats['triangles']} triangles")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  - {warning}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Floor-plan Geometry Engine - Build 3D geometry from a floor plan'
    )

    parser.add_argument(
        'plan',
        help='JSON plan file (rooms, openings, roof, config)'
    )

    parser.add_argument(
        '--roof',
        type=str,
        choices=[kind.value for kind in RoofType],
        default=None,
        help='Override the roof type of the plan'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--log-file',
        default=None,
        help='Also write a DEBUG log to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    args = parser.parse_args()
    setup_logging(args.verbose, args.log_file)

    try:
        plan_file = load_plan(args.plan)
    except PlanLoadError as e:
        logging.error(str(e))
        return 1

    plan = plan_file.plan
    if args.roof:
        plan.roof = dataclasses.replace(plan.roof, kind=RoofType.from_name(args.roof))

    try:
        start = time.perf_counter()
        result = rebuild_building(plan, plan_file.config)
        elapsed = time.perf_counter() - start
    except Exception as e:
        logging.exception(f"Rebuild failed: {e}")
        if args.log_file:
            print(f"See log file for details: {args.log_file}")
        return 1

    result.warnings[:0] = plan_file.warnings
    print_summary(result, elapsed)
    if args.log_file:
        print(f"Log file: {args.log_file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
