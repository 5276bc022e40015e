#!/usr/bin/env python3
"""Pair two equally sized sets of images by mean colour.

Every row image is scored against every column image (Euclidean distance
between mean RGB colours) and the Hungarian solver picks the pairing with
the smallest total distance.

Usage:
    python tools/match_images.py --rows references/ --cols cutouts/
    python tools/match_images.py --rows a/ --cols b/ --num-workers 8 --pattern "*.jpg"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kuhnmunkres.configs import apply_overrides, get_default_config, load_config, parse_opts
from kuhnmunkres.costs import build_cost_matrix, find_images, open_images
from kuhnmunkres.solver import AssignmentError, HungarianSolver

logger = logging.getLogger("match_images")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pair two sets of images by mean colour")
    parser.add_argument("--rows", type=str, required=True, help="Directory of row images")
    parser.add_argument("--cols", type=str, required=True, help="Directory of column images")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument("--pattern", type=str, default=None, help="Glob pattern for image files")
    parser.add_argument("--num-workers", type=int, default=None, help="Threads scoring rows")
    parser.add_argument(
        "--opts",
        nargs="*",
        default=[],
        help="Override config options (format: key=value)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    config = load_config(args.config) if args.config else get_default_config()
    if args.opts:
        apply_overrides(config, parse_opts(args.opts))

    logging.basicConfig(
        level=getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    pattern = args.pattern or config.get("costs.pattern", "*.png")
    num_workers = args.num_workers or config.get("costs.num_workers", 4)

    try:
        row_paths = find_images(args.rows, pattern)
        col_paths = find_images(args.cols, pattern)
        logger.info(f"Found {len(row_paths)} row and {len(col_paths)} column image(s)")
        costs = build_cost_matrix(
            open_images(row_paths), open_images(col_paths), num_workers=num_workers
        )
        result = HungarianSolver(config=config).solve(costs)
    except (FileNotFoundError, ValueError, AssignmentError) as exc:
        logger.error(f"Failed to match images: {exc}")
        return 1

    for row, col in result.pairs():
        print(f"{row_paths[row].name} -> {col_paths[col].name} ({costs[row, col].item():.2f})")
    print(f"total distance: {result.cost:.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
