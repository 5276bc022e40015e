#!/usr/bin/env python3
"""Solve a square assignment problem from the command line.

This script provides a command-line interface for the Hungarian solver:
    - Cost matrix from a CSV file or randomly generated
    - Configuration from YAML with CLI overrides
    - Optional step-by-step image export
    - Result written as YAML

Usage:
    From a CSV file:
        python tools/solve.py --input costs.csv

    Random 6x6 problem with step images:
        python tools/solve.py --random 6 --seed 0 --export-dir /tmp/hungarian_steps

    With config overrides:
        python tools/solve.py --input costs.csv --config solver.yaml \\
            --opts logging.enabled=true logging.log_interval=5
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import torch
import yaml

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kuhnmunkres.configs import apply_overrides, get_default_config, load_config, parse_opts
from kuhnmunkres.solver import AssignmentError, HungarianSolver

logger = logging.getLogger("solve")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Solve a square assignment problem with the Hungarian method",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=str,
        help="CSV file holding the n x n cost matrix",
    )
    source.add_argument(
        "--random",
        type=int,
        metavar="N",
        help="Generate an N x N matrix whose rows are shuffles of 3..N+2",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for --random",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--export-dir",
        type=str,
        default=None,
        help="Write one PNG image per solver step to this directory",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the result as YAML to this file",
    )
    parser.add_argument(
        "--opts",
        nargs="*",
        default=[],
        help="Override config options (format: key=value, e.g., logging.enabled=true)",
    )

    return parser.parse_args(argv)


def random_permutation_matrix(size: int, seed: Optional[int] = None) -> torch.Tensor:
    """Matrix whose rows are independent shuffles of 3, 4, ..., size + 2."""
    generator = torch.Generator()
    if seed is not None:
        generator.manual_seed(seed)
    base = torch.arange(3, size + 3, dtype=torch.float64)
    return torch.stack([base[torch.randperm(size, generator=generator)] for _ in range(size)])


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    config = load_config(args.config) if args.config else get_default_config()
    if args.opts:
        apply_overrides(config, parse_opts(args.opts))
    if args.export_dir:
        config.set("export.enabled", True)
        config.set("export.output_dir", args.export_dir)

    logging.basicConfig(
        level=getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.input:
        costs = np.loadtxt(args.input, delimiter=",", ndmin=2)
        logger.info(f"Loaded cost matrix from: {args.input}")
    else:
        costs = random_permutation_matrix(args.random, args.seed)
        logger.info(f"Generated random {args.random}x{args.random} cost matrix")

    solver = HungarianSolver(config=config)
    try:
        result = solver.solve(costs)
    except AssignmentError as exc:
        logger.error(f"Failed to solve: {exc}")
        return 1

    for row, col in result.pairs():
        print(f"{row} -> {col}")
    print(f"cost: {result.cost:g}")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                {
                    "assignment": list(result.row_to_col),
                    "cost": result.cost,
                    "iterations": result.iterations,
                    "augmentations": result.augmentations,
                },
                f,
                default_flow_style=False,
                sort_keys=False,
            )
        logger.info(f"Saved result to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
