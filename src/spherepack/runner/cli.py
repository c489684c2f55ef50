"""Command line entry point: pack spheres from INPUT and write results to OUTPUT."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from spherepack.core.errors import SpherePackError
from spherepack.logging_config import setup_logging
from spherepack.runner.config import CONTAINER_SHAPES, SimulationConfig, load_config
from spherepack.runner.simulation import run_file

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spherepack",
        description="Attempts to pack spheres into a container and reports the result",
    )
    parser.add_argument("input", help="Input JSON file with the sphere distribution")
    parser.add_argument("output", help="Output JSON file for the results")
    parser.add_argument(
        "--config",
        default=None,
        help="YAML configuration file (default: built-in settings)",
    )
    parser.add_argument(
        "--container",
        choices=CONTAINER_SHAPES,
        default=None,
        help="Container shape, overrides the configuration file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random source, overrides the configuration file",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    config = load_config(args.config) if args.config else SimulationConfig()
    return config.with_overrides(shape=args.container, seed=args.seed)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one simulation. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    try:
        setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)
        config = resolve_config(args)
        run_file(args.input, args.output, config=config)
    except SpherePackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
