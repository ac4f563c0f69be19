# growth_vfi/cli/solve_vfi.py
"""
Command-line interface for solving the stochastic growth model via VFI.

Reads a parameter file, solves the model, logs progress and timing and
optionally saves the results and prints the value and policy tables.

Example:
    $ python -m growth_vfi.cli.solve_vfi --params params.txt
    $ python -m growth_vfi.cli.solve_vfi --params params.txt --maxtype binary --print
    $ python -m growth_vfi.cli.solve_vfi --params params.txt --howard 10 --output out/results.npz
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from growth_vfi.config.vfi_config import (
    BINARY_SEARCH,
    GRID_SEARCH,
    GridConfig,
    load_grid_config,
)
from growth_vfi.core.errors import GrowthVFIError
from growth_vfi.io.artifacts import save_vfi_results
from growth_vfi.io.parameter_file import load_parameter_file
from growth_vfi.io.report import format_solution_table

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_NOT_CONVERGED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve the stochastic growth model via VFI"
    )
    parser.add_argument(
        '--params',
        type=str,
        required=True,
        help="Parameter text file (one 'value, description' per line)."
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help="JSON grid config providing settings the parameter file lacks."
    )
    parser.add_argument(
        '--config-key',
        type=str,
        default='growth',
        help="Key of the grid settings inside the JSON config."
    )
    parser.add_argument(
        '--maxtype',
        type=str,
        default=None,
        choices=[GRID_SEARCH, BINARY_SEARCH, 'g', 'b'],
        help="Maximization method; overrides the parameter file."
    )
    parser.add_argument(
        '--howard',
        type=int,
        default=None,
        help="Howard steps per maximizing step; overrides the parameter file."
    )
    parser.add_argument(
        '--precision',
        type=str,
        default=None,
        choices=['float32', 'float64'],
        help="Floating point precision of the solve."
    )
    parser.add_argument(
        '--max-iter',
        type=int,
        default=None,
        help="Maximum number of Bellman iterations."
    )
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help="Save results to this .npz file."
    )
    parser.add_argument(
        '--print',
        dest='print_tables',
        action='store_true',
        help="Print the value and policy tables to stdout."
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help="Log per-iteration progress."
    )
    return parser


def _apply_overrides(config: GridConfig, args: argparse.Namespace) -> GridConfig:
    overrides = {}
    if args.maxtype is not None:
        overrides['maximization'] = args.maxtype
    if args.howard is not None:
        overrides['howard_steps'] = args.howard
    if args.precision is not None:
        overrides['precision'] = args.precision
    if args.max_iter is not None:
        overrides['max_iter_vfi'] = args.max_iter
    if not overrides:
        return config
    return dataclasses.replace(config, **overrides)


def run(args: argparse.Namespace) -> int:
    """Solve the model described by *args* and return the exit status."""
    from growth_vfi.vfi.growth import StochasticGrowthVFI

    base_config = None
    if args.config is not None:
        base_config = load_grid_config(args.config, args.config_key)

    logger.info(f"Loading parameters from {args.params}...")
    params, config = load_parameter_file(args.params, base_config)
    config = _apply_overrides(config, args)

    logger.info(
        f"Solving with n_capital = {config.n_capital}, "
        f"n_productivity = {config.n_productivity}, "
        f"maximization = {config.maximization}, "
        f"howard_steps = {config.howard_steps}, precision = {config.precision}"
    )
    solver = StochasticGrowthVFI(params, config)
    res = solver.solve()
    logger.info(
        f"Solve took {res['solve_seconds']:.3f} s over {res['iterations']} iterations."
    )

    if args.output:
        save_vfi_results(res, args.output)
        logger.info(f"VFI Results saved to {args.output}")

    if args.print_tables:
        print(format_solution_table(res))

    if not res['converged']:
        logger.error(
            f"VFI did not converge (final diff={res['distance']:.2e})."
        )
        return EXIT_NOT_CONVERGED
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the VFI solver CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        status = run(args)
    except (GrowthVFIError, FileNotFoundError, ValueError) as e:
        logger.error(f"Solver failed: {e}", exc_info=True)
        sys.exit(EXIT_ERROR)
    sys.exit(status)


if __name__ == "__main__":
    main()
