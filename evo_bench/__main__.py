"""Command line entry point, run ``python -m evo_bench --help`` for usage."""

import argparse
import logging
import sys
from collections.abc import Sequence

from evo_bench.benchmark import display_matrix, friedman, run_suite
from evo_bench.errors import ConfigurationError, NoDataError
from evo_bench.utils import logger
from evo_bench.utils.logger import LOGGER


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return number


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evo-bench",
        description=(
            "Compare DE/rand/1/bin, DE/best/1/bin and PSO on a suite of benchmark problems and decide with a "
            "Friedman test whether their performance differs significantly."
        ),
    )
    parser.add_argument("dimensions", type=_positive_int, help="dimensionality of the benchmark problems")
    parser.add_argument("--trials", type=_positive_int, default=20, help="trials per algorithm and problem")
    parser.add_argument("--seed", type=_non_negative_int, default=None, help="seed for a reproducible run")
    parser.add_argument(
        "--max-processes",
        type=_positive_int,
        default=1,
        help="maximum number of processes running trials, 1 runs everything in the current process",
    )
    parser.add_argument("--table-fmt", choices=["grid", "latex"], default="grid", help="format of the result table")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="minimum level to log",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the benchmark and print ``(chi_square, significant)`` on standard output.

    Returns:
        exit status, 0 on success and 1 if the benchmark could not be completed

    """
    args = _parser().parse_args(argv)
    logger.start_logger(getattr(logging, args.log_level))
    try:
        matrix = run_suite(
            args.dimensions,
            trial_count=args.trials,
            seed=args.seed,
            max_processes=args.max_processes,
            progress=True,
        )
    except (ConfigurationError, NoDataError) as e:
        LOGGER.error(f"Benchmark aborted: {e}")  # noqa: TRY400
        return 1
    result = friedman(matrix)
    display_matrix(matrix, result, args.table_fmt)
    print((result.chi_square, result.significant))  # noqa: T201
    return 0


if __name__ == "__main__":
    sys.exit(main())
