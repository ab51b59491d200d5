from contextlib import ExitStack

from rich.progress import track
from rich.status import Status

from evo_bench.benchmark._ranking import RankMatrix
from evo_bench.benchmark._row import build_row
from evo_bench.benchmark._trials import OptimizerFactory, Seed, as_seed_sequence, process_pool
from evo_bench.config import ALGORITHM_NAMES, BenchmarkParameters
from evo_bench.optimizers import create_optimizer
from evo_bench.problems import build_suite
from evo_bench.utils.logger import LOGGER


def run_suite(  # noqa: PLR0913
    dimensions: int,
    *,
    trial_count: int = 20,
    seed: Seed = None,
    max_processes: int | None = 1,
    optimizer_factory: OptimizerFactory = create_optimizer,
    progress: bool = False,
) -> RankMatrix:
    """
    Benchmark DE/rand, DE/best and PSO on every problem of :const:`~evo_bench.problems.SUITE`.

    Args:
        dimensions: dimensionality of the problems, also selects the population sizes and evaluation budget, see
            :meth:`~evo_bench.config.BenchmarkParameters.for_dimensions`
        trial_count: number of trials per algorithm and problem
        seed: seeds the run, a seeded run is reproducible
        max_processes: maximum number of worker processes, one pool is shared by every row, set to 1 to run all
            trials in the current process
        optimizer_factory: passed on to :func:`~evo_bench.benchmark.run_trials`
        progress: whether to show a progress bar that advances with each completed problem

    Returns:
        one row per problem, in suite order

    Raises:
        ConfigurationError: if the parameters or a problem cannot be configured for *dimensions*
        NoDataError: if an algorithm produced no result on a problem

    """
    params = BenchmarkParameters.for_dimensions(dimensions)
    with Status("Building benchmark problems"):
        problems = build_suite(dimensions)
    LOGGER.info(
        f"Benchmarking {', '.join(ALGORITHM_NAMES)} on {len(problems)} problems in {dimensions} dimensions, "
        f"{trial_count} trials of {params.max_cf} evaluations each"
    )

    row_seeds = as_seed_sequence(seed).spawn(len(problems))
    with ExitStack() as stack:
        executor = None
        if max_processes != 1 and trial_count > 1:
            executor = stack.enter_context(process_pool(max_processes))
        rows = [
            build_row(
                params,
                problem,
                trial_count=trial_count,
                seed=row_seed,
                optimizer_factory=optimizer_factory,
                executor=executor,
            )
            for problem, row_seed in track(
                list(zip(problems, row_seeds, strict=True)), description="Benchmarking", disable=not progress
            )
        ]
    LOGGER.info("Benchmark execution complete")
    return RankMatrix(problems=tuple(p.name for p in problems), rows=tuple(rows))
