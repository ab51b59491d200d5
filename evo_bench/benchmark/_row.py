from concurrent.futures import Executor

from evo_bench.benchmark._ranking import RowEntry, rank_entries
from evo_bench.benchmark._trials import OptimizerFactory, Seed, as_seed_sequence, run_trials
from evo_bench.config import BenchmarkParameters
from evo_bench.errors import NoDataError
from evo_bench.optimizers import create_optimizer
from evo_bench.problems import Problem
from evo_bench.utils.logger import LOGGER


def build_row(  # noqa: PLR0913
    params: BenchmarkParameters,
    problem: Problem,
    *,
    trial_count: int = 20,
    seed: Seed = None,
    max_processes: int | None = 1,
    optimizer_factory: OptimizerFactory = create_optimizer,
    executor: Executor | None = None,
) -> tuple[RowEntry, ...]:
    """
    Run DE/rand, DE/best and PSO on *problem* and rank their average best costs.

    Args:
        params: population sizes, evaluation budget and coefficients of the algorithms, see
            :meth:`~evo_bench.config.BenchmarkParameters.algorithm_configs`
        problem: problem to minimize
        trial_count: number of trials per algorithm
        seed: seeds the trials, each algorithm gets its own seed spawned from it
        max_processes: passed on to :func:`~evo_bench.benchmark.run_trials`
        optimizer_factory: passed on to :func:`~evo_bench.benchmark.run_trials`
        executor: passed on to :func:`~evo_bench.benchmark.run_trials`

    Returns:
        one (average cost, rank) entry per algorithm, in the order DE/rand, DE/best, PSO

    Raises:
        NoDataError: if an algorithm produced no result in any trial

    """
    configs = params.algorithm_configs()
    averages = []
    for config, algorithm_seed in zip(configs, as_seed_sequence(seed).spawn(len(configs)), strict=True):
        average = run_trials(
            config,
            problem,
            trial_count,
            seed=algorithm_seed,
            max_processes=max_processes,
            optimizer_factory=optimizer_factory,
            executor=executor,
        )
        if average is None:
            raise NoDataError(f"{config.name} has no result on {problem.name} to rank")
        averages.append(average)
    row = rank_entries(averages)
    LOGGER.debug(f"{problem.name}: {row}")
    return row
