from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import Executor, ProcessPoolExecutor
from contextlib import contextmanager
from multiprocessing import Manager
from typing import TypeAlias

import numpy as np

from evo_bench.config import AlgorithmConfig
from evo_bench.errors import ConfigurationError
from evo_bench.optimizers import Optimizer, create_optimizer
from evo_bench.problems import Problem
from evo_bench.utils import logger
from evo_bench.utils.logger import LOGGER

OptimizerFactory: TypeAlias = Callable[[AlgorithmConfig, Problem, np.random.Generator], Optimizer]
"""Creates a fresh optimizer for one trial, must be picklable when trials run in worker processes."""

Seed: TypeAlias = int | np.random.SeedSequence | None


def as_seed_sequence(seed: Seed) -> np.random.SeedSequence:
    """Wrap *seed* in a :class:`~numpy.random.SeedSequence` unless it already is one."""
    if isinstance(seed, np.random.SeedSequence):
        return seed
    return np.random.SeedSequence(seed)


def run_trials(  # noqa: PLR0913
    config: AlgorithmConfig,
    problem: Problem,
    trial_count: int = 20,
    *,
    seed: Seed = None,
    max_processes: int | None = 1,
    optimizer_factory: OptimizerFactory = create_optimizer,
    executor: Executor | None = None,
) -> float | None:
    """
    Run *config* on *problem* *trial_count* times and average the best costs found.

    Trials that find no best cost are left out of the average.

    Args:
        config: algorithm to run
        problem: problem to minimize
        trial_count: number of independent runs
        seed: seeds the trials' random generators, each trial gets its own generator spawned from it
        max_processes: maximum number of processes to use when running trials, set to 1 to run all trials in the
            current process or ``None`` to use :class:`~concurrent.futures.ProcessPoolExecutor`'s default,
            ignored if *executor* is given
        optimizer_factory: creates the optimizer of each trial
        executor: runs the trials, e.g. a pool from :func:`process_pool` shared by many calls, a new pool is
            created for this call if not given and *max_processes* is not 1

    Returns:
        average best cost of the successful trials, or ``None`` if *trial_count* is 0 or no trial succeeded

    Raises:
        ConfigurationError: if *trial_count* is negative

    """
    if trial_count < 0:
        raise ConfigurationError(f"trial_count must be non-negative, got {trial_count}")
    trial_seeds = as_seed_sequence(seed).spawn(trial_count)
    if executor is not None:
        results = _submit_trials(executor, optimizer_factory, config, problem, trial_seeds)
    elif max_processes == 1 or trial_count <= 1:
        results = [_run_trial(optimizer_factory, config, problem, s) for s in trial_seeds]
    else:
        with process_pool(max_processes) as pool:
            results = _submit_trials(pool, optimizer_factory, config, problem, trial_seeds)

    average = running_average(results)
    n_failed = sum(r is None for r in results)
    if average is None and trial_count > 0:
        LOGGER.warning(f"{config.name} produced no result in any of {trial_count} trials on {problem.name}")
    elif n_failed:
        LOGGER.warning(f"{config.name} produced no result in {n_failed} of {trial_count} trials on {problem.name}")
    LOGGER.debug(f"{config.name} on {problem.name}: average best cost {average}")
    return average


def running_average(values: Iterable[float | None]) -> float | None:
    """
    Mean of the values that are not ``None``, computed as a running average in the order given.

    Returns:
        the mean, or ``None`` if there is no value to average

    """
    average: float | None = None
    for i, value in enumerate(v for v in values if v is not None):
        acc = 0.0 if average is None else average
        average = (acc * i) / (i + 1) + value / (i + 1)
    return average


@contextmanager
def process_pool(max_processes: int | None) -> Iterator[ProcessPoolExecutor]:
    """
    Process pool whose workers log through the current process' handlers.

    The pool, its manager process and the log listener are shut down on exit.

    Args:
        max_processes: maximum number of worker processes, ``None`` for
            :class:`~concurrent.futures.ProcessPoolExecutor`'s default

    """
    with Manager() as manager:
        log_listener = logger.start_log_listener(manager, LOGGER.getEffectiveLevel())
        try:
            with ProcessPoolExecutor(
                initializer=logger.start_queue_logger, initargs=(log_listener.queue,), max_workers=max_processes
            ) as executor:
                LOGGER.debug(f"Concurrent processes: {executor._max_workers}")  # type: ignore[attr-defined] # noqa: SLF001
                yield executor
        finally:
            log_listener.stop()


def _submit_trials(
    executor: Executor,
    optimizer_factory: OptimizerFactory,
    config: AlgorithmConfig,
    problem: Problem,
    trial_seeds: list[np.random.SeedSequence],
) -> list[float | None]:
    futures = [executor.submit(_run_trial, optimizer_factory, config, problem, s) for s in trial_seeds]
    # trial order, not completion order
    return [f.result() for f in futures]


def _run_trial(
    optimizer_factory: OptimizerFactory,
    config: AlgorithmConfig,
    problem: Problem,
    seed: np.random.SeedSequence,
) -> float | None:
    optimizer = optimizer_factory(config, problem, np.random.default_rng(seed))
    optimizer.run()
    best = optimizer.get_best()
    return None if best is None else float(best)
