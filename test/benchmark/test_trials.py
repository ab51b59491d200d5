import itertools
import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from evo_bench.benchmark import as_seed_sequence, process_pool, run_trials, running_average
from evo_bench.config import AlgorithmConfig
from evo_bench.errors import ConfigurationError
from evo_bench.optimizers import Optimizer, create_optimizer
from evo_bench.problems import Problem, ProblemKind, build

CONFIG = AlgorithmConfig.de_rand(population=4, max_cost_evaluations=60, f=0.8, cr=0.9)
PROBLEM = build(ProblemKind.SPHERE, 2, -10.0, 10.0)


class _ScriptedOptimizer(Optimizer):
    def __init__(
        self, config: AlgorithmConfig, problem: Problem, rng: np.random.Generator | None, best: float | None
    ) -> None:
        super().__init__(config, problem, rng)
        self._scripted_best = best
        self.ran = False

    def run(self) -> None:
        self.ran = True
        self._best_cost = self._scripted_best


def _scripted_factory(
    results: Iterable[float | None], created: list[_ScriptedOptimizer] | None = None
) -> Callable[[AlgorithmConfig, Problem, np.random.Generator], Optimizer]:
    it = iter(results)

    def factory(config: AlgorithmConfig, problem: Problem, rng: np.random.Generator) -> Optimizer:
        optimizer = _ScriptedOptimizer(config, problem, rng, next(it))
        if created is not None:
            created.append(optimizer)
        return optimizer

    return factory


@pytest.mark.parametrize(
    "values",
    [
        [1.0],
        [3.0, 1.0, 2.0],
        [1e-12, 5e6, -3.5, 0.0, 42.0],
        list(np.random.default_rng(0).normal(size=20)),
    ],
)
def test_running_average_is_the_mean(values: list[float]) -> None:
    assert running_average(values) == pytest.approx(float(np.mean(values)))


def test_running_average_does_not_depend_on_order() -> None:
    values = [4.0, -1.5, 9.25, 0.125]
    averages = [running_average(p) for p in itertools.permutations(values)]
    assert averages == pytest.approx([np.mean(values)] * len(averages))


def test_running_average_skips_missing_values() -> None:
    assert running_average([None, 1.0, None, 3.0]) == pytest.approx(2.0)
    assert running_average([None, None]) is None
    assert running_average([]) is None


def test_run_trials_averages_best_costs() -> None:
    created: list[_ScriptedOptimizer] = []
    average = run_trials(CONFIG, PROBLEM, 4, optimizer_factory=_scripted_factory([1.0, 2.0, 3.0, 6.0], created))

    assert average == pytest.approx(3.0)
    assert len(created) == 4
    assert all(o.ran for o in created)
    assert len({id(o) for o in created}) == 4


def test_run_trials_skips_failed_trials(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        average = run_trials(CONFIG, PROBLEM, 5, optimizer_factory=_scripted_factory([None, 2.0, None, 4.0, 9.0]))

    assert average == pytest.approx(5.0)
    assert "2 of 5 trials" in caplog.text


def test_run_trials_without_trials_has_no_data() -> None:
    created: list[_ScriptedOptimizer] = []
    assert run_trials(CONFIG, PROBLEM, 0, optimizer_factory=_scripted_factory([], created)) is None
    assert created == []


def test_run_trials_reports_when_every_trial_failed(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        average = run_trials(CONFIG, PROBLEM, 3, optimizer_factory=_scripted_factory([None] * 3))

    assert average is None
    assert "no result in any of 3 trials on sphere" in caplog.text


def test_run_trials_rejects_negative_trial_count() -> None:
    with pytest.raises(ConfigurationError):
        run_trials(CONFIG, PROBLEM, -1)


def test_run_trials_gives_each_trial_its_own_generator() -> None:
    created: list[_ScriptedOptimizer] = []
    run_trials(CONFIG, PROBLEM, 3, seed=7, optimizer_factory=_scripted_factory([1.0] * 3, created))

    draws = [o.rng.random() for o in created]
    assert len(set(draws)) == 3


def test_seeded_run_trials_is_reproducible() -> None:
    first = run_trials(CONFIG, PROBLEM, 5, seed=123)
    second = run_trials(CONFIG, PROBLEM, 5, seed=as_seed_sequence(123))
    assert first is not None
    assert first == second


def test_run_trials_in_processes_matches_sequential_run() -> None:
    sequential = run_trials(CONFIG, PROBLEM, 4, seed=5, optimizer_factory=create_optimizer)
    parallel = run_trials(CONFIG, PROBLEM, 4, seed=5, max_processes=2, optimizer_factory=create_optimizer)
    assert sequential is not None
    assert parallel == pytest.approx(sequential)


def test_run_trials_on_a_given_executor_matches_sequential_run() -> None:
    sequential = run_trials(CONFIG, PROBLEM, 4, seed=5)
    with ThreadPoolExecutor(max_workers=2) as executor:
        shared = run_trials(CONFIG, PROBLEM, 4, seed=5, max_processes=1, executor=executor)
    assert sequential is not None
    assert shared == pytest.approx(sequential)


def test_process_pool_runs_trials_of_several_calls() -> None:
    with process_pool(2) as pool:
        first = run_trials(CONFIG, PROBLEM, 3, seed=1, executor=pool)
        second = run_trials(CONFIG, PROBLEM, 3, seed=1, executor=pool)
    assert first is not None
    assert first == pytest.approx(second)
