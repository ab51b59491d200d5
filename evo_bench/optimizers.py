"""Stochastic optimizers compared by the benchmark."""

from abc import ABC, abstractmethod

import numpy as np
from numpy import float64
from numpy.typing import NDArray

from evo_bench.config import AlgorithmConfig, AlgorithmKind
from evo_bench.errors import ConfigurationError
from evo_bench.problems import Problem


class Optimizer(ABC):
    """
    Minimizes a problem within a fixed budget of cost function evaluations.

    Create a new instance for every run, instances keep the state of the run they were used for.

    Args:
        config: algorithm parameters, including the evaluation budget
        problem: problem to minimize
        rng: source of randomness, a new unseeded generator is used if not provided

    """

    def __init__(self, config: AlgorithmConfig, problem: Problem, rng: np.random.Generator | None = None) -> None:
        self.config = config
        self.problem = problem
        self.rng = rng if rng is not None else np.random.default_rng()
        self.evaluations = 0
        self._best_cost: float | None = None
        self._best_x: NDArray[float64] | None = None

    @abstractmethod
    def run(self) -> None:
        """Run the optimizer until its evaluation budget is spent."""

    def get_best(self) -> float | None:
        """Lowest finite cost found so far, ``None`` if no evaluation has produced one."""
        return self._best_cost

    def get_best_x(self) -> NDArray[float64] | None:
        """Position of :meth:`get_best`."""
        return self._best_x

    @property
    def budget_left(self) -> int:
        """Number of evaluations that may still be spent."""
        return self.config.max_cost_evaluations - self.evaluations

    def _evaluate(self, x: NDArray[float64]) -> float:
        """Evaluate *x*, spending one evaluation, and return the cost with non-finite costs mapped to ``inf``."""
        cost = self.problem.evaluate(x)
        self.evaluations += 1
        if not np.isfinite(cost):
            return float("inf")
        if self._best_cost is None or cost < self._best_cost:
            self._best_cost = cost
            self._best_x = x.copy()
        return cost

    def _random_positions(self, n: int) -> NDArray[float64]:
        lower, upper = self.problem.bounds
        return self.rng.uniform(lower, upper, size=(n, self.problem.dimensions()))


class DifferentialEvolution(Optimizer):
    r"""
    Differential evolution with one difference vector and binomial crossover.

    For each target :math:`\mathbf{x}_i` a mutant is created as

    .. math::
        \mathbf{v}_i = \mathbf{x}_{b} + F (\mathbf{x}_{r_1} - \mathbf{x}_{r_2})

    where :math:`\mathbf{x}_b` is a random individual (DE/rand) or the best individual (DE/best), and
    :math:`r_1, r_2` are distinct random indices different from :math:`i` and :math:`b`. The trial vector takes
    each coordinate from the mutant with probability CR, and at least one coordinate always. The trial replaces the
    target if its cost is not worse.

    """

    def __init__(self, config: AlgorithmConfig, problem: Problem, rng: np.random.Generator | None = None) -> None:
        if config.kind not in {AlgorithmKind.DE_RAND, AlgorithmKind.DE_BEST}:
            raise ConfigurationError(f"DifferentialEvolution cannot run {config.name}")
        super().__init__(config, problem, rng)

    def run(self) -> None:  # noqa: D102
        lower, upper = self.problem.bounds
        n_pop = self.config.population
        population = self._random_positions(n_pop)
        fitness = np.full(n_pop, np.inf)
        for i in range(min(n_pop, self.budget_left)):
            fitness[i] = self._evaluate(population[i])

        while self.budget_left > 0:
            for i in range(n_pop):
                if self.budget_left == 0:
                    break
                trial = np.clip(self._crossover(population[i], self._mutant(population, fitness, i)), lower, upper)
                cost = self._evaluate(trial)
                if cost <= fitness[i]:
                    population[i] = trial
                    fitness[i] = cost

    def _mutant(self, population: NDArray[float64], fitness: NDArray[float64], target: int) -> NDArray[float64]:
        candidates = [j for j in range(len(population)) if j != target]
        if self.config.kind is AlgorithmKind.DE_BEST:
            base = int(np.argmin(fitness))
            candidates = [j for j in candidates if j != base]
            r1, r2 = self.rng.choice(candidates, size=2, replace=False)
        else:
            base, r1, r2 = self.rng.choice(candidates, size=3, replace=False)
        mutant: NDArray[float64] = population[base] + self.config.f * (population[r1] - population[r2])
        return mutant

    def _crossover(self, target: NDArray[float64], mutant: NDArray[float64]) -> NDArray[float64]:
        mask = self.rng.random(target.size) < self.config.cr
        mask[self.rng.integers(target.size)] = True
        return np.where(mask, mutant, target)


class ParticleSwarm(Optimizer):
    r"""
    Global best particle swarm optimization.

    Particles move according to

    .. math::
        \mathbf{v} \leftarrow w \mathbf{v} + c_1 r_1 (\mathbf{p} - \mathbf{x}) + c_2 r_2 (\mathbf{g} - \mathbf{x}),
        \quad \mathbf{x} \leftarrow \mathbf{x} + \mathbf{v}

    where :math:`\mathbf{p}` is the particle's own best position, :math:`\mathbf{g}` the swarm's best position, and
    :math:`r_1, r_2` are uniform random vectors. Velocities are clamped to the width of the domain and positions to
    the domain.

    """

    def __init__(self, config: AlgorithmConfig, problem: Problem, rng: np.random.Generator | None = None) -> None:
        if config.kind is not AlgorithmKind.PSO:
            raise ConfigurationError(f"ParticleSwarm cannot run {config.name}")
        super().__init__(config, problem, rng)

    def run(self) -> None:  # noqa: D102
        lower, upper = self.problem.bounds
        v_max = upper - lower
        n_particles = self.config.population
        positions = self._random_positions(n_particles)
        velocities = self.rng.uniform(-v_max, v_max, size=positions.shape) * 0.1
        best_positions = positions.copy()
        best_costs = np.full(n_particles, np.inf)
        for i in range(min(n_particles, self.budget_left)):
            best_costs[i] = self._evaluate(positions[i])
        swarm_best = best_positions[int(np.argmin(best_costs))].copy()

        while self.budget_left > 0:
            for i in range(n_particles):
                if self.budget_left == 0:
                    break
                r1 = self.rng.random(positions.shape[1])
                r2 = self.rng.random(positions.shape[1])
                velocities[i] = np.clip(
                    self.config.w * velocities[i]
                    + self.config.c1 * r1 * (best_positions[i] - positions[i])
                    + self.config.c2 * r2 * (swarm_best - positions[i]),
                    -v_max,
                    v_max,
                )
                positions[i] = np.clip(positions[i] + velocities[i], lower, upper)
                cost = self._evaluate(positions[i])
                if cost < best_costs[i]:
                    best_costs[i] = cost
                    best_positions[i] = positions[i]
                    if cost <= best_costs.min():
                        swarm_best = positions[i].copy()


def create_optimizer(config: AlgorithmConfig, problem: Problem, rng: np.random.Generator | None = None) -> Optimizer:
    """Create the optimizer that runs *config* on *problem*."""
    if config.kind is AlgorithmKind.PSO:
        return ParticleSwarm(config, problem, rng)
    return DifferentialEvolution(config, problem, rng)
