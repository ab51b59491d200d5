"""Algorithm configurations and the benchmark parameters they are derived from."""

from dataclasses import dataclass
from enum import Enum

from evo_bench.errors import ConfigurationError

DE_BEST_POPULATION = 10
"""Population size of DE/best, independent of the benchmark's dimensionality."""


class AlgorithmKind(Enum):
    """Enum for the algorithm variants compared by the benchmark."""

    DE_RAND = "DE/rand/1/bin"
    DE_BEST = "DE/best/1/bin"
    PSO = "PSO"


@dataclass(frozen=True)
class AlgorithmConfig:
    """
    Configuration of one algorithm variant.

    Args:
        kind: algorithm variant
        population: number of individuals (DE) or particles (PSO)
        max_cost_evaluations: number of cost function evaluations a run is allowed to spend
        f: differential weight, DE only
        cr: crossover probability, DE only
        w: inertia weight, PSO only
        c1: cognitive coefficient, PSO only
        c2: social coefficient, PSO only

    Raises:
        ConfigurationError: if the population is too small for the variant, the budget is not positive or a
            probability is outside [0, 1]

    """

    kind: AlgorithmKind
    population: int
    max_cost_evaluations: int
    f: float = 0.0
    cr: float = 0.0
    w: float = 0.0
    c1: float = 0.0
    c2: float = 0.0

    def __post_init__(self) -> None:  # noqa: D105
        if self.max_cost_evaluations <= 0:
            raise ConfigurationError(f"max_cost_evaluations must be positive, got {self.max_cost_evaluations}")
        if self.population < self.min_population:
            raise ConfigurationError(
                f"{self.kind.value} needs a population of at least {self.min_population}, got {self.population}"
            )
        if not 0.0 <= self.cr <= 1.0:
            raise ConfigurationError(f"cr must be in [0, 1], got {self.cr}")

    @property
    def name(self) -> str:
        """Name of the algorithm variant."""
        return self.kind.value

    @property
    def min_population(self) -> int:
        """Smallest population the variant can run with."""
        # the target, the base vector and both difference vector ends are distinct individuals
        if self.kind in {AlgorithmKind.DE_RAND, AlgorithmKind.DE_BEST}:
            return 4
        return 1

    @classmethod
    def de_rand(cls, population: int, max_cost_evaluations: int, f: float, cr: float) -> "AlgorithmConfig":
        """Create a DE/rand/1/bin configuration."""
        return cls(AlgorithmKind.DE_RAND, population, max_cost_evaluations, f=f, cr=cr)

    @classmethod
    def de_best(cls, population: int, max_cost_evaluations: int, f: float, cr: float) -> "AlgorithmConfig":
        """Create a DE/best/1/bin configuration."""
        return cls(AlgorithmKind.DE_BEST, population, max_cost_evaluations, f=f, cr=cr)

    @classmethod
    def pso(  # noqa: PLR0913
        cls, population: int, max_cost_evaluations: int, w: float, c1: float, c2: float
    ) -> "AlgorithmConfig":
        """Create a particle swarm configuration."""
        return cls(AlgorithmKind.PSO, population, max_cost_evaluations, w=w, c1=c1, c2=c2)


@dataclass(frozen=True)
class BenchmarkParameters:
    """
    Parameters shared by all rows of a benchmark run.

    Use :meth:`for_dimensions` to get the parameters for a given dimensionality.

    Args:
        dim: dimensionality of the benchmark problems
        max_cf: number of cost function evaluations per run
        pop: population size of DE/rand and PSO
        f_rnd: differential weight of DE/rand
        cr_rnd: crossover probability of DE/rand
        f_bst: differential weight of DE/best
        cr_bst: crossover probability of DE/best
        c: cognitive and social coefficient of PSO
        w: inertia weight of PSO

    """

    dim: int
    max_cf: int
    pop: int
    f_rnd: float = 0.8
    cr_rnd: float = 0.9
    f_bst: float = 0.5
    cr_bst: float = 0.9
    c: float = 1.49618
    w: float = 0.7298

    @classmethod
    def for_dimensions(cls, dim: int) -> "BenchmarkParameters":
        """
        Get the population size and evaluation budget used for *dim* dimensional problems.

        Raises:
            ConfigurationError: if *dim* is not positive

        """
        if dim <= 0:
            raise ConfigurationError(f"Dimensionality must be positive, got {dim}")
        match dim:
            case 2:
                pop, max_cf = 10, 4000
            case 10:
                pop, max_cf = 20, 20000
            case _:
                pop, max_cf = 40, 40000
        return cls(dim=dim, max_cf=max_cf, pop=pop)

    def algorithm_configs(self) -> tuple[AlgorithmConfig, AlgorithmConfig, AlgorithmConfig]:
        """Configurations of DE/rand, DE/best and PSO, in the column order of a benchmark row."""
        return (
            AlgorithmConfig.de_rand(self.pop, self.max_cf, self.f_rnd, self.cr_rnd),
            AlgorithmConfig.de_best(DE_BEST_POPULATION, self.max_cf, self.f_bst, self.cr_bst),
            AlgorithmConfig.pso(self.pop, self.max_cf, self.w, self.c, self.c),
        )


ALGORITHM_NAMES: tuple[str, ...] = tuple(kind.value for kind in AlgorithmKind)
"""Column headers of a benchmark row."""
