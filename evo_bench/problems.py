"""Benchmark objective functions and the registry used to construct them."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

import numpy as np
from numpy import float64
from numpy.typing import ArrayLike, NDArray

from evo_bench.errors import BuilderError, ConfigurationError


@dataclass(frozen=True)
class Problem(ABC):
    """
    Objective function to minimize over a box shaped domain.

    Args:
        minimum: lower bound of every dimension
        maximum: upper bound of every dimension
        n_dimensions: number of input variables

    Raises:
        BuilderError: if *n_dimensions* is not positive, a bound is not a real number or *minimum* is not smaller than
            *maximum*

    """

    name: ClassVar[str]

    minimum: float
    maximum: float
    n_dimensions: int

    def __post_init__(self) -> None:  # noqa: D105
        if isinstance(self.n_dimensions, bool) or not isinstance(self.n_dimensions, int | np.integer):
            raise BuilderError(f"{self.name}: dimensions must be an integer, got {self.n_dimensions!r}")
        if self.n_dimensions <= 0:
            raise BuilderError(f"{self.name}: dimensions must be positive, got {self.n_dimensions}")
        for field, bound in (("minimum", self.minimum), ("maximum", self.maximum)):
            if isinstance(bound, bool) or not isinstance(bound, int | float | np.integer | np.floating):
                raise BuilderError(f"{self.name}: {field} must be a real number, got {bound!r}")
        if not self.minimum < self.maximum:
            raise BuilderError(f"{self.name}: minimum {self.minimum} must be smaller than maximum {self.maximum}")

    def dimensions(self) -> int:
        """Number of input variables."""
        return self.n_dimensions

    @property
    def bounds(self) -> tuple[NDArray[float64], NDArray[float64]]:
        """Lower and upper bound vectors of the domain."""
        return np.full(self.n_dimensions, self.minimum, dtype=float64), np.full(
            self.n_dimensions, self.maximum, dtype=float64
        )

    def evaluate(self, x: ArrayLike) -> float:
        """
        Evaluate the objective at *x*.

        Raises:
            ValueError: if *x* does not have shape ``(n_dimensions,)``

        """
        x = np.asarray(x, dtype=float64)
        if x.shape != (self.n_dimensions,):
            raise ValueError(f"{self.name}: expected x of shape ({self.n_dimensions},), got {x.shape}")
        return float(self.function(x))

    @abstractmethod
    def function(self, x: NDArray[float64]) -> float:
        """Objective value at *x*, which is guaranteed to have the right shape."""


class Ackley(Problem):
    name = "ackley"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        mean_sq = np.mean(x**2)
        mean_cos = np.mean(np.cos(2 * np.pi * x))
        return float(-20.0 * np.exp(-0.2 * np.sqrt(mean_sq)) - np.exp(mean_cos) + 20.0 + np.e)


class AckleyN2(Problem):
    r"""
    Two input variant of Ackley's function.

    .. math::
        f(x) = -200 e^{-0.02 \sqrt{x_1^2 + x_2^2}}

    Raises:
        BuilderError: if built with other than 2 dimensions

    """

    name = "ackley_n2"

    def __post_init__(self) -> None:  # noqa: D105
        super().__post_init__()
        if self.n_dimensions != 2:
            raise BuilderError(f"{self.name} is only defined for 2 dimensions, got {self.n_dimensions}")

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(-200.0 * np.exp(-0.02 * np.sqrt(x[0] ** 2 + x[1] ** 2)))


class Alpine1(Problem):
    name = "alpine1"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.sum(np.abs(x * np.sin(x) + 0.1 * x)))


class Alpine2(Problem):
    """
    Alpine function no. 2, negated so that it is minimized.

    Raises:
        BuilderError: if the domain includes negative numbers

    """

    name = "alpine2"

    def __post_init__(self) -> None:  # noqa: D105
        super().__post_init__()
        if self.minimum < 0:
            raise BuilderError(f"{self.name} is only defined for non-negative inputs, got minimum {self.minimum}")

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(-np.prod(np.sqrt(x) * np.sin(x)))


class Deb1(Problem):
    name = "deb1"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(-np.mean(np.sin(5 * np.pi * x) ** 6))


class Exponential(Problem):
    name = "exponential"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(-np.exp(-0.5 * np.sum(x**2)))


class FourthDejong(Problem):
    name = "fourth_dejong"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.sum(x**4))


class Griewank(Problem):
    name = "griewank"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        i = np.arange(1, x.size + 1)
        return float(1.0 + np.sum(x**2) / 4000.0 - np.prod(np.cos(x / np.sqrt(i))))


class Rastrigin(Problem):
    name = "rastrigin"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(10.0 * x.size + np.sum(x**2 - 10.0 * np.cos(2 * np.pi * x)))


class Rosenbrock(Problem):
    name = "rosenbrock"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


class Schwefel222(Problem):
    name = "schwefel_2_22"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.sum(np.abs(x)) + np.prod(np.abs(x)))


class Sphere(Problem):
    name = "sphere"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.dot(x, x))


class Step(Problem):
    name = "step"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        return float(np.sum(np.floor(x + 0.5) ** 2))


class SumSquares(Problem):
    name = "sum_squares"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        i = np.arange(1, x.size + 1)
        return float(np.sum(i * x**2))


class Zakharov(Problem):
    name = "zakharov"

    def function(self, x: NDArray[float64]) -> float:  # noqa: D102
        weighted = np.sum(0.5 * np.arange(1, x.size + 1) * x)
        return float(np.sum(x**2) + weighted**2 + weighted**4)


class ProblemKind(Enum):
    """Enum for the benchmark problems known to the registry."""

    ACKLEY = "ackley"
    ACKLEY_N2 = "ackley_n2"
    ALPINE1 = "alpine1"
    ALPINE2 = "alpine2"
    DEB1 = "deb1"
    EXPONENTIAL = "exponential"
    FOURTH_DEJONG = "fourth_dejong"
    GRIEWANK = "griewank"
    RASTRIGIN = "rastrigin"
    ROSENBROCK = "rosenbrock"
    SCHWEFEL_2_22 = "schwefel_2_22"
    SPHERE = "sphere"
    STEP = "step"
    SUM_SQUARES = "sum_squares"
    ZAKHAROV = "zakharov"


PROBLEMS: dict[ProblemKind, type[Problem]] = {
    ProblemKind.ACKLEY: Ackley,
    ProblemKind.ACKLEY_N2: AckleyN2,
    ProblemKind.ALPINE1: Alpine1,
    ProblemKind.ALPINE2: Alpine2,
    ProblemKind.DEB1: Deb1,
    ProblemKind.EXPONENTIAL: Exponential,
    ProblemKind.FOURTH_DEJONG: FourthDejong,
    ProblemKind.GRIEWANK: Griewank,
    ProblemKind.RASTRIGIN: Rastrigin,
    ProblemKind.ROSENBROCK: Rosenbrock,
    ProblemKind.SCHWEFEL_2_22: Schwefel222,
    ProblemKind.SPHERE: Sphere,
    ProblemKind.STEP: Step,
    ProblemKind.SUM_SQUARES: SumSquares,
    ProblemKind.ZAKHAROV: Zakharov,
}

SUITE: tuple[ProblemKind, ...] = tuple(ProblemKind)
"""Problems of a full benchmark run, in row order."""

FIXED_TWO_DIMENSIONAL: frozenset[ProblemKind] = frozenset({ProblemKind.ACKLEY_N2})
"""Problems that a benchmark run always builds with 2 dimensions, whatever dimensionality it was asked for."""

DEFAULT_DOMAIN = (-100.0, 100.0)
DOMAINS: dict[ProblemKind, tuple[float, float]] = {ProblemKind.ALPINE2: (0.0, 100.0)}


def build(problem_kind: ProblemKind | str, dimensions: int, min_bound: float, max_bound: float) -> Problem:
    """
    Construct a benchmark problem.

    Args:
        problem_kind: which problem to build, either a :class:`ProblemKind` or its value
        dimensions: number of input variables
        min_bound: lower bound of every dimension
        max_bound: upper bound of every dimension

    Raises:
        ConfigurationError: if the problem kind is unknown, *dimensions* is not positive, a bound is not a real
            number or *min_bound* is not smaller than *max_bound*

    """
    try:
        kind = ProblemKind(problem_kind)
    except ValueError as e:
        raise ConfigurationError(f"Unknown benchmark problem {problem_kind!r}") from e
    return PROBLEMS[kind](minimum=min_bound, maximum=max_bound, n_dimensions=dimensions)


def build_suite(dimensions: int) -> list[Problem]:
    """
    Construct every problem of :const:`SUITE` with *dimensions* input variables.

    Problems in :const:`FIXED_TWO_DIMENSIONAL` are built with 2 dimensions regardless of *dimensions*.

    Raises:
        ConfigurationError: if any problem cannot be built

    """
    problems = []
    for kind in SUITE:
        n_dimensions = 2 if kind in FIXED_TWO_DIMENSIONAL else dimensions
        min_bound, max_bound = DOMAINS.get(kind, DEFAULT_DOMAIN)
        problems.append(build(kind, n_dimensions, min_bound, max_bound))
    return problems
