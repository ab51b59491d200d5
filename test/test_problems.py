import numpy as np
import pytest

from evo_bench.errors import BuilderError, ConfigurationError
from evo_bench.problems import (
    FIXED_TWO_DIMENSIONAL,
    PROBLEMS,
    SUITE,
    Problem,
    ProblemKind,
    build,
    build_suite,
)


@pytest.mark.parametrize(
    "kind,x,expected",
    [
        (ProblemKind.ACKLEY, [0.0, 0.0, 0.0], 0.0),
        (ProblemKind.ACKLEY_N2, [0.0, 0.0], -200.0),
        (ProblemKind.ALPINE1, [0.0, 0.0], 0.0),
        (ProblemKind.DEB1, [0.1, 0.3, -0.5], -1.0),
        (ProblemKind.EXPONENTIAL, [0.0, 0.0], -1.0),
        (ProblemKind.FOURTH_DEJONG, [1.0, -2.0], 17.0),
        (ProblemKind.GRIEWANK, [0.0, 0.0, 0.0], 0.0),
        (ProblemKind.RASTRIGIN, [0.0, 0.0], 0.0),
        (ProblemKind.ROSENBROCK, [1.0, 1.0, 1.0], 0.0),
        (ProblemKind.SCHWEFEL_2_22, [1.0, -2.0], 5.0),
        (ProblemKind.SPHERE, [3.0, 4.0], 25.0),
        (ProblemKind.STEP, [0.4, -0.4, 1.6], 4.0),
        (ProblemKind.SUM_SQUARES, [1.0, 2.0], 9.0),
        (ProblemKind.ZAKHAROV, [0.0, 0.0], 0.0),
    ],
)
def test_known_values(kind: ProblemKind, x: list[float], expected: float) -> None:
    problem = build(kind, len(x), -100.0, 100.0)
    assert problem.evaluate(np.array(x)) == pytest.approx(expected, abs=1e-12)


def test_alpine2_minimum() -> None:
    problem = build(ProblemKind.ALPINE2, 2, 0.0, 100.0)
    x_opt = np.full(2, 7.917)
    assert problem.evaluate(x_opt) == pytest.approx(-(2.808**2), rel=1e-3)


def test_build_accepts_kind_value() -> None:
    problem = build("sphere", 4, -5.0, 5.0)
    assert problem.name == "sphere"
    assert problem.dimensions() == 4
    lower, upper = problem.bounds
    np.testing.assert_array_equal(lower, np.full(4, -5.0))
    np.testing.assert_array_equal(upper, np.full(4, 5.0))


@pytest.mark.parametrize(
    "dimensions,min_bound,max_bound",
    [
        (0, -100.0, 100.0),
        (-3, -100.0, 100.0),
        (2, 100.0, 100.0),
        (2, 100.0, -100.0),
        (2, float("nan"), 100.0),
        (2, None, 1.0),
        (2, -1.0, None),
        (2, "a", "b"),
        (2, False, True),
    ],
)
def test_build_rejects_invalid_configuration(dimensions: int, min_bound: object, max_bound: object) -> None:
    with pytest.raises(ConfigurationError):
        build(ProblemKind.SPHERE, dimensions, min_bound, max_bound)  # type: ignore[arg-type]


def test_build_rejects_unknown_kind() -> None:
    with pytest.raises(ConfigurationError, match="Unknown benchmark problem"):
        build("himmelblau", 2, -5.0, 5.0)


def test_invalid_fields_raise_builder_error() -> None:
    with pytest.raises(BuilderError):
        build(ProblemKind.ACKLEY_N2, 3, -100.0, 100.0)
    with pytest.raises(BuilderError):
        build(ProblemKind.ALPINE2, 2, -100.0, 100.0)
    with pytest.raises(BuilderError, match="minimum must be a real number"):
        build(ProblemKind.SPHERE, 2, None, 1.0)  # type: ignore[arg-type]


def test_problems_are_immutable() -> None:
    problem = build(ProblemKind.SPHERE, 2, -1.0, 1.0)
    with pytest.raises(AttributeError):
        problem.n_dimensions = 3  # type: ignore[misc]


def test_evaluate_rejects_wrong_shape() -> None:
    problem = build(ProblemKind.SPHERE, 3, -1.0, 1.0)
    with pytest.raises(ValueError, match="shape"):
        problem.evaluate(np.zeros(2))


def test_every_kind_is_registered() -> None:
    assert set(PROBLEMS) == set(ProblemKind)
    assert all(issubclass(cls, Problem) and cls.name == kind.value for kind, cls in PROBLEMS.items())


@pytest.mark.parametrize("dimensions", [2, 10, 30])
def test_build_suite(dimensions: int) -> None:
    problems = build_suite(dimensions)

    assert len(problems) == 15
    assert [p.name for p in problems] == [kind.value for kind in SUITE]
    for kind, problem in zip(SUITE, problems, strict=True):
        expected_dimensions = 2 if kind in FIXED_TWO_DIMENSIONAL else dimensions
        assert problem.dimensions() == expected_dimensions
        assert (problem.minimum, problem.maximum) == ((0.0, 100.0) if kind is ProblemKind.ALPINE2 else (-100.0, 100.0))


def test_ackley_n2_ignores_requested_dimensions() -> None:
    problems = {p.name: p for p in build_suite(10)}
    assert problems["ackley_n2"].dimensions() == 2
    assert problems["ackley"].dimensions() == 10


def test_build_suite_propagates_configuration_errors() -> None:
    with pytest.raises(ConfigurationError):
        build_suite(0)
