from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from scipy import stats

from evo_bench.benchmark._ranking import RankMatrix

CRITICAL_VALUE = 23.685
"""
Critical value of the full benchmark, 15 problems by 3 algorithms.

Use :func:`critical_value` when comparing a different number of problems or algorithms.
"""


class FriedmanResult(NamedTuple):
    """Friedman statistic of a rank matrix and whether it exceeds the critical value."""

    chi_square: float
    significant: bool


def critical_value(dof: int, alpha: float = 0.05) -> float:
    """
    Critical value of the chi-square distribution with *dof* degrees of freedom at significance level *alpha*.

    Raises:
        ValueError: if *dof* is not positive or *alpha* is not in (0, 1)

    """
    if dof <= 0:
        raise ValueError(f"Degrees of freedom must be positive, got {dof}")
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    return float(stats.chi2.ppf(1 - alpha, dof))


def friedman(
    matrix: RankMatrix | Sequence[Sequence[tuple[float, float]]],
    threshold: float = CRITICAL_VALUE,
) -> FriedmanResult:
    r"""
    Friedman test of the ranks in *matrix*.

    With :math:`n` problems, :math:`k` algorithms and :math:`R_j` the rank sum of algorithm :math:`j`,

    .. math::
        \chi^2 = \frac{12}{n k (k + 1)} \sum_{j=1}^{k} R_j^2 - 3 n (k + 1)

    The formula assumes that the ranks of each row are a permutation of 1..k, with tied ranks averaged.

    Args:
        matrix: ranked benchmark results, or rows of (average cost, rank) pairs
        threshold: the performance of the algorithms is considered significantly different if the statistic
            exceeds this value, defaults to :const:`CRITICAL_VALUE`

    Raises:
        ValueError: if *matrix* has no rows or no columns, or its rows differ in length

    """
    if isinstance(matrix, RankMatrix):
        ranks = matrix.ranks()
    else:
        row_lengths = {len(row) for row in matrix}
        if len(row_lengths) > 1:
            raise ValueError(f"Rows of the rank matrix differ in length: {sorted(row_lengths)}")
        ranks = np.array([[rank for _, rank in row] for row in matrix], dtype=np.float64)
    if ranks.ndim != 2 or 0 in ranks.shape:
        raise ValueError(f"Rank matrix must have at least one row and column, got shape {ranks.shape}")

    n, k = ranks.shape
    rank_sums = ranks.sum(axis=0)
    chi_square = 12 * float(np.sum(rank_sums**2)) / (n * k * (k + 1)) - 3 * n * (k + 1)
    return FriedmanResult(chi_square=chi_square, significant=chi_square > threshold)
