import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy import float64
from numpy.typing import NDArray

from evo_bench.config import ALGORITHM_NAMES


class RowEntry(NamedTuple):
    """Average best cost of one algorithm on one problem, and its rank among the algorithms of the row."""

    average_cost: float
    rank: float


def _total_order_key(value: float) -> tuple[int, int]:
    """
    Sort key following the IEEE 754 total order, except that every NaN compares equal and after ``inf``.

    ``-0.0`` sorts before ``0.0`` and the two are not equal.
    """
    if math.isnan(value):
        return (1, 0)
    bits = int(np.float64(value).view(np.int64))
    return (0, bits ^ 0x7FFF_FFFF_FFFF_FFFF if bits < 0 else bits)


def rank_row(values: Sequence[float]) -> tuple[float, ...]:
    """
    Competition ranks of *values*, lowest value first.

    The smallest value gets rank 1, the next rank 2 and so on. Equal values share the mean of the positions they
    occupy, e.g. ``(5.0, 5.0, 1.0)`` is ranked ``(2.5, 2.5, 1.0)`` and three equal values are all ranked 2.
    NaN is ranked after every number.

    Returns:
        ranks in the order of *values*

    """
    keys = [_total_order_key(float(v)) for v in values]
    order = sorted(range(len(keys)), key=keys.__getitem__)
    ranks = [0.0] * len(keys)
    start = 0
    while start < len(order):
        end = start
        while end + 1 < len(order) and keys[order[end + 1]] == keys[order[start]]:
            end += 1
        tied_rank = (start + end) / 2 + 1
        for idx in order[start : end + 1]:
            ranks[idx] = tied_rank
        start = end + 1
    return tuple(ranks)


def rank_entries(averages: Sequence[float]) -> tuple[RowEntry, ...]:
    """Pair each of *averages* with its rank from :func:`rank_row`."""
    return tuple(RowEntry(float(avg), rank) for avg, rank in zip(averages, rank_row(averages), strict=True))


@dataclass(frozen=True)
class RankMatrix:
    """
    Ranked results of a benchmark run, one row per problem and one column per algorithm.

    Args:
        problems: names of the problems, in row order
        rows: entries of each problem, in the column order of *algorithms*
        algorithms: names of the algorithms, in column order

    Raises:
        ValueError: if the number of problems and rows differ, a row does not have one entry per algorithm, or the
            ranks of a row are not the ranks :func:`rank_row` gives its average costs

    """

    problems: tuple[str, ...]
    rows: tuple[tuple[RowEntry, ...], ...]
    algorithms: tuple[str, ...] = ALGORITHM_NAMES

    def __post_init__(self) -> None:  # noqa: D105
        if len(self.problems) != len(self.rows):
            raise ValueError(f"Got {len(self.problems)} problems but {len(self.rows)} rows")
        k = len(self.algorithms)
        for problem, row in zip(self.problems, self.rows, strict=True):
            if len(row) != k:
                raise ValueError(f"Row of {problem} has {len(row)} entries, expected {k}")
            ranks = tuple(entry.rank for entry in row)
            expected = rank_row([entry.average_cost for entry in row])
            if ranks != expected:
                raise ValueError(f"Ranks of {problem} are {ranks}, expected {expected} for its average costs")

    @property
    def n_problems(self) -> int:
        """Number of rows."""
        return len(self.rows)

    @property
    def n_algorithms(self) -> int:
        """Number of columns."""
        return len(self.algorithms)

    def ranks(self) -> NDArray[float64]:
        """Ranks as an array of shape (n_problems, n_algorithms)."""
        return np.array([[entry.rank for entry in row] for row in self.rows], dtype=float64).reshape(
            self.n_problems, self.n_algorithms
        )

    def costs(self) -> NDArray[float64]:
        """Average costs as an array of shape (n_problems, n_algorithms)."""
        return np.array([[entry.average_cost for entry in row] for row in self.rows], dtype=float64).reshape(
            self.n_problems, self.n_algorithms
        )
