from typing import Literal

import tabulate as tb

from evo_bench.benchmark._friedman import FriedmanResult
from evo_bench.benchmark._ranking import RankMatrix
from evo_bench.utils.logger import LOGGER


def display_matrix(
    matrix: RankMatrix,
    result: FriedmanResult | None = None,
    table_fmt: Literal["grid", "latex"] = "grid",
) -> str:
    """
    Display the average costs and ranks of a benchmark run, one row per problem and one column per algorithm.

    The last row holds the rank sums of the algorithms.

    Args:
        matrix: ranked benchmark results
        result: Friedman test of *matrix*, logged below the table if provided
        table_fmt: table format, grid is suitable for the terminal while latex can be copy-pasted into a latex document

    Returns:
        the table

    """
    headers = ["Problem", *matrix.algorithms]
    rows: list[list[str]] = [
        [problem] + [f"{entry.average_cost:.4e} ({entry.rank:g})" for entry in row]
        for problem, row in zip(matrix.problems, matrix.rows, strict=True)
    ]
    rows.append(["Rank sum"] + [f"{rank_sum:g}" for rank_sum in matrix.ranks().sum(axis=0)])
    table: str = tb.tabulate(rows, headers, tablefmt=table_fmt)
    LOGGER.info("\n" + table)
    if result is not None:
        verdict = "significantly different" if result.significant else "not significantly different"
        LOGGER.info(f"Friedman chi-square {result.chi_square:.4f}: the algorithms are {verdict}")
    return table
