from ._display import display_matrix
from ._friedman import CRITICAL_VALUE, FriedmanResult, critical_value, friedman
from ._ranking import RankMatrix, RowEntry, rank_entries, rank_row
from ._row import build_row
from ._suite import run_suite
from ._trials import as_seed_sequence, process_pool, run_trials, running_average

__all__ = [  # noqa: RUF022
    "run_suite",
    "build_row",
    "run_trials",
    "process_pool",
    "running_average",
    "as_seed_sequence",
    "rank_row",
    "rank_entries",
    "friedman",
    "critical_value",
    "display_matrix",
    "CRITICAL_VALUE",
    "FriedmanResult",
    "RankMatrix",
    "RowEntry",
]
