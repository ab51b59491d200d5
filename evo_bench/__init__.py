from evo_bench import (
    benchmark,
    config,
    errors,
    optimizers,
    problems,
)

__all__ = [
    "benchmark",
    "config",
    "errors",
    "optimizers",
    "problems",
]
