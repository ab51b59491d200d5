"""Exceptions raised by evo-bench."""


class ConfigurationError(ValueError):
    """Raised when a benchmark, problem or algorithm is configured with invalid parameters."""


class BuilderError(ConfigurationError):
    """Raised when a benchmark problem is constructed with missing or inconsistent fields."""


class NoDataError(RuntimeError):
    """Raised when an algorithm produced no best value in any of its trials on a problem."""
