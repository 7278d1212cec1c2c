"""Exception types raised when a row breaks the optimizer's input contract."""
from __future__ import annotations

__all__ = ["OptimizerError", "InvariantViolation", "InvalidInput"]


class OptimizerError(ValueError):
    """Base class for every contract violation surfaced by the optimizer."""


class InvariantViolation(OptimizerError):
    """A row exceeds the structural limits the search is built for."""


class InvalidInput(OptimizerError):
    """A target or candidate is missing, non-numeric or not strictly positive."""
