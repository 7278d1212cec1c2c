"""Public package interface for the bounded subset-sum optimizer.

Each row carries a positive target and at most twelve positive candidates; the
optimizer returns the sub-multiset of candidates whose sum is the largest value
not exceeding the target, using a meet-in-the-middle search.

Typical usage
-------------
>>> from subset_optimizer import Row, optimize_row
>>> optimize_row(Row(target=10, candidates=(3, 3, 4, 4, 5))).achieved_sum
10
"""
from importlib.metadata import version as _version  # type: ignore

from .certificate import Certificate, certify
from .errors import InvalidInput, InvariantViolation, OptimizerError
from .models import OptimizationResult, Row, SubsetSum
from .optimizer import check_row, is_valid_row, optimize_batch, optimize_row

__all__ = [
    "Row",
    "SubsetSum",
    "OptimizationResult",
    "optimize_row",
    "optimize_batch",
    "is_valid_row",
    "check_row",
    "certify",
    "Certificate",
    "OptimizerError",
    "InvariantViolation",
    "InvalidInput",
    "__version__",
]

try:
    __version__ = _version("subset_optimizer")
except Exception:  # pragma: no cover – package not installed yet
    __version__ = "0.0.0"
