from __future__ import annotations

"""Brute-force certificates for optimization results.

A certificate re-derives the best achievable sum by enumerating every
selection of the whole row (at most ``2**12`` of them) and records whether the
result satisfies each output invariant.  It is an audit artefact for callers
who want evidence alongside the answer; the optimizer itself never needs it.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict

from .constants import MAX_CANDIDATES
from .enumeration import enumerate_subset_sums
from .errors import InvariantViolation
from .models import OptimizationResult
from .numbers import exact_value, to_plain_number, total_of

__all__ = ["Certificate", "best_possible_sum", "certify"]

logger = logging.getLogger(__name__)


@dataclass
class Certificate:
    """Outcome of checking one :class:`OptimizationResult`."""

    result: OptimizationResult
    best_possible: Any
    checks: Dict[str, bool] = field(default_factory=dict)
    verified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_possible": to_plain_number(self.best_possible),
            "checks": dict(self.checks),
            "verified": self.verified,
        }


def _exact_best(candidates: tuple[Any, ...], limit: Any) -> Any:  # noqa: ANN401
    values = [exact_value(c) for c in candidates]
    feasible = [s.total for s in enumerate_subset_sums(values) if s.total <= limit]
    return max(feasible, default=0)


def best_possible_sum(candidates: tuple[Any, ...], target: Any) -> Any:  # noqa: ANN401
    """Largest subset total of *candidates* not exceeding *target*, by exhaustion.

    Totals are compared exactly; the answer is a ``float`` when any input is one.
    """
    if len(candidates) > MAX_CANDIDATES:
        raise InvariantViolation(
            f"Too many candidates to certify: {len(candidates)} (max: {MAX_CANDIDATES})"
        )
    best = _exact_best(candidates, exact_value(target))
    if any(isinstance(v, float) for v in (target, *candidates)):
        return float(best)
    return best


def certify(result: OptimizationResult) -> Certificate:
    """Check ``result`` against every invariant and return a :class:`Certificate`."""
    row = result.original_row
    best = best_possible_sum(row.candidates, row.target)
    limit = exact_value(row.target)
    exact_selected = sum((exact_value(v) for v in result.selected), 0)

    selected_counts = Counter(result.selected)
    available = Counter(row.candidates)
    checks = {
        "within_target": result.achieved_sum <= row.target and exact_selected <= limit,
        "sum_matches": total_of(result.selected) == result.achieved_sum,
        "sub_multiset": all(available[v] >= c for v, c in selected_counts.items()),
        "optimal": not (exact_selected < _exact_best(row.candidates, limit)),
    }
    checks = {k: bool(v) for k, v in checks.items()}
    verified = all(checks.values())
    if not verified:
        failed = sorted(k for k, ok in checks.items() if not ok)
        logger.warning("certificate failed for target=%s: %s", row.target, ", ".join(failed))
    return Certificate(result=result, best_possible=best, checks=checks, verified=verified)
