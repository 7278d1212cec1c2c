from __future__ import annotations

"""Meet-in-the-middle optimizer for bounded subset-sum rows.

For one :class:`~subset_optimizer.models.Row` the candidates are split into two
contiguous halves.  Every subset total of each half is enumerated, the right
half is sorted, and for every left total the best complementary right total is
found by binary search.  With at most twelve candidates this is at most
``64 + 64`` enumerated subsets and ``64`` searches per row, regardless of how
large the target is.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Iterator, Mapping, Sequence

from .constants import MAX_CANDIDATES
from .enumeration import enumerate_subset_sums
from .errors import InvalidInput, InvariantViolation, OptimizerError
from .models import OptimizationResult, Row, SubsetSum
from .numbers import exact_value, is_positive, total_of
from .search import EMPTY_SUBSET, nearest_predecessor, sort_by_total

__all__ = ["check_row", "is_valid_row", "optimize_row", "optimize_batch"]

logger = logging.getLogger(__name__)


def check_row(row: Row) -> Row:
    """Raise unless *row* satisfies the optimizer's input contract.

    * more than :data:`MAX_CANDIDATES` candidates → :class:`InvariantViolation`
    * a target or candidate that is not a positive number → :class:`InvalidInput`
    """
    if not isinstance(row, Row):
        raise InvalidInput(f"expected Row, got {type(row).__name__}")
    n = len(row.candidates)
    if n > MAX_CANDIDATES:
        raise InvariantViolation(
            f"Too many candidates: {n} (max: {MAX_CANDIDATES})"
        )
    if not is_positive(row.target):
        raise InvalidInput(f"Target must be positive, got {row.target!r}")
    for idx, value in enumerate(row.candidates):
        if not is_positive(value):
            raise InvalidInput(
                f"Candidate {idx} must be positive, got {value!r}"
            )
    return row


def is_valid_row(row: Row | Mapping[str, Any]) -> bool:
    """Side-effect free form of :func:`check_row` that never raises."""
    try:
        if isinstance(row, Mapping):
            row = Row.from_mapping(row)
        check_row(row)  # type: ignore[arg-type]
    except OptimizerError:
        return False
    return True


def _combinations(
    left_sums: Iterable[SubsetSum], right_sorted: Sequence[SubsetSum], target: Any
) -> Iterator[tuple[Any, SubsetSum, SubsetSum]]:
    """Yield ``(total, left, right)`` pairing each feasible left total with its best right total."""
    for left in left_sums:
        if left.total > target:
            continue
        right = nearest_predecessor(right_sorted, target - left.total)
        yield left.total + right.total, left, right


def _best_selection(candidates: Sequence[Any], target: Any) -> list[Any]:
    n = len(candidates)
    if n == 0:
        return []
    # Search on exact rationals; floats are mapped back by index at the end.
    values = [exact_value(c) for c in candidates]
    limit = exact_value(target)
    if n == 1:
        return list(candidates) if values[0] <= limit else []

    mid = n // 2
    left_sums = enumerate_subset_sums(values[:mid])
    right_sorted = sort_by_total(enumerate_subset_sums(values[mid:]))
    logger.debug(
        "split %d candidates into %d/%d (%d x %d subsets)",
        n, mid, n - mid, len(left_sums), len(right_sorted),
    )

    # Only a strictly better total replaces the incumbent, so the first
    # optimal combination in left-mask order is kept.
    best_total: Any = 0
    best_left, best_right = EMPTY_SUBSET, EMPTY_SUBSET
    for total, left, right in _combinations(left_sums, right_sorted, limit):
        if total <= limit and total > best_total:
            best_total, best_left, best_right = total, left, right
            if best_total == limit:
                break

    chosen = [candidates[i] for i in best_left.members]
    chosen.extend(candidates[mid + i] for i in best_right.members)
    return chosen


def optimize_row(row: Row) -> OptimizationResult:
    """Return the sub-multiset of ``row.candidates`` with the largest sum ≤ ``row.target``.

    Raises :class:`InvariantViolation` or :class:`InvalidInput` when the row
    breaks the input contract; never returns a partial answer.
    """
    check_row(row)
    selected = sorted(_best_selection(row.candidates, row.target))
    achieved = total_of(selected)
    logger.debug("target=%s achieved=%s selected=%s", row.target, achieved, selected)
    return OptimizationResult(
        selected=tuple(selected), achieved_sum=achieved, original_row=row
    )


def optimize_batch(
    rows: Iterable[Row], *, max_workers: int | None = None
) -> list[OptimizationResult]:
    """Optimize every row independently and return results in input order.

    ``max_workers > 1`` spreads rows over a thread pool; results are still
    collected in the order the rows were given.  The first failing row's
    exception propagates to the caller.
    """
    rows = list(rows)
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")
    if max_workers and max_workers > 1 and len(rows) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(optimize_row, rows))
    else:
        results = [optimize_row(row) for row in rows]
    logger.info("optimized %d rows", len(results))
    return results
