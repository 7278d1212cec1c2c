"""Binary search for the best partial sum under a ceiling."""
from __future__ import annotations

from bisect import bisect_right
from operator import attrgetter
from typing import Any, Sequence

from .models import SubsetSum

__all__ = ["EMPTY_SUBSET", "sort_by_total", "nearest_predecessor"]

# Selecting nothing from a half is always possible.
EMPTY_SUBSET = SubsetSum(total=0, members=())

_by_total = attrgetter("total")


def sort_by_total(sums: Sequence[SubsetSum]) -> list[SubsetSum]:
    """Return *sums* ordered ascending by total (stable for equal totals)."""
    return sorted(sums, key=_by_total)


def nearest_predecessor(sorted_sums: Sequence[SubsetSum], ceiling: Any) -> SubsetSum:  # noqa: ANN401
    """Return the entry with the largest total not exceeding *ceiling*.

    *sorted_sums* must already be ascending by ``total``.  When nothing
    qualifies (empty input, negative ceiling, or every total above the
    ceiling) :data:`EMPTY_SUBSET` is returned.  Runs in ``O(log m)``.
    """
    idx = bisect_right(sorted_sums, ceiling, key=_by_total)
    if idx == 0:
        return EMPTY_SUBSET
    return sorted_sums[idx - 1]
