"""Exhaustive subset-sum enumeration over one half of a row."""
from __future__ import annotations

from typing import Any, Sequence

from .models import SubsetSum

__all__ = ["enumerate_subset_sums"]


def enumerate_subset_sums(values: Sequence[Any]) -> list[SubsetSum]:
    """Return the total of every one of the ``2**k`` selections of *values*.

    Selections are generated by inclusion bitmask in ascending mask order, so
    mask ``0`` (the empty selection, total ``0``) always comes first and bit
    ``i`` selects ``values[i]``.  Members are recorded as positional indices:
    equal values at different positions are independent items and are never
    merged.
    """
    k = len(values)
    out: list[SubsetSum] = []
    for mask in range(1 << k):
        members = tuple(i for i in range(k) if mask & (1 << i))
        total = sum((values[i] for i in members), 0)
        out.append(SubsetSum(total=total, members=members))
    return out
