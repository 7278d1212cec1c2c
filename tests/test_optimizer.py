from __future__ import annotations

import math
import threading
from collections import Counter
from decimal import Decimal
from fractions import Fraction
from itertools import combinations
from typing import Any

import pytest
import sympy as sp

import subset_optimizer.optimizer as optimizer
from subset_optimizer import (
    InvalidInput,
    InvariantViolation,
    Row,
    certify,
    is_valid_row,
    optimize_batch,
    optimize_row,
)


def _assert_sub_multiset(selected: tuple[Any, ...], candidates: tuple[Any, ...]) -> None:
    available = Counter(candidates)
    for value, count in Counter(selected).items():
        assert available[value] >= count


def test_simple_case_reaches_target() -> None:
    row = Row(target=10, candidates=(1, 2, 3, 4, 5, 6))
    res = optimize_row(row)
    assert res.achieved_sum == 10
    assert sum(res.selected) == 10
    assert list(res.selected) == sorted(res.selected)
    _assert_sub_multiset(res.selected, row.candidates)


def test_nothing_fits() -> None:
    res = optimize_row(Row(target=5, candidates=(10, 15, 20)))
    assert res.achieved_sum == 0
    assert res.selected == ()


def test_exact_match() -> None:
    row = Row(target=15, candidates=(5, 10, 3, 7))
    res = optimize_row(row)
    assert res.achieved_sum == 15
    assert sum(res.selected) == 15
    _assert_sub_multiset(res.selected, row.candidates)


def test_duplicates_are_usable_independently() -> None:
    row = Row(target=10, candidates=(3, 3, 4, 4, 5))
    res = optimize_row(row)
    assert res.achieved_sum == 10
    assert res.selected == (3, 3, 4)
    _assert_sub_multiset(res.selected, row.candidates)


def test_empty_candidates() -> None:
    res = optimize_row(Row(target=10, candidates=()))
    assert res.achieved_sum == 0
    assert res.selected == ()


@pytest.mark.parametrize(
    "target, expected_sum, expected_selected",
    [(10, 7, (7,)), (7, 7, (7,)), (5, 0, ())],
)
def test_single_candidate(target: int, expected_sum: int, expected_selected: tuple[int, ...]) -> None:
    res = optimize_row(Row(target=target, candidates=(7,)))
    assert res.achieved_sum == expected_sum
    assert res.selected == expected_selected


def test_twelve_candidates_with_large_target() -> None:
    candidates = tuple(10**9 + i for i in range(12))
    target = 3 * 10**9 + 100
    res = optimize_row(Row(target=target, candidates=candidates))
    # Any three candidates fit; the three largest sum to 3e9 + 30.
    assert res.achieved_sum == 3 * 10**9 + 30
    assert res.selected == (10**9 + 9, 10**9 + 10, 10**9 + 11)


def test_all_candidates_fit() -> None:
    res = optimize_row(Row(target=100, candidates=(1, 2, 3, 4)))
    assert res.selected == (1, 2, 3, 4)
    assert res.achieved_sum == 10
    assert res.shortfall == 90


def test_result_keeps_original_row() -> None:
    row = Row(target=9, candidates=[2, 4, 8])
    res = optimize_row(row)
    assert res.original_row is row
    assert row.candidates == (2, 4, 8)


def test_tie_break_is_first_optimal_in_left_mask_order() -> None:
    # [1,3,6], [4,6] and [1,2,3,4] all reach 10; the empty left selection
    # is tried first and pairs with right's 4 + 6.
    res = optimize_row(Row(target=10, candidates=(1, 2, 3, 4, 5, 6)))
    assert res.selected == (4, 6)


def test_repeated_calls_are_identical() -> None:
    row = Row(target=23, candidates=(7, 3, 9, 3, 11, 5, 2, 8))
    assert optimize_row(row) == optimize_row(row)


def test_float_inputs_never_exceed_target() -> None:
    res = optimize_row(Row(target=0.3, candidates=(0.1, 0.2)))
    assert res.achieved_sum <= 0.3
    assert res.achieved_sum == pytest.approx(0.2)


def _exact_best(row: Row) -> Fraction:
    best = Fraction(0)
    for r in range(1, len(row.candidates) + 1):
        for combo in combinations(row.candidates, r):
            total = sum((Fraction(v) for v in combo), Fraction(0))
            if best < total <= Fraction(row.target):
                best = total
    return best


@pytest.mark.parametrize(
    "row",
    [
        Row(target=1.71, candidates=(0.6, 0.33, 0.78)),
        Row(target=2.151, candidates=(0.64, 0.43, 0.2, 0.881)),
        Row(target=1.89, candidates=(0.71, 0.63, 0.194, 0.451, 0.55, 0.65)),
    ],
)
def test_float_rows_are_searched_exactly(row: Row) -> None:
    res = optimize_row(row)
    exact_selected = sum((Fraction(v) for v in res.selected), Fraction(0))
    assert res.achieved_sum <= row.target
    assert exact_selected <= Fraction(row.target)
    assert exact_selected == _exact_best(row)
    assert res.achieved_sum == math.fsum(res.selected)
    assert certify(res).verified


def test_exact_rationals_avoid_rounding_loss() -> None:
    row = Row(
        target=sp.Rational("0.3"),
        candidates=(sp.Rational("0.1"), sp.Rational("0.2")),
    )
    res = optimize_row(row)
    assert res.achieved_sum == sp.Rational(3, 10)
    assert res.selected == (sp.Rational(1, 10), sp.Rational(1, 5))


def test_too_many_candidates_raises_invariant_violation() -> None:
    row = Row(target=10, candidates=tuple(range(1, 14)))
    with pytest.raises(InvariantViolation):
        optimize_row(row)


@pytest.mark.parametrize(
    "row",
    [
        Row(target=-5, candidates=(1, 2, 3)),
        Row(target=0, candidates=(1,)),
        Row(target=10, candidates=(1, -2, 3)),
        Row(target=10, candidates=(1, 0)),
        Row(target=10, candidates=(1, float("nan"))),
        Row(target="10", candidates=(1, 2)),
        Row(target=float("inf"), candidates=(1, 2)),
        Row(target=10, candidates=(1, float("inf"))),
        Row(target=Decimal("Infinity"), candidates=(Decimal(1),)),
        Row(target=Decimal("NaN"), candidates=(Decimal(1),)),
        Row(target=sp.oo, candidates=(1, 2)),
    ],
)
def test_non_positive_values_raise_invalid_input(row: Row) -> None:
    with pytest.raises(InvalidInput):
        optimize_row(row)


def test_is_valid_row() -> None:
    assert is_valid_row(Row(target=10, candidates=(1, 2, 3)))
    assert not is_valid_row(Row(target=-5, candidates=(1, 2, 3)))
    assert not is_valid_row(Row(target=10, candidates=tuple(range(1, 14))))
    assert not is_valid_row(Row(target=10, candidates=(1, -2, 3)))
    assert is_valid_row({"bigNumber": 10, "smallNumbers": [1, 2, 3]})
    assert not is_valid_row({"target": 10})
    assert not is_valid_row({"target": 10, "candidates": "1,2"})


def test_is_valid_row_rejects_non_finite_values() -> None:
    assert not is_valid_row(Row(Decimal("NaN"), (Decimal(1),)))
    assert not is_valid_row(Row(Decimal(10), (Decimal("sNaN"),)))
    assert not is_valid_row(Row(float("inf"), (1, 2)))
    assert not is_valid_row({"target": 10, "candidates": [1, float("-inf")]})
    assert is_valid_row(Row(Decimal("1E+400"), (Decimal(1),)))


def test_is_valid_row_does_not_mutate() -> None:
    row = Row(target=10, candidates=[1, 2, 3])
    before = (row.target, row.candidates)
    is_valid_row(row)
    assert (row.target, row.candidates) == before


def test_batch_preserves_order_and_rows() -> None:
    rows = [
        Row(target=10, candidates=(1, 2, 3, 4, 5)),
        Row(target=20, candidates=(5, 10, 15, 8, 12)),
    ]
    results = optimize_batch(rows)
    assert len(results) == 2
    assert results[0].achieved_sum == 10
    assert results[1].achieved_sum == 20
    assert [r.original_row for r in results] == rows
    assert all(r.original_row is row for r, row in zip(results, rows))


def test_batch_empty() -> None:
    assert optimize_batch([]) == []


def test_batch_with_threads_matches_sequential(monkeypatch: pytest.MonkeyPatch) -> None:
    rows = [Row(target=t, candidates=(3, 5, 7, 11, 13, 17)) for t in range(1, 40)]
    seen: set[int] = set()
    original = optimizer.optimize_row

    def tracking(row: Row) -> Any:
        seen.add(threading.get_ident())
        return original(row)

    monkeypatch.setattr(optimizer, "optimize_row", tracking)
    threaded = optimize_batch(rows, max_workers=4)
    monkeypatch.undo()

    sequential = optimize_batch(rows)
    assert threaded == sequential
    assert [r.original_row for r in threaded] == rows
    assert seen - {threading.get_ident()}, "rows were not handed to worker threads"


def test_batch_propagates_row_errors() -> None:
    rows = [Row(target=10, candidates=(1, 2)), Row(target=-1, candidates=(1,))]
    with pytest.raises(InvalidInput):
        optimize_batch(rows)
    with pytest.raises(InvalidInput):
        optimize_batch(rows, max_workers=2)


def test_batch_rejects_zero_workers() -> None:
    with pytest.raises(ValueError):
        optimize_batch([Row(target=1, candidates=(1,))], max_workers=0)
