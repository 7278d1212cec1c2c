from __future__ import annotations

"""Typed containers for rows, partial subset sums and optimization results.

All three are frozen dataclasses: a :class:`Row` is handed to the optimizer
and never mutated, a :class:`SubsetSum` lives only while one row is being
searched, and an :class:`OptimizationResult` is produced once per row.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .errors import InvalidInput
from .numbers import to_plain_number

__all__ = ["Row", "SubsetSum", "OptimizationResult"]


@dataclass(frozen=True)
class Row:
    """One target value and the ordered candidates that may be combined."""

    target: Any
    candidates: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the row stays immutable.
        if not isinstance(self.candidates, tuple):
            if isinstance(self.candidates, (str, bytes)) or not isinstance(
                self.candidates, Sequence
            ):
                raise InvalidInput(
                    f"candidates must be a sequence of numbers, got {self.candidates!r}"
                )
            object.__setattr__(self, "candidates", tuple(self.candidates))

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any]) -> "Row":
        """Build a row from ``{"target", "candidates"}``.

        The upstream field names ``bigNumber``/``smallNumbers`` are accepted
        as aliases.
        """
        if not isinstance(obj, Mapping):
            raise InvalidInput(f"row must be an object, got {type(obj).__name__}")
        target = obj.get("target", obj.get("bigNumber"))
        candidates = obj.get("candidates", obj.get("smallNumbers"))
        if target is None or candidates is None:
            raise InvalidInput("row must have a target and a candidates array")
        if not isinstance(candidates, (list, tuple)):
            raise InvalidInput("candidates must be an array")
        return cls(target=target, candidates=tuple(candidates))

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": to_plain_number(self.target),
            "candidates": [to_plain_number(c) for c in self.candidates],
        }


@dataclass(frozen=True)
class SubsetSum:
    """Total of one selection from a half, keyed by positional indices."""

    total: Any = 0
    members: tuple[int, ...] = ()


@dataclass(frozen=True)
class OptimizationResult:
    """Best selection found for :attr:`original_row`."""

    selected: tuple[Any, ...]
    achieved_sum: Any
    original_row: Row

    @property
    def shortfall(self) -> Any:  # noqa: ANN401
        """How far the achieved sum falls short of the target."""
        return self.original_row.target - self.achieved_sum

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": [to_plain_number(v) for v in self.selected],
            "achieved_sum": to_plain_number(self.achieved_sum),
            "shortfall": to_plain_number(self.shortfall),
            "original_row": self.original_row.to_dict(),
        }
