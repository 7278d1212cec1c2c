"""Row ingestion from header-less CSV and JSON payloads, plus batch validation."""
from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, TextIO

from .constants import MAX_CANDIDATES
from .errors import InvalidInput, InvariantViolation, OptimizerError
from .models import Row
from .numbers import is_positive, parse_number

__all__ = [
    "RowIssue",
    "ValidationReport",
    "parse_row",
    "read_csv_rows",
    "rows_from_json",
    "validate_rows",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowIssue:
    """A record that was skipped while reading, with its 1-based line number."""

    line: int
    message: str


@dataclass
class ValidationReport:
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)


def parse_row(cells: Iterable[Any], *, exact: bool = False) -> Row | None:
    """Turn one record into a :class:`Row`.

    Blank cells are ignored; the first number is the target and the rest are
    candidates.  Returns ``None`` for a record with no numbers at all.
    """
    numbers = [parse_number(c, exact=exact) for c in cells if str(c).strip()]
    if not numbers:
        return None
    target, *candidates = numbers
    if len(candidates) > MAX_CANDIDATES:
        raise InvariantViolation(
            f"Too many candidates: {len(candidates)} (max: {MAX_CANDIDATES})"
        )
    return Row(target=target, candidates=tuple(candidates))


def read_csv_rows(stream: TextIO, *, exact: bool = False) -> tuple[list[Row], list[RowIssue]]:
    """Read every record of *stream*, skipping (and logging) invalid ones.

    A stream that cannot be decoded or tokenised at all raises
    :class:`InvalidInput`; unlike a bad record it is not skipped.
    """
    rows: list[Row] = []
    skipped: list[RowIssue] = []
    reader = csv.reader(stream)
    try:
        for record in reader:
            try:
                row = parse_row(record, exact=exact)
            except OptimizerError as exc:
                logger.warning("Skipping invalid row %d: %s", reader.line_num, exc)
                skipped.append(RowIssue(line=reader.line_num, message=str(exc)))
                continue
            if row is not None:
                rows.append(row)
    except (csv.Error, UnicodeDecodeError) as exc:
        raise InvalidInput(f"Unreadable CSV input: {exc}") from exc
    logger.info("read %d rows (%d skipped)", len(rows), len(skipped))
    return rows, skipped


def _coerce(value: Any, exact: bool) -> Any:  # noqa: ANN401
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidInput(f"Invalid number: {value}")
    if exact or isinstance(value, str):
        return parse_number(value, exact=exact)
    return value


def rows_from_json(payload: Any, *, exact: bool = False) -> list[Row]:  # noqa: ANN401
    """Build rows from ``[{...}, ...]`` or ``{"rows": [{...}, ...]}``.

    Values may be JSON numbers or numeric strings; with ``exact=True`` they are
    converted to SymPy rationals the same way CSV cells are.
    """
    if isinstance(payload, dict):
        payload = payload.get("rows")
    if not isinstance(payload, list):
        raise InvalidInput("Invalid input: rows must be an array")

    rows: list[Row] = []
    for idx, obj in enumerate(payload, start=1):
        try:
            row = Row.from_mapping(obj)
            row = Row(
                target=_coerce(row.target, exact),
                candidates=tuple(_coerce(c, exact) for c in row.candidates),
            )
        except OptimizerError as exc:
            raise InvalidInput(f"Invalid row {idx}: {exc}") from exc
        rows.append(row)
    return rows


def validate_rows(rows: list[Row]) -> ValidationReport:
    """Collect every contract problem in *rows* without raising."""
    errors: list[str] = []
    if not rows:
        errors.append("No rows to optimize")
    for idx, row in enumerate(rows, start=1):
        if not is_positive(row.target):
            errors.append(f"Row {idx}: target must be positive")
        if not all(is_positive(c) for c in row.candidates):
            errors.append(f"Row {idx}: all candidates must be positive")
        if len(row.candidates) > MAX_CANDIDATES:
            errors.append(f"Row {idx}: too many candidates (max: {MAX_CANDIDATES})")
    return ValidationReport(is_valid=not errors, errors=errors)
