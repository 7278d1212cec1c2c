"""Cell parsing, exact arithmetic helpers and output coercion for row values."""
from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable

from .errors import InvalidInput

__all__ = ["parse_number", "is_positive", "exact_value", "total_of", "to_plain_number"]


def _is_finite(value: Any) -> bool:  # noqa: ANN401
    finite = getattr(value, "is_finite", None)
    if isinstance(finite, bool):  # SymPy numbers expose a property
        return finite
    if isinstance(value, (int, Fraction)):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    try:
        return math.isfinite(value)
    except (TypeError, ValueError, OverflowError):
        return False


def is_positive(value: Any) -> bool:  # noqa: ANN401 – any numeric type
    """Return ``True`` when *value* is a finite number strictly greater than zero.

    Works for ``int``/``float``/``Decimal``/``Fraction`` and SymPy numbers.
    Booleans, NaN, infinities and anything that cannot be compared with ``0``
    are rejected rather than raising.
    """
    if isinstance(value, bool) or value is None:
        return False
    try:
        if not value > 0:
            return False
    except (TypeError, ArithmeticError):
        # Decimal("NaN") raises InvalidOperation on comparison
        return False
    return _is_finite(value)


def exact_value(value: Any) -> Any:  # noqa: ANN401
    """Return *value* as an exact rational when it is a ``float`` or ``Decimal``.

    Every finite binary float is exactly some fraction, so comparisons and sums
    on the result carry no rounding.  Other numbers are already exact.
    """
    if isinstance(value, (float, Decimal)):
        return Fraction(value)
    return value


def total_of(values: Iterable[Any]) -> Any:  # noqa: ANN401
    """Sum *values*; float inputs are summed with :func:`math.fsum` (correctly rounded)."""
    values = list(values)
    if any(isinstance(v, float) for v in values):
        return math.fsum(values)
    return sum(values, 0)


def parse_number(text: Any, *, exact: bool = False) -> Any:  # noqa: ANN401
    """Parse one cell into a strictly positive number.

    * ``exact=False`` returns a finite ``float``
    * ``exact=True`` returns a ``sympy.Rational`` so decimal literals such as
      ``"0.1"`` are represented without binary rounding
    """
    raw = str(text).strip()
    if not raw:
        raise InvalidInput("empty value")

    value: Any
    if exact:
        import sympy as sp

        try:
            value = sp.Rational(raw)
        except (TypeError, ValueError, ZeroDivisionError) as exc:
            raise InvalidInput(f"Invalid number: {raw}") from exc
    else:
        try:
            value = float(raw)
        except ValueError as exc:
            raise InvalidInput(f"Invalid number: {raw}") from exc
        if not math.isfinite(value):
            raise InvalidInput(f"Invalid number: {raw}")

    if not is_positive(value):
        raise InvalidInput(f"Number must be positive: {raw}")
    return value


def to_plain_number(value: Any) -> int | float:  # noqa: ANN401
    """Coerce *value* to a JSON friendly ``int`` or ``float``.

    Integral values (``10.0``, ``Rational(20, 2)``) become ``int``.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"not a number: {value!r}")
    if isinstance(value, int):
        return value
    if getattr(value, "is_Rational", False) and value.is_integer:
        return int(value)
    try:
        f = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidInput(f"not a number: {value!r}") from exc
    if not math.isfinite(f):
        raise InvalidInput(f"not a finite number: {value!r}")
    if f.is_integer():
        return int(f)
    return f
