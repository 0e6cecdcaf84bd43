# backend/backoffice/core/numbers.py
"""
Numeric coercion for loosely typed money fields.

Amounts arrive as Decimal (Numeric columns), str (forms, CSV rows, JSON),
int/float, or None. Lenient mode turns anything unparseable into 0.0;
strict mode raises ValidationError instead.
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from .errors import ValidationError

CENT = Decimal("0.01")


def parse_number(value: Any) -> Optional[float]:
    """Return a finite float for value, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        out = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
    else:
        return None
    return out if math.isfinite(out) else None


def to_float(value: Any, *, strict: bool = False, field: str = "amount") -> float:
    out = parse_number(value)
    if out is None:
        if strict:
            raise ValidationError(f"{field} is not numeric: {value!r}")
        return 0.0
    return out


def to_decimal(value: Any, *, strict: bool = False, field: str = "amount") -> Decimal:
    if isinstance(value, Decimal) and value.is_finite():
        return value
    out = parse_number(value)
    if out is None:
        if strict:
            raise ValidationError(f"{field} is not numeric: {value!r}")
        return Decimal("0")
    try:
        return Decimal(str(value).strip()) if isinstance(value, str) else Decimal(str(out))
    except InvalidOperation:
        return Decimal(str(out))


def to_int(value: Any) -> Optional[int]:
    """Coerce '2024' / 2024 / 2024.0 to 2024; None when not integral."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    out = parse_number(value)
    if out is None or not out.is_integer():
        return None
    return int(out)


def round2(value: float) -> float:
    """Two-decimal rounding through string formatting, as the UI expects."""
    return float(f"{value:.2f}")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Any) -> str:
    return f"{quantize_money(to_decimal(value)):.2f}"


def format_percent(value: Any) -> str:
    """Decimal('10.00') -> '10', Decimal('12.50') -> '12.5'."""
    d = to_decimal(value)
    if d == d.to_integral_value():
        return str(int(d))
    return format(d.normalize(), "f")
