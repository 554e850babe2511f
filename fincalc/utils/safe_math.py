"""
utils/safe_math.py -- Arithmetic that never yields NaN, Infinity or an exception.

safe_add(*values)              -> running sum, clamped to +-MAX_SAFE_VALUE
safe_subtract(a, b)            -> a - b, clamped
safe_multiply(a, b)            -> a * b, clamped
safe_divide(a, b, fallback=0)  -> a / b, fallback when b is effectively zero
safe_power(base, exponent)     -> base ** exponent, clamped; 0 ** negative -> 0
round_to_precision(value, 2)   -> half away from zero, idempotent

Every argument goes through parse_robust_number first, so currency strings
and None are accepted anywhere a number is.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

from fincalc.config import get_settings
from fincalc.utils.parser import EPSILON, parse_robust_number


# Wide enough for any float quantized to a few decimal places
_ROUNDING_CONTEXT = Context(prec=400)


def _bound() -> float:
    return get_settings().max_safe_value


def _clamp_result(result: float) -> float:
    bound = _bound()
    if math.isnan(result):
        return 0.0
    if result > bound:
        return bound
    if result < -bound:
        return -bound
    return result


def is_effectively_zero(value: Any, tolerance: float = EPSILON) -> bool:
    return abs(parse_robust_number(value)) < tolerance


def clamp(value: Any, lower: float, upper: float) -> float:
    return min(max(parse_robust_number(value), lower), upper)


def percent_to_decimal(percent: Any) -> float:
    return parse_robust_number(percent) / 100.0


def safe_add(*values: Any) -> float:
    """Sum values left to right, clamping as soon as the bound is crossed."""
    bound = _bound()
    total = 0.0
    for value in values:
        total += parse_robust_number(value)
        if total > bound:
            return bound
        if total < -bound:
            return -bound
    return total


def safe_subtract(a: Any, b: Any) -> float:
    return _clamp_result(parse_robust_number(a) - parse_robust_number(b))


def safe_multiply(a: Any, b: Any) -> float:
    return _clamp_result(parse_robust_number(a) * parse_robust_number(b))


def safe_divide(numerator: Any, denominator: Any, fallback: float = 0.0) -> float:
    den = parse_robust_number(denominator)
    if abs(den) < EPSILON:
        return fallback
    result = parse_robust_number(numerator) / den
    if math.isnan(result):
        return fallback
    return _clamp_result(result)


def safe_power(base: Any, exponent: Any) -> float:
    """
    base ** exponent without overflow, complex results or ZeroDivisionError.

      0 ** positive -> 0
      0 ** negative -> 0   (would be Infinity)
      x ** 0        -> 1
      negative ** fractional -> 0 (complex in real arithmetic)
    """
    b = parse_robust_number(base)
    e = parse_robust_number(exponent)

    if abs(e) < EPSILON:
        return 1.0
    if abs(b) < EPSILON:
        return 0.0
    if b < 0 and not float(e).is_integer():
        return 0.0

    try:
        result = math.pow(b, e)
    except OverflowError:
        # Only the sign of an overflowing power is still meaningful
        result = -math.inf if b < 0 and int(e) % 2 else math.inf
    return _clamp_result(result)


def round_to_precision(value: Any, digits: int = 2) -> float:
    """
    Round half away from zero to `digits` decimal places.

    Works on the shortest decimal repr of the float, so 1.005 rounds to
    1.01 rather than to the binary neighbour 1.00.
    """
    number = parse_robust_number(value)
    quantum = Decimal(1).scaleb(-digits)
    rounded = float(
        Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT)
    )
    return rounded + 0.0  # normalizes -0.0
