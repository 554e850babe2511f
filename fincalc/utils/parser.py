"""
utils/parser.py -- Robust parsing of loosely-typed numeric inputs.

parse_robust_number(value, fallback=0.0) -> float, always finite
is_safe_number(value)                    -> True if value parses to a finite number

Accepted inputs:
  numbers    -> NaN / +-inf become fallback, |x| < 1e-10 becomes 0
  strings    -> currency symbols, separators, percent signs and unit words
                are stripped: "Rs 1,50,000", "12.5%", "30 years"
  bool       -> False = 0, True = 1
  None / ""  -> fallback
  list/tuple -> first element
  mapping    -> first of value/amount/number/val/price/cost/total/sum

Never raises. Parsing happens once, at the model boundary (see models.py).
"""
from __future__ import annotations

import math
import numbers
import re
from decimal import Decimal
from typing import Any, Mapping

EPSILON = 1e-10

# Words with an optional trailing dot ("Rs.", "INR", "years")
_WORDS = re.compile(r"[^\W\d_]+\.?")
_NON_NUMERIC = re.compile(r"[^\d.\-]")
# Leading numeric prefix, the same part a lenient float parser would keep
_NUMERIC_PREFIX = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")

_NULL_WORDS = frozenset({"nan", "null", "undefined", "none", "nil", "empty"})
_NUMERIC_KEYS = ("value", "amount", "number", "val", "price", "cost", "total", "sum")


def _from_float(number: float, fallback: float) -> float:
    if not math.isfinite(number):
        return fallback
    if abs(number) < EPSILON:
        return 0.0
    return number


def _from_string(text: str, fallback: float) -> float:
    trimmed = text.strip()
    if trimmed in ("", "-") or trimmed.lower() in _NULL_WORDS:
        return fallback

    # Currency symbols, separators, "%" and unit words all go in one pass
    cleaned = _NON_NUMERIC.sub("", _WORDS.sub("", trimmed))
    if cleaned in ("", "-", "."):
        return fallback

    # "1.234.5" -> "1.2345": keep the first decimal point only
    if cleaned.count(".") > 1:
        head, _, tail = cleaned.partition(".")
        cleaned = head + "." + tail.replace(".", "")

    match = _NUMERIC_PREFIX.match(cleaned)
    if match is None:
        return fallback
    try:
        return _from_float(float(match.group(0)), fallback)
    except ValueError:
        return fallback


def parse_robust_number(value: Any, fallback: float = 0.0) -> float:
    """
    Convert any input to a finite float.

    Returns `fallback` when nothing numeric can be recovered. Booleans map
    to 0/1 and tiny magnitudes (floating-point artifacts) collapse to 0.
    """
    if value is None:
        return fallback
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, numbers.Real):
        return _from_float(float(value), fallback)
    if isinstance(value, Decimal):
        return _from_float(float(value), fallback) if value.is_finite() else fallback
    if isinstance(value, (str, bytes)):
        text = value.decode("utf-8", "ignore") if isinstance(value, bytes) else value
        return _from_string(text, fallback)
    if isinstance(value, (list, tuple)):
        return parse_robust_number(value[0], fallback) if value else fallback
    if isinstance(value, Mapping):
        for key in _NUMERIC_KEYS:
            if value.get(key) is not None:
                return parse_robust_number(value[key], fallback)
        return fallback

    try:
        return _from_float(float(value), fallback)
    except (TypeError, ValueError, OverflowError):
        return fallback


def is_safe_number(value: Any) -> bool:
    """True iff `value` is, or parses to, a finite number."""
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return math.isfinite(value)
    return math.isfinite(parse_robust_number(value, fallback=math.nan))
