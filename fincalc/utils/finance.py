"""
utils/finance.py -- Shared financial primitives for the calculators.

growth_path(principal, rate, years)       -> np.ndarray of year-end values
future_value(principal, rate, periods)    -> principal * (1 + rate)^periods
annuity_future_value(pmt, rate, periods)  -> FV of an ordinary annuity
annuity_payment(principal, rate, periods) -> level payment (EMI)
amortize(principal, rate, periods, payment, extra) -> schedule rows (dicts)
slab_tax(income, slabs)                   -> (tax, [TaxBracket])
calc_tax(income)                          -> simplified new-regime slab tax

Rates are per period and decimal (0.01 == 1%). Slab rates are percent.

Slab tables:
  NEW_REGIME_SLABS         0-3L 0%, 3-7L 5%, 7-10L 10%, 10-12L 15%,
                           12-15L 20%, 15L+ 30%
  old_regime_slabs(age)    basic exemption 2.5L / 3L (60+) / 5L (80+) at 0%,
                           then to 5L 5%, 5-10L 20%, 10L+ 30%
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from fincalc.config import get_settings
from fincalc.models import TaxBracket
from fincalc.utils.safe_math import (
    is_effectively_zero,
    round_to_precision,
    safe_divide,
    safe_multiply,
    safe_power,
)

# Below this a schedule balance counts as paid off (half a paisa)
_PAID_OFF = 0.005

# Compounding periods per year, keyed by normalized frequency name
COMPOUNDING_PER_YEAR = {
    "yearly": 1,
    "half-yearly": 2,
    "quarterly": 4,
    "monthly": 12,
    "daily": 365,
}


# ---------------------------------------------------------------------------
# Compounding
# ---------------------------------------------------------------------------

def growth_path(principal: float, rate: float, years: int) -> np.ndarray:
    """
    Year-end values of `principal` compounding at `rate` for years 1..years.

    The growth factor is floored at zero, so a depreciation beyond -100%
    wipes the value out rather than flipping its sign.
    """
    if years <= 0:
        return np.zeros(0, dtype=np.float64)
    bound = get_settings().max_safe_value
    factor = max(0.0, 1.0 + rate)
    with np.errstate(over="ignore", invalid="ignore"):
        path = principal * factor ** np.arange(1, years + 1, dtype=np.float64)
    path = np.nan_to_num(path, nan=0.0, posinf=bound, neginf=-bound)
    return np.clip(path, -bound, bound)


def future_value(principal: float, rate: float, periods: float) -> float:
    return safe_multiply(principal, safe_power(1.0 + rate, periods))


def annuity_future_value(payment: float, rate: float, periods: float) -> float:
    """Future value of `payment` made at the end of each of `periods` periods."""
    if is_effectively_zero(rate):
        return safe_multiply(payment, periods)
    growth = safe_power(1.0 + rate, periods) - 1.0
    return safe_multiply(payment, safe_divide(growth, rate))


def annuity_payment(principal: float, rate: float, periods: int) -> float:
    """
    Level payment amortizing `principal` over `periods`:

      P * r * (1 + r)^n / ((1 + r)^n - 1),   or P / n when r == 0
    """
    if periods <= 0:
        return 0.0
    if is_effectively_zero(rate):
        return safe_divide(principal, periods)
    factor = safe_power(1.0 + rate, periods)
    return safe_divide(safe_multiply(principal, rate * factor), factor - 1.0)


# ---------------------------------------------------------------------------
# Amortization
# ---------------------------------------------------------------------------

def amortize(
    principal: float,
    rate: float,
    periods: int,
    payment: float,
    extra: float = 0.0,
) -> List[Dict[str, Any]]:
    """
    Walk a loan forward one period at a time.

    Each period charges interest = balance * rate. In the last scheduled
    period, or whenever balance + interest <= payment + extra, the whole
    balance is settled in that period's payment (extra is then 0).
    Otherwise principal = payment - interest + extra. The walk ends as soon
    as the balance reaches zero, so len(rows) is the payoff time.

    Rows carry unrounded values; callers round for display.
    """
    rows: List[Dict[str, Any]] = []
    balance = principal
    cumulative_interest = 0.0

    for month in range(1, periods + 1):
        if balance <= _PAID_OFF:
            break
        interest = balance * rate
        cumulative_interest += interest

        if month == periods or balance + interest <= payment + extra:
            paid, applied_extra, principal_part = balance + interest, 0.0, balance
        else:
            paid, applied_extra = payment, extra
            principal_part = min(payment - interest + extra, balance)

        balance = max(0.0, balance - principal_part)
        rows.append(
            {
                "month": month,
                "payment": paid,
                "principal": principal_part,
                "interest": interest,
                "extra_payment": applied_extra,
                "balance": balance,
                "cumulative_interest": cumulative_interest,
            }
        )

    return rows


# ---------------------------------------------------------------------------
# Slab tax
# ---------------------------------------------------------------------------

# (lower, upper, rate %); upper None means unbounded
Slab = Tuple[float, Optional[float], float]

NEW_REGIME_SLABS: List[Slab] = [
    (0.0, 300_000.0, 0.0),
    (300_000.0, 700_000.0, 5.0),
    (700_000.0, 1_000_000.0, 10.0),
    (1_000_000.0, 1_200_000.0, 15.0),
    (1_200_000.0, 1_500_000.0, 20.0),
    (1_500_000.0, None, 30.0),
]


def old_regime_slabs(age: float) -> List[Slab]:
    if age >= 80:
        exemption = 500_000.0
    elif age >= 60:
        exemption = 300_000.0
    else:
        exemption = 250_000.0
    return [
        (0.0, exemption, 0.0),
        (exemption, 500_000.0, 5.0),
        (500_000.0, 1_000_000.0, 20.0),
        (1_000_000.0, None, 30.0),
    ]


def bracket_label(lower: float, upper: Optional[float]) -> str:
    if upper is None:
        return f"₹{lower:,.0f}+"
    return f"₹{lower:,.0f} - ₹{upper:,.0f}"


def slab_tax(income: float, slabs: List[Slab]) -> Tuple[float, List[TaxBracket]]:
    """
    Progressive tax on `income`.

    A bracket is recorded for every slab whose lower bound is below the
    income (0% slabs included); zero-width slabs are skipped. The returned
    tax is the sum of the rounded bracket taxes, so the two always agree.
    """
    brackets: List[TaxBracket] = []
    for lower, upper, rate in slabs:
        if income <= lower:
            break
        if upper is not None and upper <= lower:
            continue
        span = income - lower if upper is None else min(income, upper) - lower
        brackets.append(
            TaxBracket(
                range=bracket_label(lower, upper),
                rate=rate,
                taxable_amount=round_to_precision(span),
                tax=round_to_precision(span * rate / 100.0),
            )
        )
    tax = round_to_precision(sum(b.tax for b in brackets))
    return tax, brackets


def calc_tax(income: float) -> float:
    """
    Progressive slab tax under the simplified new regime (salary breakdown).

      <= 3,00,000  ->  0
      <= 7,00,000  ->  (income - 3,00,000) * 0.05
      <= 10,00,000 ->  20,000 + (income - 7,00,000) * 0.10
      <= 12,00,000 ->  50,000 + (income - 10,00,000) * 0.15
      <= 15,00,000 ->  80,000 + (income - 12,00,000) * 0.20
      > 15,00,000  ->  1,40,000 + (income - 15,00,000) * 0.30
    """
    if income <= 300_000:
        return 0.0
    elif income <= 700_000:
        return (income - 300_000) * 0.05
    elif income <= 1_000_000:
        return 20_000 + (income - 700_000) * 0.10
    elif income <= 1_200_000:
        return 50_000 + (income - 1_000_000) * 0.15
    elif income <= 1_500_000:
        return 80_000 + (income - 1_200_000) * 0.20
    else:
        return 140_000 + (income - 1_500_000) * 0.30
