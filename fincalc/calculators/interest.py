"""
calculators/interest.py -- Simple and compound interest.

calculate_simple_interest    SI = P * R * T / 100
calculate_compound_interest  A  = P * (1 + r/n)^(n*t), compared against SI

Both sit behind hard validation gates (utils/validator.py).
"""
from __future__ import annotations

import logging
from typing import Any

from fincalc.config import get_settings
from fincalc.errors import MSG_COMPOUNDING_TOO_LONG, safe_calculation
from fincalc.models import (
    CompoundInterestInputs,
    CompoundInterestResult,
    SimpleInterestInputs,
    SimpleInterestResult,
)
from fincalc.utils.finance import COMPOUNDING_PER_YEAR, future_value
from fincalc.utils.safe_math import (
    round_to_precision,
    safe_divide,
    safe_multiply,
    safe_power,
    safe_subtract,
)
from fincalc.utils.validator import validate_compound_interest, validate_simple_interest

logger = logging.getLogger(__name__)


def _simple_interest(principal: float, rate: float, time: float) -> float:
    return safe_multiply(safe_multiply(principal, rate), time) / 100


@safe_calculation(SimpleInterestResult)
def calculate_simple_interest(inputs: Any) -> SimpleInterestResult:
    data = SimpleInterestInputs.model_validate(inputs)
    message = validate_simple_interest(data)
    if message is not None:
        return SimpleInterestResult(error=message)

    interest = _simple_interest(data.principal, data.rate, data.time)
    return SimpleInterestResult(
        principal=round_to_precision(data.principal),
        simple_interest=round_to_precision(interest),
        total_amount=round_to_precision(data.principal + interest),
        effective_rate=round_to_precision(safe_divide(interest * 100, data.principal)),
        monthly_interest=round_to_precision(safe_divide(interest, data.time * 12)),
    )


@safe_calculation(CompoundInterestResult)
def calculate_compound_interest(inputs: Any) -> CompoundInterestResult:
    """
    Refuses more than max_compounding_periods periods in total
    (n * t; e.g. daily compounding for three years already exceeds it).
    """
    data = CompoundInterestInputs.model_validate(inputs)
    message = validate_compound_interest(data)
    if message is not None:
        return CompoundInterestResult(error=message)

    per_year = COMPOUNDING_PER_YEAR[data.compounding_frequency]
    periods = per_year * data.time
    if periods > get_settings().max_compounding_periods:
        logger.warning("compound_interest: %.0f periods exceeds cap", periods)
        return CompoundInterestResult(error=MSG_COMPOUNDING_TOO_LONG)

    total = future_value(data.principal, data.rate / 100 / per_year, periods)
    compound = safe_subtract(total, data.principal)
    simple = _simple_interest(data.principal, data.rate, data.time)
    growth = safe_divide(total, data.principal)
    effective = (safe_power(growth, 1.0 / data.time) - 1.0) * 100

    return CompoundInterestResult(
        principal=round_to_precision(data.principal),
        total_amount=round_to_precision(total),
        compound_interest=round_to_precision(compound),
        simple_interest=round_to_precision(simple),
        additional_earnings=round_to_precision(compound - simple),
        effective_annual_rate=round_to_precision(effective),
        compounding_periods_per_year=per_year,
    )
