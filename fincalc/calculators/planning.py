"""
calculators/planning.py -- Scenario calculators.

calculate_retirement   FV(current savings) + FV(monthly annuity)
calculate_mutual_fund  lumpsum or SIP units at purchase NAV, valued at current NAV
calculate_break_even   contribution-margin analysis

Dates:
  SIP months    = completed calendar months from start to end date
  duration      = elapsed days / 365.25
  missing end   = as_of, or today when as_of is missing too
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fincalc.config import get_settings
from fincalc.errors import MSG_NO_MARGIN, MSG_PERIOD_TOO_LONG, error_result, safe_calculation
from fincalc.models import (
    BreakEvenInputs,
    BreakEvenResult,
    MutualFundInputs,
    MutualFundResult,
    RetirementInputs,
    RetirementResult,
)
from fincalc.utils.finance import annuity_future_value, future_value
from fincalc.utils.periods import months_between, years_between
from fincalc.utils.safe_math import (
    percent_to_decimal,
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_power,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retirement
# ---------------------------------------------------------------------------

@safe_calculation(RetirementResult)
def calculate_retirement(inputs: Any) -> RetirementResult:
    """
    Current age is at least 1; retirement age is at least current age + 1.
    Contributions are monthly and compound at annual_return_rate / 12.
    """
    data = RetirementInputs.model_validate(inputs)
    current_age = max(1, data.current_age)
    retirement_age = max(data.retirement_age, current_age + 1)
    years = retirement_age - current_age
    months = years * 12
    if months > get_settings().max_months:
        logger.warning("retirement: %d months exceeds cap", months)
        return error_result(RetirementResult, MSG_PERIOD_TOO_LONG)

    rate = data.annual_return_rate / 1200.0
    fv_savings = future_value(data.current_savings, rate, months)
    fv_contributions = annuity_future_value(data.monthly_contribution, rate, months)
    projected = safe_add(fv_savings, fv_contributions)
    contributed = safe_add(data.current_savings, safe_multiply(data.monthly_contribution, months))

    goal = data.retirement_goal
    has_goal = goal > 0
    return RetirementResult(
        current_age=current_age,
        retirement_age=retirement_age,
        years_to_retirement=years,
        projected_savings=round_to_precision(projected),
        future_value_of_savings=round_to_precision(fv_savings),
        future_value_of_contributions=round_to_precision(fv_contributions),
        total_contributions=round_to_precision(contributed),
        total_growth=round_to_precision(projected - contributed),
        retirement_goal=round_to_precision(goal),
        shortfall=round_to_precision(max(0.0, goal - projected)) if has_goal else 0.0,
        goal_met=has_goal and projected >= goal,
    )


# ---------------------------------------------------------------------------
# Mutual fund
# ---------------------------------------------------------------------------

@safe_calculation(MutualFundResult)
def calculate_mutual_fund(inputs: Any) -> MutualFundResult:
    """
    Entry load trims each purchase; exit load trims the redemption value.
    Tax is charged on positive gains only.
    """
    data = MutualFundInputs.model_validate(inputs)
    end = data.end_date or data.as_of or date.today()
    start = data.start_date
    duration = years_between(start, end) if start is not None else 0.0
    entry_factor = 1.0 - percent_to_decimal(data.entry_load)
    exit_factor = 1.0 - percent_to_decimal(data.exit_load)

    months = 0
    if data.investment_type == "sip":
        months = months_between(start, end) if start is not None else 0
        if months > get_settings().max_months:
            logger.warning("mutual_fund: %d months exceeds cap", months)
            return error_result(MutualFundResult, MSG_PERIOD_TOO_LONG)
        invested = safe_multiply(data.monthly_investment, months)
    else:
        invested = data.initial_investment

    units = safe_divide(invested * entry_factor, data.purchase_nav)
    value = safe_multiply(units * data.current_nav, exit_factor)
    gains = value - invested

    absolute = cagr = 0.0
    if invested > 0:
        absolute = safe_divide(gains, invested) * 100
        if duration > 0:
            cagr = (safe_power(safe_divide(value, invested), 1.0 / duration) - 1.0) * 100

    tax = max(0.0, gains) * percent_to_decimal(data.tax_rate)
    return MutualFundResult(
        total_investment=round_to_precision(invested),
        units=round_to_precision(units, 4),
        current_value=round_to_precision(value),
        absolute_returns=round_to_precision(absolute),
        cagr=round_to_precision(cagr),
        gains=round_to_precision(gains),
        tax_amount=round_to_precision(tax),
        post_tax_value=round_to_precision(value - tax),
        duration_years=round_to_precision(duration),
        months_invested=months,
    )


# ---------------------------------------------------------------------------
# Break-even
# ---------------------------------------------------------------------------

@safe_calculation(BreakEvenResult)
def calculate_break_even(inputs: Any) -> BreakEvenResult:
    """
    margin             = price - variable cost
    break-even units   = fixed cost / margin
    target units       = (fixed cost + target profit) / margin
    safety margin      = (current sales - break-even units) / current sales, in %
    """
    data = BreakEvenInputs.model_validate(inputs)
    price = data.selling_price_per_unit
    margin = price - data.variable_cost_per_unit
    sales = data.current_sales
    revenue = safe_multiply(sales, price)
    cost = safe_add(data.fixed_cost, safe_multiply(sales, data.variable_cost_per_unit))

    current = dict(
        contribution_margin=round_to_precision(margin),
        current_revenue=round_to_precision(revenue),
        current_total_cost=round_to_precision(cost),
        current_profit=round_to_precision(revenue - cost),
    )
    if margin <= 0:
        logger.warning("break_even: non-positive contribution margin %.2f", margin)
        return BreakEvenResult(error=MSG_NO_MARGIN, **current)

    units = data.fixed_cost / margin
    target_units = (data.fixed_cost + data.target_profit) / margin
    safety = safe_divide(sales - units, sales) * 100 if sales > 0 else 0.0

    return BreakEvenResult(
        contribution_margin_ratio=round_to_precision(margin / price * 100),
        break_even_units=round_to_precision(units),
        break_even_revenue=round_to_precision(units * price),
        units_for_target_profit=round_to_precision(target_units),
        revenue_for_target_profit=round_to_precision(target_units * price),
        safety_margin=round_to_precision(safety),
        additional_units_needed=round_to_precision(max(0.0, units - sales)),
        additional_units_for_profit=round_to_precision(max(0.0, target_units - sales)),
        **current,
    )
