"""
pipeline.py -- Name-based dispatch to the calculators.

process(name, inputs) -> result model
  Looks the calculator up in CALCULATORS and runs it on `inputs`
  (a mapping with snake_case or camelCase keys, or an input model).

Critical rules implemented here:
  - An unknown name raises KeyError: that is a caller bug, not bad input.
  - Everything else follows the calculator's own policy, so a result
    model is always returned and errors travel in its `error` field.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from pydantic import BaseModel

from fincalc.calculators.interest import calculate_compound_interest, calculate_simple_interest
from fincalc.calculators.loans import (
    calculate_advanced_emi,
    calculate_car_loan,
    calculate_home_loan,
    calculate_loan,
    calculate_mortgage,
    calculate_personal_loan,
)
from fincalc.calculators.planning import (
    calculate_break_even,
    calculate_mutual_fund,
    calculate_retirement,
)
from fincalc.calculators.savings import (
    calculate_dividend_yield,
    calculate_epf,
    calculate_fd,
    calculate_gold,
    calculate_investment,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_sip,
    calculate_swp,
)
from fincalc.calculators.tax import (
    calculate_capital_gains,
    calculate_gst,
    calculate_hra,
    calculate_income_tax,
    calculate_salary,
)

logger = logging.getLogger(__name__)

CALCULATORS: Dict[str, Callable[[Any], BaseModel]] = {
    "sip": calculate_sip,
    "lumpsum": calculate_lumpsum,
    "ppf": calculate_ppf,
    "fd": calculate_fd,
    "rd": calculate_rd,
    "epf": calculate_epf,
    "gold": calculate_gold,
    "swp": calculate_swp,
    "dividend-yield": calculate_dividend_yield,
    "investment": calculate_investment,
    "loan": calculate_loan,
    "car-loan": calculate_car_loan,
    "home-loan": calculate_home_loan,
    "personal-loan": calculate_personal_loan,
    "mortgage": calculate_mortgage,
    "advanced-emi": calculate_advanced_emi,
    "income-tax": calculate_income_tax,
    "capital-gains": calculate_capital_gains,
    "gst": calculate_gst,
    "hra": calculate_hra,
    "salary": calculate_salary,
    "retirement": calculate_retirement,
    "mutual-fund": calculate_mutual_fund,
    "break-even": calculate_break_even,
    "simple-interest": calculate_simple_interest,
    "compound-interest": calculate_compound_interest,
}


def process(name: str, inputs: Any) -> BaseModel:
    """
    Run the calculator registered under `name`.

    Names are kebab-case ("income-tax"); underscores and case are ignored.
    """
    calculator = CALCULATORS[name.strip().lower().replace("_", "-")]
    logger.debug("process: %s", name)
    return calculator(inputs)
