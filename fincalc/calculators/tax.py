"""
calculators/tax.py -- Tax and deduction calculators.

calculate_income_tax     slab tax under the new or old regime, plus cess
calculate_capital_gains  holding-period classification, asset-specific rates
calculate_gst            exclusive / inclusive, CGST + SGST split
calculate_hra            minimum-of-three exemption rule
calculate_salary         annual CTC breakdown with simplified slab tax

Income tax is behind a hard validation gate (utils/validator.py); the rest
degrade safely.
"""
from __future__ import annotations

import logging
from typing import Any

from fincalc.config import get_settings
from fincalc.errors import safe_calculation
from fincalc.models import (
    CapitalGainsInputs,
    CapitalGainsResult,
    GSTInputs,
    GSTResult,
    HRAExemptionCalculations,
    HRAInputs,
    HRAResult,
    IncomeTaxInputs,
    IncomeTaxResult,
    SalaryInputs,
    SalaryResult,
)
from fincalc.utils.finance import NEW_REGIME_SLABS, calc_tax, old_regime_slabs, slab_tax
from fincalc.utils.periods import months_between
from fincalc.utils.safe_math import round_to_precision, safe_divide, safe_multiply
from fincalc.utils.validator import validate_income_tax

logger = logging.getLogger(__name__)

# Months of holding at which a gain turns long-term
LONG_TERM_MONTHS = {"equity": 12, "property": 24, "debt": 36, "gold": 36}

# (short-term %, long-term %)
CAPITAL_GAINS_RATES = {
    "equity": (15.0, 10.0),
    "property": (30.0, 20.0),
    "debt": (30.0, 20.0),
    "gold": (30.0, 20.0),
}

METRO_HRA_SHARE = 0.50
NON_METRO_HRA_SHARE = 0.40
RENT_BASIC_SHARE = 0.10


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------

@safe_calculation(IncomeTaxResult)
def calculate_income_tax(inputs: Any) -> IncomeTaxResult:
    """
    taxable  = max(0, income - deductions - standard deduction)
    tax      = sum over touched slabs, cess on top
    net      = income - total tax
    """
    data = IncomeTaxInputs.model_validate(inputs)
    message = validate_income_tax(data)
    if message is not None:
        return IncomeTaxResult(regime=data.regime, error=message)

    settings = get_settings()
    if data.regime == "old":
        standard_deduction = settings.old_regime_standard_deduction
        slabs = old_regime_slabs(data.age)
    else:
        standard_deduction = settings.new_regime_standard_deduction
        slabs = NEW_REGIME_SLABS

    income = data.annual_income
    taxable = max(0.0, income - data.deductions - standard_deduction)
    income_tax, brackets = slab_tax(taxable, slabs)
    cess = round_to_precision(income_tax * settings.cess_rate)
    total_tax = round_to_precision(income_tax + cess)

    logger.debug("income_tax: %s regime, taxable %.2f, tax %.2f", data.regime, taxable, total_tax)
    return IncomeTaxResult(
        regime=data.regime,
        gross_income=round_to_precision(income),
        standard_deduction=round_to_precision(standard_deduction),
        taxable_income=round_to_precision(taxable),
        income_tax=income_tax,
        cess=cess,
        total_tax=total_tax,
        net_income=round_to_precision(income - total_tax),
        effective_tax_rate=round_to_precision(safe_divide(total_tax, income) * 100),
        tax_brackets=brackets,
    )


# ---------------------------------------------------------------------------
# Capital gains
# ---------------------------------------------------------------------------

@safe_calculation(CapitalGainsResult)
def calculate_capital_gains(inputs: Any) -> CapitalGainsResult:
    """
    Holding period comes from purchase_date/sale_date when both parse,
    otherwise from holding_months. Losses pay no tax; equity LTCG is taxed
    only above the exemption.
    """
    data = CapitalGainsInputs.model_validate(inputs)
    if data.purchase_date is not None and data.sale_date is not None:
        holding = months_between(data.purchase_date, data.sale_date)
    else:
        holding = int(data.holding_months)

    long_term = holding >= LONG_TERM_MONTHS[data.asset_type]
    short_rate, long_rate = CAPITAL_GAINS_RATES[data.asset_type]
    rate = long_rate if long_term else short_rate

    gains = data.sale_price - data.purchase_price
    taxable = max(0.0, gains)
    if data.asset_type == "equity" and long_term:
        taxable = max(0.0, gains - get_settings().equity_ltcg_exemption)
    tax = safe_multiply(taxable, rate / 100)

    return CapitalGainsResult(
        capital_gains=round_to_precision(gains),
        holding_period_months=holding,
        gain_type="long-term" if long_term else "short-term",
        tax_rate=rate,
        taxable_gains=round_to_precision(taxable),
        tax_amount=round_to_precision(tax),
        net_gains=round_to_precision(gains - tax),
    )


# ---------------------------------------------------------------------------
# GST
# ---------------------------------------------------------------------------

@safe_calculation(GSTResult)
def calculate_gst(inputs: Any) -> GSTResult:
    data = GSTInputs.model_validate(inputs)
    rate = data.gst_rate / 100
    if data.calculation_type == "inclusive":
        original = safe_divide(data.amount, 1 + rate)
        gst = data.amount - original
        total = data.amount
    else:
        original = data.amount
        gst = safe_multiply(data.amount, rate)
        total = original + gst

    return GSTResult(
        original_amount=round_to_precision(original),
        gst_amount=round_to_precision(gst),
        total_amount=round_to_precision(total),
        cgst=round_to_precision(gst / 2),
        sgst=round_to_precision(gst / 2),
        igst=round_to_precision(gst),
    )


# ---------------------------------------------------------------------------
# HRA
# ---------------------------------------------------------------------------

@safe_calculation(HRAResult)
def calculate_hra(inputs: Any) -> HRAResult:
    """
    exemption = min(hra received,
                    basic x 50% (metro) / 40% (non-metro),
                    max(0, rent - 10% of basic))
    """
    data = HRAInputs.model_validate(inputs)
    share = METRO_HRA_SHARE if data.city_type == "metro" else NON_METRO_HRA_SHARE
    by_rule = data.basic_salary * share
    rent_excess = max(0.0, data.rent_paid - data.basic_salary * RENT_BASIC_SHARE)
    exemption = min(data.hra_received, by_rule, rent_excess)

    return HRAResult(
        hra_received=round_to_precision(data.hra_received),
        hra_exemption=round_to_precision(exemption),
        taxable_hra=round_to_precision(data.hra_received - exemption),
        exemption_calculations=HRAExemptionCalculations(
            actual_hra=round_to_precision(data.hra_received),
            hra_percent=round_to_precision(by_rule),
            rent_minus_10_percent=round_to_precision(rent_excess),
        ),
    )


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------

@safe_calculation(SalaryResult)
def calculate_salary(inputs: Any) -> SalaryResult:
    """All inputs and outputs are annual except monthly_net_salary."""
    data = SalaryInputs.model_validate(inputs)
    basic = data.ctc * data.basic_percent / 100
    hra = basic * data.hra_percent / 100
    gross = basic + hra + data.other_allowances
    pf = basic * data.pf_contribution / 100

    taxable = max(0.0, gross - get_settings().salary_standard_deduction - pf)
    tax = calc_tax(taxable)
    deductions = pf + data.professional_tax + tax
    net = gross - deductions

    return SalaryResult(
        ctc=round_to_precision(data.ctc),
        basic_salary=round_to_precision(basic),
        hra=round_to_precision(hra),
        other_allowances=round_to_precision(data.other_allowances),
        gross_salary=round_to_precision(gross),
        pf_deduction=round_to_precision(pf),
        professional_tax=round_to_precision(data.professional_tax),
        taxable_income=round_to_precision(taxable),
        income_tax=round_to_precision(tax),
        total_deductions=round_to_precision(deductions),
        net_salary=round_to_precision(net),
        monthly_net_salary=round_to_precision(net / 12),
    )
