"""
calculators/loans.py -- Amortizing loan calculators.

calculate_loan           EMI + schedule, optional monthly extra payment
calculate_car_loan       finances vehicle_price - down_payment
calculate_home_loan      finances property_value - down_payment
calculate_personal_loan  adds minimum_monthly_income = 3 x EMI
calculate_mortgage       P&I plus monthly tax / insurance / PMI
calculate_advanced_emi   tenure in years or months, monthly / yearly prepayments

Rules:
  r   = rate / 1200,  n = floor(years * 12)
  EMI = annuity payment, rounded to 2 decimals (advanced EMI keeps it exact)
  total_interest   = total_payment - principal
  interest_saved   = interest without the extra payment - actual interest
  payoff_time_saved = n - payoff_time
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Type, TypeVar

from fincalc.config import get_settings
from fincalc.errors import MSG_TENURE_TOO_LONG, safe_calculation
from fincalc.models import (
    AdvancedEMIInputs,
    AdvancedEMIResult,
    CarLoanInputs,
    EMIScheduleEntry,
    HomeLoanInputs,
    LoanInputs,
    LoanResult,
    LoanScheduleEntry,
    MortgageInputs,
    MortgageResult,
    PersonalLoanResult,
    PurchaseLoanResult,
)
from fincalc.utils.finance import amortize, annuity_payment
from fincalc.utils.periods import period_count
from fincalc.utils.safe_math import (
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_subtract,
)
from fincalc.utils.validator import validate_advanced_emi

logger = logging.getLogger(__name__)

L = TypeVar("L", bound=LoanResult)

# Treated as paid off (half a paisa)
_PAID_OFF = 0.005


def _schedule(rows: List[Dict[str, Any]]) -> List[LoanScheduleEntry]:
    return [
        LoanScheduleEntry(
            month=row["month"],
            **{k: round_to_precision(v) for k, v in row.items() if k != "month"},
        )
        for row in rows
    ]


def _amortized_loan(
    result_cls: Type[L],
    principal: float,
    rate: float,
    years: float,
    extra: float,
    **fields: Any,
) -> L:
    """
    Shared body of the loan calculators.

    Non-positive principal, a negative rate or a term under one month give
    a neutral zero result; a term beyond max_months gives an error result.
    """
    months = period_count(years, 12)
    if months > get_settings().max_months:
        logger.warning("loan: %d months exceeds cap", months)
        return result_cls(error=MSG_TENURE_TOO_LONG, **fields)
    if principal <= 0 or rate < 0 or months == 0:
        return result_cls(principal=round_to_precision(max(principal, 0.0)), **fields)

    monthly_rate = rate / 1200.0
    emi = round_to_precision(annuity_payment(principal, monthly_rate, months))
    rows = amortize(principal, monthly_rate, months, emi, extra)
    baseline = amortize(principal, monthly_rate, months, emi) if extra > 0 else rows

    total_payment = safe_add(*(row["payment"] + row["extra_payment"] for row in rows))
    interest = sum(row["interest"] for row in rows)
    baseline_interest = sum(row["interest"] for row in baseline)

    logger.debug("loan: emi %.2f, paid off in %d of %d months", emi, len(rows), months)
    return result_cls(
        principal=round_to_precision(principal),
        monthly_payment=emi,
        total_payment=round_to_precision(total_payment),
        total_interest=round_to_precision(safe_subtract(total_payment, principal)),
        payoff_time=len(rows),
        payoff_time_saved=months - len(rows),
        interest_saved=round_to_precision(max(0.0, baseline_interest - interest)),
        payment_schedule=_schedule(rows),
        **fields,
    )


@safe_calculation(LoanResult)
def calculate_loan(inputs: Any) -> LoanResult:
    data = LoanInputs.model_validate(inputs)
    return _amortized_loan(LoanResult, data.principal, data.rate, data.years, data.extra_payment)


def _purchase_loan(price: float, down_payment: float, rate: float, years: float, extra: float) -> PurchaseLoanResult:
    down = min(down_payment, price)
    return _amortized_loan(
        PurchaseLoanResult,
        safe_subtract(price, down),
        rate,
        years,
        extra,
        purchase_price=round_to_precision(price),
        down_payment=round_to_precision(down),
        down_payment_percent=round_to_precision(safe_divide(down, price) * 100),
    )


@safe_calculation(PurchaseLoanResult)
def calculate_car_loan(inputs: Any) -> PurchaseLoanResult:
    data = CarLoanInputs.model_validate(inputs)
    return _purchase_loan(data.vehicle_price, data.down_payment, data.rate, data.years, data.extra_payment)


@safe_calculation(PurchaseLoanResult)
def calculate_home_loan(inputs: Any) -> PurchaseLoanResult:
    data = HomeLoanInputs.model_validate(inputs)
    return _purchase_loan(data.property_value, data.down_payment, data.rate, data.years, data.extra_payment)


@safe_calculation(PersonalLoanResult)
def calculate_personal_loan(inputs: Any) -> PersonalLoanResult:
    data = LoanInputs.model_validate(inputs)
    result = _amortized_loan(PersonalLoanResult, data.principal, data.rate, data.years, data.extra_payment)
    return result.model_copy(
        update={"minimum_monthly_income": round_to_precision(result.monthly_payment * 3)}
    )


# ---------------------------------------------------------------------------
# Mortgage
# ---------------------------------------------------------------------------

@safe_calculation(MortgageResult)
def calculate_mortgage(inputs: Any) -> MortgageResult:
    data = MortgageInputs.model_validate(inputs)
    value = data.property_value
    loan = max(0.0, safe_subtract(value, data.down_payment))
    monthly_tax = data.property_tax / 12
    monthly_insurance = data.insurance / 12
    monthly_pmi = data.pmi / 12
    pass_through = dict(
        loan_amount=round_to_precision(loan),
        monthly_property_tax=round_to_precision(monthly_tax),
        monthly_insurance=round_to_precision(monthly_insurance),
        monthly_pmi=round_to_precision(monthly_pmi),
        loan_to_value=round_to_precision(safe_divide(loan, value) * 100),
    )

    months = period_count(data.years, 12)
    if months > get_settings().max_months:
        logger.warning("mortgage: %d months exceeds cap", months)
        return MortgageResult(error=MSG_TENURE_TOO_LONG, **pass_through)
    if loan <= 0 or data.rate < 0 or months == 0:
        return MortgageResult(**pass_through)

    monthly_rate = data.rate / 1200.0
    principal_and_interest = round_to_precision(annuity_payment(loan, monthly_rate, months))
    rows = amortize(loan, monthly_rate, months, principal_and_interest)
    total_payment = safe_add(*(row["payment"] for row in rows))

    return MortgageResult(
        monthly_payment=round_to_precision(
            principal_and_interest + monthly_tax + monthly_insurance + monthly_pmi
        ),
        monthly_principal_and_interest=principal_and_interest,
        total_payment=round_to_precision(total_payment),
        total_interest=round_to_precision(safe_subtract(total_payment, loan)),
        payment_schedule=_schedule(rows),
        **pass_through,
    )


# ---------------------------------------------------------------------------
# Advanced EMI
# ---------------------------------------------------------------------------

def _prepayment_due(frequency: str, month: int) -> bool:
    if frequency == "monthly":
        return True
    return frequency == "yearly" and month % 12 == 0


@safe_calculation(AdvancedEMIResult)
def calculate_advanced_emi(inputs: Any) -> AdvancedEMIResult:
    """
    The EMI stays fixed; a due prepayment is added to that month's principal.
    The last payment is capped at the outstanding balance.
    """
    data = AdvancedEMIInputs.model_validate(inputs)
    message = validate_advanced_emi(data)
    if message is not None:
        return AdvancedEMIResult(error=message)

    per_year = 12 if data.tenure_type == "years" else 1
    months = max(1, period_count(data.loan_tenure, per_year))
    if months > get_settings().max_months:
        logger.warning("advanced_emi: %d months exceeds cap", months)
        return AdvancedEMIResult(error=MSG_TENURE_TOO_LONG)

    loan = data.loan_amount
    monthly_rate = data.interest_rate / 1200.0
    emi = annuity_payment(loan, monthly_rate, months)

    balance = loan
    total_interest = 0.0
    rows: List[EMIScheduleEntry] = []
    for month in range(1, months + 1):
        interest = safe_multiply(balance, monthly_rate)
        prepayment = data.prepayment_amount if _prepayment_due(data.prepayment_frequency, month) else 0.0
        principal = emi - interest + prepayment
        if principal >= balance or month == months:
            principal = balance
        balance = max(0.0, balance - principal)
        total_interest += interest
        rows.append(
            EMIScheduleEntry(
                month=month,
                emi=round_to_precision(principal + interest),
                principal=round_to_precision(principal),
                interest=round_to_precision(interest),
                balance=round_to_precision(balance),
            )
        )
        if balance <= _PAID_OFF:
            break

    return AdvancedEMIResult(
        monthly_emi=round_to_precision(emi),
        total_interest=round_to_precision(total_interest),
        total_amount=round_to_precision(loan + total_interest),
        interest_to_loan_ratio=round_to_precision(safe_divide(total_interest, loan) * 100),
        months_to_payoff=len(rows),
        amortization_schedule=rows,
    )
