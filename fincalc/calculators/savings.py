"""
calculators/savings.py -- Compounding calculators.

calculate_sip             monthly,  balance = (balance + c) * (1 + r)
calculate_lumpsum         yearly,   amount  = principal * (1 + r)^year
calculate_ppf             yearly,   interest on (balance + investment)
calculate_fd              closed form, n = 12 / 4 / 1
calculate_rd              monthly,  interest on the OPENING balance
calculate_epf             yearly,   interest on (balance + contributions)
calculate_gold            yearly,   value = grams * appreciated price
calculate_swp             monthly,  grow, then withdraw
calculate_dividend_yield  no iteration
calculate_investment      closed form per year, initial at n / year, contributions monthly

Aggregates are read off the last breakdown entry, so
total_gains == maturity_amount - total_investment and the final balance
equals maturity_amount. Gains are never floored at zero.
"""
from __future__ import annotations

import logging
from typing import Any, List

import numpy as np

from fincalc.config import get_settings
from fincalc.errors import MSG_PERIOD_TOO_LONG, error_result, safe_calculation
from fincalc.models import (
    DividendYieldInputs,
    DividendYieldResult,
    EPFInputs,
    EPFResult,
    EPFYearEntry,
    FDInputs,
    FDResult,
    GoldInputs,
    GoldResult,
    GoldYearEntry,
    InvestmentInputs,
    InvestmentResult,
    InvestmentYearEntry,
    LumpsumInputs,
    LumpsumResult,
    LumpsumYearEntry,
    PPFInputs,
    PPFResult,
    PPFYearEntry,
    RDInputs,
    RDMonthEntry,
    RDResult,
    SIPInputs,
    SIPMonthEntry,
    SIPResult,
    SWPInputs,
    SWPResult,
    SWPYearEntry,
)
from fincalc.utils.finance import (
    COMPOUNDING_PER_YEAR,
    annuity_future_value,
    future_value,
    growth_path,
)
from fincalc.utils.periods import period_count
from fincalc.utils.safe_math import (
    is_effectively_zero,
    percent_to_decimal,
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_power,
    safe_subtract,
)

logger = logging.getLogger(__name__)

FD_PERIODS_PER_YEAR = {"monthly": 12, "quarterly": 4, "yearly": 1}


def _too_long(name: str, periods: int, cap: int) -> bool:
    if periods > cap:
        logger.warning("%s: %d periods exceeds cap of %d", name, periods, cap)
        return True
    return False


# ---------------------------------------------------------------------------
# SIP
# ---------------------------------------------------------------------------

@safe_calculation(SIPResult)
def calculate_sip(inputs: Any) -> SIPResult:
    data = SIPInputs.model_validate(inputs)
    months = period_count(data.years, 12)
    if _too_long("sip", months, get_settings().max_months):
        return error_result(SIPResult, MSG_PERIOD_TOO_LONG)
    if months == 0 or is_effectively_zero(data.monthly_investment):
        return SIPResult()

    contribution = data.monthly_investment
    growth = 1.0 + data.annual_return / 1200.0
    balance = invested = 0.0
    rows: List[SIPMonthEntry] = []

    for month in range(1, months + 1):
        balance = safe_multiply(safe_add(balance, contribution), growth)
        invested = safe_add(invested, contribution)
        rows.append(
            SIPMonthEntry(
                month=month,
                investment=round_to_precision(contribution),
                balance=round_to_precision(balance),
                total_invested=round_to_precision(invested),
                total_gains=round_to_precision(balance - invested),
            )
        )

    last = rows[-1]
    logger.debug("sip: %d months, maturity %.2f", months, last.balance)
    return SIPResult(
        total_investment=last.total_invested,
        maturity_amount=last.balance,
        total_gains=round_to_precision(last.balance - last.total_invested),
        monthly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# Lumpsum
# ---------------------------------------------------------------------------

@safe_calculation(LumpsumResult)
def calculate_lumpsum(inputs: Any) -> LumpsumResult:
    data = LumpsumInputs.model_validate(inputs)
    principal = round_to_precision(data.principal)
    years = period_count(data.years, 1)
    if _too_long("lumpsum", years, get_settings().max_years):
        return error_result(LumpsumResult, MSG_PERIOD_TOO_LONG)
    if years == 0 or is_effectively_zero(principal):
        return LumpsumResult(principal=principal, maturity_amount=principal)

    rate = percent_to_decimal(data.annual_return)
    amounts = growth_path(data.principal, rate, years)
    rows = [
        LumpsumYearEntry(
            year=year,
            amount=round_to_precision(amount),
            gains=round_to_precision(amount - data.principal),
        )
        for year, amount in enumerate(amounts.tolist(), start=1)
    ]

    closed_form = future_value(data.principal, rate, years)
    if not np.isclose(closed_form, amounts[-1], rtol=1e-9):
        logger.warning(
            "lumpsum: schedule %.2f disagrees with closed form %.2f", amounts[-1], closed_form
        )

    maturity = rows[-1].amount
    return LumpsumResult(
        principal=principal,
        maturity_amount=maturity,
        total_gains=round_to_precision(maturity - principal),
        yearly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# PPF
# ---------------------------------------------------------------------------

@safe_calculation(PPFResult)
def calculate_ppf(inputs: Any) -> PPFResult:
    """Zero investment still yields one all-zero entry per year."""
    data = PPFInputs.model_validate(inputs)
    settings = get_settings()
    rate = settings.ppf_rate
    interest_rate = round_to_precision(rate * 100)
    years = period_count(data.years, 1)
    if _too_long("ppf", years, settings.max_years):
        return error_result(PPFResult, MSG_PERIOD_TOO_LONG)
    if years == 0:
        return PPFResult(interest_rate=interest_rate)

    investment = data.yearly_investment
    balance = invested = 0.0
    rows: List[PPFYearEntry] = []

    for year in range(1, years + 1):
        interest = safe_multiply(safe_add(balance, investment), rate)
        balance = safe_add(balance, investment, interest)
        invested = safe_add(invested, investment)
        rows.append(
            PPFYearEntry(
                year=year,
                investment=round_to_precision(investment),
                interest=round_to_precision(interest),
                balance=round_to_precision(balance),
                total_invested=round_to_precision(invested),
            )
        )

    last = rows[-1]
    return PPFResult(
        interest_rate=interest_rate,
        total_investment=last.total_invested,
        maturity_amount=last.balance,
        total_gains=round_to_precision(last.balance - last.total_invested),
        yearly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# FD
# ---------------------------------------------------------------------------

@safe_calculation(FDResult)
def calculate_fd(inputs: Any) -> FDResult:
    data = FDInputs.model_validate(inputs)
    per_year = FD_PERIODS_PER_YEAR[data.compounding_frequency]
    principal = data.principal
    if data.years <= 0 or is_effectively_zero(principal):
        return FDResult(
            principal=round_to_precision(principal),
            maturity_amount=round_to_precision(principal),
            compounding_periods=per_year,
        )

    maturity = future_value(principal, percent_to_decimal(data.annual_rate) / per_year, per_year * data.years)
    effective_yield = safe_multiply(safe_divide(maturity, principal) - 1.0, 100)
    return FDResult(
        principal=round_to_precision(principal),
        maturity_amount=round_to_precision(maturity),
        total_interest=round_to_precision(safe_subtract(maturity, principal)),
        effective_yield=round_to_precision(effective_yield),
        compounding_periods=per_year,
    )


# ---------------------------------------------------------------------------
# RD
# ---------------------------------------------------------------------------

@safe_calculation(RDResult)
def calculate_rd(inputs: Any) -> RDResult:
    """Interest accrues on the opening balance, so month 1 earns nothing."""
    data = RDInputs.model_validate(inputs)
    months = period_count(data.years, 12)
    if _too_long("rd", months, get_settings().max_months):
        return error_result(RDResult, MSG_PERIOD_TOO_LONG)
    if months == 0 or is_effectively_zero(data.monthly_deposit):
        return RDResult()

    deposit = data.monthly_deposit
    rate = data.annual_rate / 1200.0
    balance = deposited = 0.0
    rows: List[RDMonthEntry] = []

    for month in range(1, months + 1):
        interest = safe_multiply(balance, rate)
        balance = safe_add(balance, deposit, interest)
        deposited = safe_add(deposited, deposit)
        rows.append(
            RDMonthEntry(
                month=month,
                deposit=round_to_precision(deposit),
                interest=round_to_precision(interest),
                balance=round_to_precision(balance),
                total_deposited=round_to_precision(deposited),
            )
        )

    last = rows[-1]
    return RDResult(
        total_deposits=last.total_deposited,
        maturity_amount=last.balance,
        total_interest=round_to_precision(last.balance - last.total_deposited),
        monthly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# EPF
# ---------------------------------------------------------------------------

@safe_calculation(EPFResult)
def calculate_epf(inputs: Any) -> EPFResult:
    """basic_salary is monthly; contributions are percentages of it."""
    data = EPFInputs.model_validate(inputs)
    settings = get_settings()
    rate = settings.epf_rate
    interest_rate = round_to_precision(rate * 100)
    years = period_count(data.years, 1)
    if _too_long("epf", years, settings.max_years):
        return error_result(EPFResult, MSG_PERIOD_TOO_LONG)

    yearly_employee = safe_multiply(data.basic_salary * percent_to_decimal(data.employee_contribution), 12)
    yearly_employer = safe_multiply(data.basic_salary * percent_to_decimal(data.employer_contribution), 12)
    combined = safe_add(yearly_employee, yearly_employer)
    if years == 0 or is_effectively_zero(combined):
        return EPFResult(interest_rate=interest_rate)

    balance = total_employee = total_employer = 0.0
    rows: List[EPFYearEntry] = []

    for year in range(1, years + 1):
        interest = safe_multiply(safe_add(balance, combined), rate)
        balance = safe_add(balance, combined, interest)
        total_employee = safe_add(total_employee, yearly_employee)
        total_employer = safe_add(total_employer, yearly_employer)
        rows.append(
            EPFYearEntry(
                year=year,
                employee_contribution=round_to_precision(yearly_employee),
                employer_contribution=round_to_precision(yearly_employer),
                interest=round_to_precision(interest),
                balance=round_to_precision(balance),
                total_contribution=round_to_precision(total_employee + total_employer),
            )
        )

    last = rows[-1]
    return EPFResult(
        interest_rate=interest_rate,
        total_employee_contribution=round_to_precision(total_employee),
        total_employer_contribution=round_to_precision(total_employer),
        total_contribution=last.total_contribution,
        maturity_amount=last.balance,
        total_interest=round_to_precision(last.balance - last.total_contribution),
        yearly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# Gold
# ---------------------------------------------------------------------------

@safe_calculation(GoldResult)
def calculate_gold(inputs: Any) -> GoldResult:
    """
    Gains are value - investment in every entry and in the aggregate,
    negative under depreciation. A non-positive gold price buys 0 grams.
    """
    data = GoldInputs.model_validate(inputs)
    investment = round_to_precision(data.investment_amount)
    years = period_count(data.years, 1)
    if _too_long("gold", years, get_settings().max_years):
        return error_result(GoldResult, MSG_PERIOD_TOO_LONG)
    if is_effectively_zero(investment):
        return GoldResult()

    price = data.gold_price_per_gram
    grams = safe_divide(data.investment_amount, price) if price > 0 else 0.0
    if years == 0:
        return GoldResult(
            investment_amount=investment,
            gold_quantity=round_to_precision(grams, 4),
            future_gold_price=round_to_precision(max(price, 0.0)),
            maturity_amount=investment,
        )

    prices = growth_path(max(price, 0.0), percent_to_decimal(data.expected_appreciation), years)
    values = prices * grams
    rows = [
        GoldYearEntry(
            year=year,
            gold_price=round_to_precision(p),
            value=round_to_precision(v),
            gains=round_to_precision(v - data.investment_amount),
        )
        for year, (p, v) in enumerate(zip(prices.tolist(), values.tolist()), start=1)
    ]

    last = rows[-1]
    growth_ratio = safe_divide(last.value, investment)
    annualized = safe_multiply(safe_power(growth_ratio, 1.0 / years) - 1.0, 100)
    return GoldResult(
        investment_amount=investment,
        gold_quantity=round_to_precision(grams, 4),
        future_gold_price=last.gold_price,
        maturity_amount=last.value,
        total_gains=round_to_precision(last.value - investment),
        annualized_return=round_to_precision(annualized),
        yearly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# SWP
# ---------------------------------------------------------------------------

@safe_calculation(SWPResult)
def calculate_swp(inputs: Any) -> SWPResult:
    """
    Each month the corpus grows first, then the withdrawal is taken
    (capped at what is left). The withdrawal grows by
    withdrawal_increase / 12 percent per month. Stops when the corpus is
    exhausted or after swp_max_months.
    """
    data = SWPInputs.model_validate(inputs)
    if is_effectively_zero(data.total_corpus):
        return SWPResult()

    max_months = get_settings().swp_max_months
    growth = 1.0 + data.expected_return / 1200.0
    step_up = 1.0 + data.withdrawal_increase / 1200.0

    corpus = data.total_corpus
    withdrawal = data.monthly_withdrawal
    months = 0
    total_withdrawn = last_withdrawal = 0.0
    year_withdrawn = year_returns = 0.0
    rows: List[SWPYearEntry] = []

    while corpus > 0.005 and months < max_months:
        returns = safe_multiply(corpus, growth - 1.0)
        corpus = safe_add(corpus, returns)
        taken = min(withdrawal, corpus)
        corpus = safe_subtract(corpus, taken)
        total_withdrawn = safe_add(total_withdrawn, taken)
        last_withdrawal = taken
        year_withdrawn += taken
        year_returns += returns
        withdrawal = safe_multiply(withdrawal, step_up)
        months += 1

        if months % 12 == 0 or corpus <= 0.005 or months == max_months:
            rows.append(
                SWPYearEntry(
                    year=(months - 1) // 12 + 1,
                    withdrawn=round_to_precision(year_withdrawn),
                    returns=round_to_precision(year_returns),
                    closing_corpus=round_to_precision(max(corpus, 0.0)),
                )
            )
            year_withdrawn = year_returns = 0.0

    exhausted = corpus <= 0.005
    logger.debug("swp: %d months, exhausted=%s", months, exhausted)
    return SWPResult(
        months=months,
        years=months // 12,
        remaining_months=months % 12,
        corpus_exhausted=exhausted,
        total_withdrawn=round_to_precision(total_withdrawn),
        remaining_corpus=round_to_precision(max(corpus, 0.0)),
        last_withdrawal_amount=round_to_precision(last_withdrawal),
        first_year_withdrawal=rows[0].withdrawn if rows else 0.0,
        last_year_withdrawal=rows[-1].withdrawn if rows else 0.0,
        yearly_breakdown=rows,
    )


# ---------------------------------------------------------------------------
# Dividend yield
# ---------------------------------------------------------------------------

@safe_calculation(DividendYieldResult)
def calculate_dividend_yield(inputs: Any) -> DividendYieldResult:
    data = DividendYieldInputs.model_validate(inputs)
    annual_income = safe_multiply(data.annual_dividend, data.number_of_shares)
    return DividendYieldResult(
        dividend_yield=round_to_precision(safe_divide(data.annual_dividend, data.stock_price) * 100),
        annual_dividend_income=round_to_precision(annual_income),
        quarterly_dividend_income=round_to_precision(annual_income / 4),
        monthly_dividend_income=round_to_precision(annual_income / 12),
        total_investment=round_to_precision(safe_multiply(data.stock_price, data.number_of_shares)),
    )


# ---------------------------------------------------------------------------
# Investment (initial amount + monthly contributions)
# ---------------------------------------------------------------------------

def _investment_balance(initial: float, contribution: float, rate: float, per_year: int, years: int) -> float:
    """Initial amount compounded per_year times a year, plus monthly contributions at rate / 12."""
    grown = future_value(initial, rate / per_year, per_year * years)
    return safe_add(grown, annuity_future_value(contribution, rate / 12.0, 12 * years))


@safe_calculation(InvestmentResult)
def calculate_investment(inputs: Any) -> InvestmentResult:
    """
    final = initial * (1 + r/n)^(n*t) + c * ((1 + r/12)^(12t) - 1) / (r/12)

    Each breakdown year is the same closed form evaluated at that year, so
    the last ending balance is the final amount.
    """
    data = InvestmentInputs.model_validate(inputs)
    years = period_count(data.years, 1)
    if _too_long("investment", years, get_settings().max_years):
        return error_result(InvestmentResult, MSG_PERIOD_TOO_LONG)

    initial = data.initial_amount
    contribution = data.monthly_contribution
    if years == 0:
        amount = round_to_precision(initial)
        return InvestmentResult(final_amount=amount, total_contributions=amount)

    rate = percent_to_decimal(data.annual_return)
    per_year = COMPOUNDING_PER_YEAR[data.compounding_frequency]
    yearly_contribution = safe_multiply(contribution, 12)
    balance = initial
    rows: List[InvestmentYearEntry] = []

    for year in range(1, years + 1):
        ending = _investment_balance(initial, contribution, rate, per_year, year)
        contributed = safe_add(initial, safe_multiply(yearly_contribution, year))
        rows.append(
            InvestmentYearEntry(
                year=year,
                starting_balance=round_to_precision(balance),
                contributions=round_to_precision(yearly_contribution),
                growth=round_to_precision(ending - balance - yearly_contribution),
                ending_balance=round_to_precision(ending),
                cumulative_contributions=round_to_precision(contributed),
                cumulative_growth=round_to_precision(ending - contributed),
            )
        )
        balance = ending

    last = rows[-1]
    annualized = 0.0
    if last.cumulative_contributions > 0:
        ratio = safe_divide(last.ending_balance, last.cumulative_contributions)
        annualized = (safe_power(ratio, 1.0 / years) - 1.0) * 100

    logger.debug("investment: %d years, %s compounding, final %.2f", years, data.compounding_frequency, last.ending_balance)
    return InvestmentResult(
        final_amount=last.ending_balance,
        total_contributions=last.cumulative_contributions,
        total_growth=round_to_precision(last.ending_balance - last.cumulative_contributions),
        annualized_return=round_to_precision(annualized),
        yearly_breakdown=rows,
    )
