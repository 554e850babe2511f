"""
models.py -- Pydantic models for every calculator's inputs and results.

Inputs are parsed ONCE here: every float/int field runs through
parse_robust_number in a mode="before" validator, so "Rs 5,000", "12%",
None and NaN all arrive in the calculators as finite numbers.
Fields are snake_case in Python and camelCase on the wire
(model_dump(by_alias=True)); both spellings are accepted on input.
Results are frozen and default to zero, so ResultModel(error=...) is always
a valid fallback.
"""
from __future__ import annotations

from datetime import date
from typing import ClassVar, Dict, FrozenSet, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from fincalc.utils.parser import parse_robust_number
from fincalc.utils.periods import parse_date


def _choice(value: object, choices: Mapping[str, str], default: str) -> str:
    """Normalize a free-form enum value; unknown values fall back to default."""
    if not isinstance(value, str):
        return default
    key = value.strip().lower().replace("_", "-").replace(" ", "-")
    return choices.get(key, default)


class CalcModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CalculatorInputs(CalcModel):
    """
    Base for input records.

    Numeric fields are made non-negative (absolute value) unless listed in
    `signed_fields`. `fallbacks` gives the value used when a field cannot
    be parsed at all (defaults to 0).
    """

    model_config = ConfigDict(extra="ignore")

    signed_fields: ClassVar[FrozenSet[str]] = frozenset()
    fallbacks: ClassVar[Dict[str, float]] = {}

    @field_validator("*", mode="before")
    @classmethod
    def coerce_numbers(cls, v: object, info: ValidationInfo) -> object:
        field = cls.model_fields.get(info.field_name)
        if field is None or field.annotation not in (float, int):
            return v
        number = parse_robust_number(v, cls.fallbacks.get(info.field_name, 0.0))
        if info.field_name not in cls.signed_fields:
            number = abs(number)
        return int(number) if field.annotation is int else number


# ---------------------------------------------------------------------------
# Enum spellings
# ---------------------------------------------------------------------------

DEPOSIT_FREQUENCIES = {
    "monthly": "monthly",
    "quarterly": "quarterly",
    "yearly": "yearly",
    "annually": "yearly",
    "annual": "yearly",
}
COMPOUND_FREQUENCIES = {
    "yearly": "yearly",
    "annually": "yearly",
    "annual": "yearly",
    "half-yearly": "half-yearly",
    "semiannually": "half-yearly",
    "semi-annually": "half-yearly",
    "quarterly": "quarterly",
    "monthly": "monthly",
    "daily": "daily",
}
REGIMES = {"new": "new", "old": "old"}
CITY_TYPES = {"metro": "metro", "non-metro": "non-metro", "nonmetro": "non-metro"}
ASSET_TYPES = {"equity": "equity", "debt": "debt", "property": "property", "gold": "gold"}
GST_TYPES = {"exclusive": "exclusive", "inclusive": "inclusive"}
INVESTMENT_TYPES = {"lumpsum": "lumpsum", "lump-sum": "lumpsum", "sip": "sip"}
TENURE_TYPES = {"years": "years", "year": "years", "months": "months", "month": "months"}
PREPAYMENT_FREQUENCIES = {
    "none": "none",
    "monthly": "monthly",
    "yearly": "yearly",
    "annually": "yearly",
}


# ---------------------------------------------------------------------------
# Savings: SIP, lumpsum, PPF, FD, RD, EPF, gold, SWP, dividend yield, investment
# ---------------------------------------------------------------------------

class SIPInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    monthly_investment: float = 0.0
    annual_return: float = 0.0
    years: float = 0.0


class SIPMonthEntry(CalcModel):
    month: int
    investment: float
    balance: float
    total_invested: float
    total_gains: float


class SIPResult(CalcModel):
    total_investment: float = 0.0
    maturity_amount: float = 0.0
    total_gains: float = 0.0
    monthly_breakdown: List[SIPMonthEntry] = []
    error: Optional[str] = None


class LumpsumInputs(CalculatorInputs):
    signed_fields = frozenset({"annual_return", "years"})

    principal: float = 0.0
    annual_return: float = 0.0
    years: float = 0.0


class LumpsumYearEntry(CalcModel):
    year: int
    amount: float
    gains: float


class LumpsumResult(CalcModel):
    principal: float = 0.0
    maturity_amount: float = 0.0
    total_gains: float = 0.0
    yearly_breakdown: List[LumpsumYearEntry] = []
    error: Optional[str] = None


class PPFInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    yearly_investment: float = 0.0
    years: float = 0.0


class PPFYearEntry(CalcModel):
    year: int
    investment: float
    interest: float
    balance: float
    total_invested: float


class PPFResult(CalcModel):
    interest_rate: float = 0.0
    total_investment: float = 0.0
    maturity_amount: float = 0.0
    total_gains: float = 0.0
    yearly_breakdown: List[PPFYearEntry] = []
    error: Optional[str] = None


class FDInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    principal: float = 0.0
    annual_rate: float = 0.0
    years: float = 0.0
    compounding_frequency: Literal["monthly", "quarterly", "yearly"] = "yearly"

    @field_validator("compounding_frequency", mode="before")
    @classmethod
    def check_frequency(cls, v: object) -> str:
        return _choice(v, DEPOSIT_FREQUENCIES, "yearly")


class FDResult(CalcModel):
    principal: float = 0.0
    maturity_amount: float = 0.0
    total_interest: float = 0.0
    effective_yield: float = 0.0
    compounding_periods: int = 1
    error: Optional[str] = None


class RDInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    monthly_deposit: float = 0.0
    annual_rate: float = 0.0
    years: float = 0.0


class RDMonthEntry(CalcModel):
    month: int
    deposit: float
    interest: float
    balance: float
    total_deposited: float


class RDResult(CalcModel):
    total_deposits: float = 0.0
    maturity_amount: float = 0.0
    total_interest: float = 0.0
    monthly_breakdown: List[RDMonthEntry] = []
    error: Optional[str] = None


class EPFInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    basic_salary: float = 0.0
    employee_contribution: float = 0.0  # percent of basic
    employer_contribution: float = 0.0  # percent of basic
    years: float = 0.0


class EPFYearEntry(CalcModel):
    year: int
    employee_contribution: float
    employer_contribution: float
    interest: float
    balance: float
    total_contribution: float


class EPFResult(CalcModel):
    interest_rate: float = 0.0
    total_employee_contribution: float = 0.0
    total_employer_contribution: float = 0.0
    total_contribution: float = 0.0
    maturity_amount: float = 0.0
    total_interest: float = 0.0
    yearly_breakdown: List[EPFYearEntry] = []
    error: Optional[str] = None


class GoldInputs(CalculatorInputs):
    signed_fields = frozenset({"expected_appreciation", "years"})

    investment_amount: float = 0.0
    gold_price_per_gram: float = 0.0
    expected_appreciation: float = 0.0
    years: float = 0.0


class GoldYearEntry(CalcModel):
    year: int
    gold_price: float
    value: float
    gains: float


class GoldResult(CalcModel):
    investment_amount: float = 0.0
    gold_quantity: float = 0.0
    future_gold_price: float = 0.0
    maturity_amount: float = 0.0
    total_gains: float = 0.0
    annualized_return: float = 0.0
    yearly_breakdown: List[GoldYearEntry] = []
    error: Optional[str] = None


class SWPInputs(CalculatorInputs):
    total_corpus: float = 0.0
    monthly_withdrawal: float = 0.0
    expected_return: float = 0.0
    withdrawal_increase: float = 0.0  # annual percent


class SWPYearEntry(CalcModel):
    year: int
    withdrawn: float
    returns: float
    closing_corpus: float


class SWPResult(CalcModel):
    months: int = 0
    years: int = 0
    remaining_months: int = 0
    corpus_exhausted: bool = False
    total_withdrawn: float = 0.0
    remaining_corpus: float = 0.0
    last_withdrawal_amount: float = 0.0
    first_year_withdrawal: float = 0.0
    last_year_withdrawal: float = 0.0
    yearly_breakdown: List[SWPYearEntry] = []
    error: Optional[str] = None


class DividendYieldInputs(CalculatorInputs):
    stock_price: float = 0.0
    annual_dividend: float = 0.0
    number_of_shares: float = 0.0


class DividendYieldResult(CalcModel):
    dividend_yield: float = 0.0
    annual_dividend_income: float = 0.0
    quarterly_dividend_income: float = 0.0
    monthly_dividend_income: float = 0.0
    total_investment: float = 0.0
    error: Optional[str] = None


class InvestmentInputs(CalculatorInputs):
    signed_fields = frozenset({"years"})

    initial_amount: float = 0.0
    monthly_contribution: float = 0.0
    annual_return: float = 0.0
    years: float = 0.0
    compounding_frequency: Literal[
        "yearly", "half-yearly", "quarterly", "monthly", "daily"
    ] = "monthly"

    @field_validator("compounding_frequency", mode="before")
    @classmethod
    def check_frequency(cls, v: object) -> str:
        return _choice(v, COMPOUND_FREQUENCIES, "monthly")


class InvestmentYearEntry(CalcModel):
    year: int
    starting_balance: float
    contributions: float
    growth: float
    ending_balance: float
    cumulative_contributions: float
    cumulative_growth: float


class InvestmentResult(CalcModel):
    final_amount: float = 0.0
    total_contributions: float = 0.0
    total_growth: float = 0.0
    annualized_return: float = 0.0  # percent
    yearly_breakdown: List[InvestmentYearEntry] = []
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Loans: loan/EMI and its variants, mortgage, advanced EMI
# ---------------------------------------------------------------------------

class LoanInputs(CalculatorInputs):
    signed_fields = frozenset({"rate", "years"})

    principal: float = 0.0
    rate: float = 0.0  # annual percent
    years: float = 0.0
    extra_payment: float = 0.0  # monthly


class CarLoanInputs(CalculatorInputs):
    signed_fields = frozenset({"rate", "years"})

    vehicle_price: float = 0.0
    down_payment: float = 0.0
    rate: float = 0.0
    years: float = 0.0
    extra_payment: float = 0.0


class HomeLoanInputs(CalculatorInputs):
    signed_fields = frozenset({"rate", "years"})

    property_value: float = 0.0
    down_payment: float = 0.0
    rate: float = 0.0
    years: float = 0.0
    extra_payment: float = 0.0


class LoanScheduleEntry(CalcModel):
    month: int
    payment: float
    principal: float
    interest: float
    extra_payment: float
    balance: float
    cumulative_interest: float


class LoanResult(CalcModel):
    principal: float = 0.0
    monthly_payment: float = 0.0
    total_payment: float = 0.0
    total_interest: float = 0.0
    payoff_time: int = 0  # months
    payoff_time_saved: int = 0  # months
    interest_saved: float = 0.0
    payment_schedule: List[LoanScheduleEntry] = []
    error: Optional[str] = None


class PurchaseLoanResult(LoanResult):
    purchase_price: float = 0.0
    down_payment: float = 0.0
    down_payment_percent: float = 0.0


class PersonalLoanResult(LoanResult):
    minimum_monthly_income: float = 0.0


class MortgageInputs(CalculatorInputs):
    signed_fields = frozenset({"rate", "years"})

    property_value: float = 0.0
    down_payment: float = 0.0
    rate: float = 0.0
    years: float = 0.0
    property_tax: float = 0.0  # annual
    insurance: float = 0.0  # annual
    pmi: float = 0.0  # annual


class MortgageResult(CalcModel):
    loan_amount: float = 0.0
    monthly_payment: float = 0.0
    monthly_principal_and_interest: float = 0.0
    monthly_property_tax: float = 0.0
    monthly_insurance: float = 0.0
    monthly_pmi: float = 0.0
    total_payment: float = 0.0
    total_interest: float = 0.0
    loan_to_value: float = 0.0
    payment_schedule: List[LoanScheduleEntry] = []
    error: Optional[str] = None


class AdvancedEMIInputs(CalculatorInputs):
    signed_fields = frozenset({"loan_amount", "interest_rate", "loan_tenure", "prepayment_amount"})

    loan_amount: float = 0.0
    interest_rate: float = 0.0
    loan_tenure: float = 0.0
    tenure_type: Literal["years", "months"] = "years"
    prepayment_amount: float = 0.0
    prepayment_frequency: Literal["none", "monthly", "yearly"] = "none"

    @field_validator("tenure_type", mode="before")
    @classmethod
    def check_tenure_type(cls, v: object) -> str:
        return _choice(v, TENURE_TYPES, "years")

    @field_validator("prepayment_frequency", mode="before")
    @classmethod
    def check_prepayment_frequency(cls, v: object) -> str:
        return _choice(v, PREPAYMENT_FREQUENCIES, "none")


class EMIScheduleEntry(CalcModel):
    month: int
    emi: float
    principal: float
    interest: float
    balance: float


class AdvancedEMIResult(CalcModel):
    monthly_emi: float = 0.0
    total_interest: float = 0.0
    total_amount: float = 0.0
    interest_to_loan_ratio: float = 0.0
    months_to_payoff: int = 0
    amortization_schedule: List[EMIScheduleEntry] = []
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Tax: income tax, capital gains, GST, HRA, salary
# ---------------------------------------------------------------------------

class IncomeTaxInputs(CalculatorInputs):
    signed_fields = frozenset({"annual_income", "age", "deductions"})

    annual_income: float = 0.0
    age: float = 0.0
    deductions: float = 0.0
    regime: Literal["new", "old"] = "new"

    @field_validator("regime", mode="before")
    @classmethod
    def check_regime(cls, v: object) -> str:
        return _choice(v, REGIMES, "new")


class TaxBracket(CalcModel):
    range: str
    rate: float
    taxable_amount: float
    tax: float


class IncomeTaxResult(CalcModel):
    regime: str = "new"
    gross_income: float = 0.0
    standard_deduction: float = 0.0
    taxable_income: float = 0.0
    income_tax: float = 0.0
    cess: float = 0.0
    total_tax: float = 0.0
    net_income: float = 0.0
    effective_tax_rate: float = 0.0
    tax_brackets: List[TaxBracket] = []
    error: Optional[str] = None


class CapitalGainsInputs(CalculatorInputs):
    purchase_price: float = 0.0
    sale_price: float = 0.0
    asset_type: Literal["equity", "debt", "property", "gold"] = "equity"
    holding_months: float = 0.0
    purchase_date: Optional[date] = None
    sale_date: Optional[date] = None

    @field_validator("asset_type", mode="before")
    @classmethod
    def check_asset_type(cls, v: object) -> str:
        return _choice(v, ASSET_TYPES, "equity")

    @field_validator("purchase_date", "sale_date", mode="before")
    @classmethod
    def check_date(cls, v: object) -> Optional[date]:
        return parse_date(v)


class CapitalGainsResult(CalcModel):
    capital_gains: float = 0.0
    holding_period_months: int = 0
    gain_type: Literal["short-term", "long-term"] = "short-term"
    tax_rate: float = 0.0
    taxable_gains: float = 0.0
    tax_amount: float = 0.0
    net_gains: float = 0.0
    error: Optional[str] = None


class GSTInputs(CalculatorInputs):
    amount: float = 0.0
    gst_rate: float = 0.0
    calculation_type: Literal["exclusive", "inclusive"] = "exclusive"

    @field_validator("calculation_type", mode="before")
    @classmethod
    def check_calculation_type(cls, v: object) -> str:
        return _choice(v, GST_TYPES, "exclusive")


class GSTResult(CalcModel):
    original_amount: float = 0.0
    gst_amount: float = 0.0
    total_amount: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    error: Optional[str] = None


class HRAInputs(CalculatorInputs):
    basic_salary: float = 0.0
    hra_received: float = 0.0
    rent_paid: float = 0.0
    city_type: Literal["metro", "non-metro"] = "non-metro"

    @field_validator("city_type", mode="before")
    @classmethod
    def check_city_type(cls, v: object) -> str:
        return _choice(v, CITY_TYPES, "non-metro")


class HRAExemptionCalculations(CalcModel):
    actual_hra: float = 0.0
    hra_percent: float = 0.0  # basic x 50% (metro) or 40%
    rent_minus_10_percent: float = 0.0


class HRAResult(CalcModel):
    hra_received: float = 0.0
    hra_exemption: float = 0.0
    taxable_hra: float = 0.0
    exemption_calculations: HRAExemptionCalculations = Field(
        default_factory=HRAExemptionCalculations
    )
    error: Optional[str] = None


class SalaryInputs(CalculatorInputs):
    ctc: float = 0.0
    basic_percent: float = 0.0
    hra_percent: float = 0.0  # percent of basic
    pf_contribution: float = 0.0  # percent of basic
    professional_tax: float = 0.0  # annual
    other_allowances: float = 0.0  # annual


class SalaryResult(CalcModel):
    ctc: float = 0.0
    basic_salary: float = 0.0
    hra: float = 0.0
    other_allowances: float = 0.0
    gross_salary: float = 0.0
    pf_deduction: float = 0.0
    professional_tax: float = 0.0
    taxable_income: float = 0.0
    income_tax: float = 0.0
    total_deductions: float = 0.0
    net_salary: float = 0.0
    monthly_net_salary: float = 0.0
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Planning: retirement, mutual fund, break-even
# ---------------------------------------------------------------------------

class RetirementInputs(CalculatorInputs):
    fallbacks = {"current_age": 25.0, "retirement_age": 65.0}

    current_age: int = 25
    retirement_age: int = 65
    current_savings: float = 0.0
    monthly_contribution: float = 0.0
    annual_return_rate: float = 0.0
    retirement_goal: float = 0.0


class RetirementResult(CalcModel):
    current_age: int = 0
    retirement_age: int = 0
    years_to_retirement: int = 0
    projected_savings: float = 0.0
    future_value_of_savings: float = 0.0
    future_value_of_contributions: float = 0.0
    total_contributions: float = 0.0
    total_growth: float = 0.0
    retirement_goal: float = 0.0
    shortfall: float = 0.0
    goal_met: bool = False
    error: Optional[str] = None


class MutualFundInputs(CalculatorInputs):
    investment_type: Literal["lumpsum", "sip"] = "lumpsum"
    initial_investment: float = 0.0
    monthly_investment: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    as_of: Optional[date] = None  # stands in for a missing end date
    purchase_nav: float = 0.0
    current_nav: float = 0.0
    entry_load: float = 0.0  # percent
    exit_load: float = 0.0  # percent
    tax_rate: float = 0.0  # percent of gains

    @field_validator("investment_type", mode="before")
    @classmethod
    def check_investment_type(cls, v: object) -> str:
        return _choice(v, INVESTMENT_TYPES, "lumpsum")

    @field_validator("start_date", "end_date", "as_of", mode="before")
    @classmethod
    def check_date(cls, v: object) -> Optional[date]:
        return parse_date(v)


class MutualFundResult(CalcModel):
    total_investment: float = 0.0
    units: float = 0.0
    current_value: float = 0.0
    absolute_returns: float = 0.0  # percent
    cagr: float = 0.0  # percent
    gains: float = 0.0
    tax_amount: float = 0.0
    post_tax_value: float = 0.0
    duration_years: float = 0.0
    months_invested: int = 0
    error: Optional[str] = None


class BreakEvenInputs(CalculatorInputs):
    fixed_cost: float = 0.0
    variable_cost_per_unit: float = 0.0
    selling_price_per_unit: float = 0.0
    target_profit: float = 0.0
    current_sales: float = 0.0  # units


class BreakEvenResult(CalcModel):
    contribution_margin: float = 0.0
    contribution_margin_ratio: float = 0.0
    break_even_units: float = 0.0
    break_even_revenue: float = 0.0
    units_for_target_profit: float = 0.0
    revenue_for_target_profit: float = 0.0
    current_revenue: float = 0.0
    current_total_cost: float = 0.0
    current_profit: float = 0.0
    safety_margin: float = 0.0
    additional_units_needed: float = 0.0
    additional_units_for_profit: float = 0.0
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Interest: simple, compound
# ---------------------------------------------------------------------------

class SimpleInterestInputs(CalculatorInputs):
    signed_fields = frozenset({"principal", "rate", "time"})

    principal: float = 0.0
    rate: float = 0.0
    time: float = 0.0  # years


class SimpleInterestResult(CalcModel):
    principal: float = 0.0
    simple_interest: float = 0.0
    total_amount: float = 0.0
    effective_rate: float = 0.0
    monthly_interest: float = 0.0
    error: Optional[str] = None


class CompoundInterestInputs(CalculatorInputs):
    signed_fields = frozenset({"principal", "rate", "time"})

    principal: float = 0.0
    rate: float = 0.0
    time: float = 0.0  # years
    compounding_frequency: Literal[
        "yearly", "half-yearly", "quarterly", "monthly", "daily"
    ] = "yearly"

    @field_validator("compounding_frequency", mode="before")
    @classmethod
    def check_frequency(cls, v: object) -> str:
        return _choice(v, COMPOUND_FREQUENCIES, "yearly")


class CompoundInterestResult(CalcModel):
    principal: float = 0.0
    total_amount: float = 0.0
    compound_interest: float = 0.0
    simple_interest: float = 0.0
    additional_earnings: float = 0.0
    effective_annual_rate: float = 0.0
    compounding_periods_per_year: int = 0
    error: Optional[str] = None
