"""
utils/validator.py -- Hard validation gates.

Each gate returns the message of the first failing rule, or None.
Calculators check the gate BEFORE computing and return an error result
carrying that message; categorically invalid input is never "repaired".

validate_income_tax(inputs)
    1. annual_income < 0      -> MSG_NEGATIVE_INCOME
    2. age < 18 or age > 120  -> MSG_INVALID_AGE
    3. deductions < 0         -> MSG_NEGATIVE_DEDUCTIONS

validate_advanced_emi(inputs)
    1. loan_amount <= 0       -> MSG_LOAN_NOT_POSITIVE
    2. interest_rate < 0      -> MSG_NEGATIVE_RATE
    3. loan_tenure <= 0       -> MSG_TENURE_NOT_POSITIVE
    4. prepayment_amount < 0  -> MSG_NEGATIVE_PREPAYMENT

validate_simple_interest(inputs)     negative principal / rate / time
validate_compound_interest(inputs)   principal > 0, rate >= 0, time > 0
"""
from __future__ import annotations

import logging
from typing import Optional

from fincalc.models import (
    AdvancedEMIInputs,
    CompoundInterestInputs,
    IncomeTaxInputs,
    SimpleInterestInputs,
)

logger = logging.getLogger(__name__)

MIN_AGE = 18
MAX_AGE = 120

MSG_NEGATIVE_INCOME = "Annual income cannot be negative."
MSG_INVALID_AGE = "Please enter a valid age."
MSG_NEGATIVE_DEDUCTIONS = "Deductions cannot be negative."

MSG_LOAN_NOT_POSITIVE = "Loan amount must be positive."
MSG_NEGATIVE_RATE = "Interest rate cannot be negative."
MSG_TENURE_NOT_POSITIVE = "Loan tenure must be positive."
MSG_NEGATIVE_PREPAYMENT = "Prepayment amount cannot be negative."

MSG_NEGATIVE_PRINCIPAL = "Principal amount cannot be negative."
MSG_NEGATIVE_TIME = "Time period cannot be negative."

MSG_PRINCIPAL_NOT_POSITIVE = "Principal must be positive."
MSG_TIME_NOT_POSITIVE = "Time period must be positive."


def _reject(gate: str, message: Optional[str]) -> Optional[str]:
    if message is not None:
        logger.warning("%s rejected input: %s", gate, message)
    return message


def validate_income_tax(inputs: IncomeTaxInputs) -> Optional[str]:
    message = None
    if inputs.annual_income < 0:
        message = MSG_NEGATIVE_INCOME
    elif inputs.age < MIN_AGE or inputs.age > MAX_AGE:
        message = MSG_INVALID_AGE
    elif inputs.deductions < 0:
        message = MSG_NEGATIVE_DEDUCTIONS
    return _reject("income_tax", message)


def validate_advanced_emi(inputs: AdvancedEMIInputs) -> Optional[str]:
    message = None
    if inputs.loan_amount <= 0:
        message = MSG_LOAN_NOT_POSITIVE
    elif inputs.interest_rate < 0:
        message = MSG_NEGATIVE_RATE
    elif inputs.loan_tenure <= 0:
        message = MSG_TENURE_NOT_POSITIVE
    elif inputs.prepayment_amount < 0:
        message = MSG_NEGATIVE_PREPAYMENT
    return _reject("advanced_emi", message)


def validate_simple_interest(inputs: SimpleInterestInputs) -> Optional[str]:
    message = None
    if inputs.principal < 0:
        message = MSG_NEGATIVE_PRINCIPAL
    elif inputs.rate < 0:
        message = MSG_NEGATIVE_RATE
    elif inputs.time < 0:
        message = MSG_NEGATIVE_TIME
    return _reject("simple_interest", message)


def validate_compound_interest(inputs: CompoundInterestInputs) -> Optional[str]:
    message = None
    if inputs.principal <= 0:
        message = MSG_PRINCIPAL_NOT_POSITIVE
    elif inputs.rate < 0:
        message = MSG_NEGATIVE_RATE
    elif inputs.time <= 0:
        message = MSG_TIME_NOT_POSITIVE
    return _reject("compound_interest", message)
