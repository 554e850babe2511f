# Test type: unit
# Validation: clamped arithmetic never yields NaN/inf; half-away-from-zero rounding
# Command: pytest test/test_safe_math.py -v

import math

import pytest

from fincalc.config import MAX_SAFE_VALUE
from fincalc.utils.safe_math import (
    clamp,
    is_effectively_zero,
    percent_to_decimal,
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_power,
    safe_subtract,
)


class TestSafeArithmetic:
    def test_add_parses_strings(self):
        assert safe_add("1,000", 500, None) == 1_500.0

    def test_add_clamps(self):
        assert safe_add(MAX_SAFE_VALUE, MAX_SAFE_VALUE) == MAX_SAFE_VALUE
        assert safe_add(-MAX_SAFE_VALUE, -1) == -MAX_SAFE_VALUE

    def test_subtract(self):
        assert safe_subtract(10, 4) == 6.0

    def test_multiply_clamps(self):
        assert safe_multiply(1e10, 1e10) == MAX_SAFE_VALUE

    def test_divide_by_zero_returns_fallback(self):
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, fallback=-1.0) == -1.0
        assert safe_divide(10, 1e-12) == 0.0

    def test_divide(self):
        assert safe_divide(1, 4) == 0.25

    def test_results_are_always_finite(self):
        for value in (safe_multiply(math.inf, 2), safe_add(math.nan, 1), safe_divide(math.inf, 3)):
            assert math.isfinite(value)


class TestSafePower:
    def test_regular(self):
        assert safe_power(2, 10) == 1024.0

    def test_zero_exponent(self):
        assert safe_power(5, 0) == 1.0

    def test_zero_base_negative_exponent(self):
        assert safe_power(0, -1) == 0.0

    def test_negative_base_fractional_exponent(self):
        assert safe_power(-8, 0.5) == 0.0

    def test_overflow_clamps(self):
        assert safe_power(10, 400) == MAX_SAFE_VALUE


class TestRoundToPrecision:
    def test_half_away_from_zero(self):
        """1.005 is 1.00499999... in binary; the decimal repr still rounds up."""
        assert round_to_precision(1.005) == 1.01
        assert round_to_precision(2.675) == 2.68
        assert round_to_precision(-1.005) == -1.01

    def test_other_digits(self):
        assert round_to_precision(1.23456, 4) == 1.2346
        assert round_to_precision(1234.5, 0) == 1235.0

    def test_idempotent(self):
        for value in (0.125, 1.005, 99999.995, -3.14159, 141477.8):
            once = round_to_precision(value)
            assert round_to_precision(once) == once

    def test_no_negative_zero(self):
        result = round_to_precision(-0.001)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    def test_parses_strings(self):
        assert round_to_precision("1,234.567") == 1234.57


class TestHelpers:
    def test_is_effectively_zero(self):
        assert is_effectively_zero(1e-11)
        assert not is_effectively_zero(0.01)

    def test_clamp(self):
        assert clamp(150, 0, 100) == 100
        assert clamp("-5", 0, 100) == 0

    def test_percent_to_decimal(self):
        assert percent_to_decimal("12%") == pytest.approx(0.12)
