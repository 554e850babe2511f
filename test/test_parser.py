# Test type: unit
# Validation: robust numeric parsing of currency strings, nulls, NaN and containers
# Command: pytest test/test_parser.py -v

import math
from decimal import Decimal

import pytest

from fincalc.utils.parser import is_safe_number, parse_robust_number


# ---------------------------------------------------------------------------
# parse_robust_number() -- strings
# ---------------------------------------------------------------------------

class TestParseStrings:
    def test_plain_number(self):
        assert parse_robust_number("1500") == 1500.0

    def test_rupee_symbol_and_indian_grouping(self):
        assert parse_robust_number("₹1,50,000") == 150_000.0

    def test_rs_prefix_with_dot(self):
        """'Rs.' must not leave its dot behind: 'Rs. 1,500' is 1500, not 0.15."""
        assert parse_robust_number("Rs. 1,500") == 1_500.0
        assert parse_robust_number("Rs.500") == 500.0
        assert parse_robust_number("INR.2,000") == 2_000.0

    def test_percent_sign(self):
        assert parse_robust_number("12.5%") == 12.5

    def test_trailing_unit_word(self):
        assert parse_robust_number("30 years") == 30.0

    def test_negative(self):
        assert parse_robust_number("-250") == -250.0

    def test_multiple_decimal_points_keep_first(self):
        assert parse_robust_number("1.234.5") == pytest.approx(1.2345)

    def test_surrounding_whitespace(self):
        assert parse_robust_number("   42  ") == 42.0

    @pytest.mark.parametrize("text", ["", "   ", "abc", "-", ".", "nan", "NULL", "undefined", "None"])
    def test_unparseable_gives_fallback(self, text):
        assert parse_robust_number(text) == 0.0
        assert parse_robust_number(text, fallback=7.0) == 7.0

    def test_bytes(self):
        assert parse_robust_number(b"2,000") == 2_000.0


# ---------------------------------------------------------------------------
# parse_robust_number() -- non-strings
# ---------------------------------------------------------------------------

class TestParseOtherTypes:
    def test_none_uses_fallback(self):
        assert parse_robust_number(None) == 0.0
        assert parse_robust_number(None, fallback=25.0) == 25.0

    def test_booleans(self):
        assert parse_robust_number(True) == 1.0
        assert parse_robust_number(False) == 0.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_floats(self, value):
        assert parse_robust_number(value) == 0.0

    def test_tiny_magnitude_collapses_to_zero(self):
        assert parse_robust_number(1e-12) == 0.0
        assert parse_robust_number(-1e-11) == 0.0

    def test_int_and_decimal(self):
        assert parse_robust_number(7) == 7.0
        assert parse_robust_number(Decimal("10.25")) == 10.25
        assert parse_robust_number(Decimal("NaN")) == 0.0

    def test_list_takes_first_element(self):
        assert parse_robust_number([42, 1]) == 42.0
        assert parse_robust_number([]) == 0.0

    def test_mapping_numeric_keys(self):
        assert parse_robust_number({"amount": "5,000"}) == 5_000.0
        assert parse_robust_number({"label": "x", "price": 12}) == 12.0
        assert parse_robust_number({"label": "x"}) == 0.0

    def test_arbitrary_object_never_raises(self):
        assert parse_robust_number(object()) == 0.0


# ---------------------------------------------------------------------------
# is_safe_number()
# ---------------------------------------------------------------------------

class TestIsSafeNumber:
    def test_finite_numbers(self):
        assert is_safe_number(3)
        assert is_safe_number(-2.5)
        assert is_safe_number("1,000")

    def test_non_finite_and_garbage(self):
        assert not is_safe_number(math.nan)
        assert not is_safe_number(math.inf)
        assert not is_safe_number("abc")
        assert not is_safe_number(None)
