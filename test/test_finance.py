# Test type: unit
# Validation: slab tax engines, annuity formulas, amortization walk, growth paths
# Command: pytest test/test_finance.py -v

import pytest

from fincalc.utils.finance import (
    NEW_REGIME_SLABS,
    amortize,
    annuity_future_value,
    annuity_payment,
    bracket_label,
    calc_tax,
    future_value,
    growth_path,
    old_regime_slabs,
    slab_tax,
)


# ---------------------------------------------------------------------------
# calc_tax tests -- simplified new regime (salary)
# ---------------------------------------------------------------------------

class TestCalcTax:
    def test_below_threshold(self):
        """income <= 3L -> tax = 0"""
        assert calc_tax(250_000) == 0.0
        assert calc_tax(300_000) == 0.0

    def test_slab_3l_to_7l(self):
        """income = 5L -> (5L-3L) * 0.05 = 10000"""
        assert calc_tax(500_000) == pytest.approx(10_000.0)

    def test_slab_7l_boundary(self):
        assert calc_tax(700_000) == pytest.approx(20_000.0)

    def test_slab_7l_to_10l(self):
        """income = 8L -> 20000 + (8L-7L) * 0.10 = 30000"""
        assert calc_tax(800_000) == pytest.approx(30_000.0)

    def test_slab_10l_to_12l(self):
        """income = 11L -> 50000 + 1L * 0.15 = 65000"""
        assert calc_tax(1_100_000) == pytest.approx(65_000.0)

    def test_slab_12l_to_15l(self):
        """income = 13L -> 80000 + 1L * 0.20 = 100000"""
        assert calc_tax(1_300_000) == pytest.approx(100_000.0)

    def test_slab_above_15l(self):
        """income = 16L -> 140000 + 1L * 0.30 = 170000"""
        assert calc_tax(1_600_000) == pytest.approx(170_000.0)

    def test_zero_income(self):
        assert calc_tax(0) == 0.0


# ---------------------------------------------------------------------------
# slab_tax tests -- regime slab tables
# ---------------------------------------------------------------------------

class TestSlabTax:
    def test_new_regime_825k(self):
        """825000 touches the 0%, 5% and 10% slabs only."""
        tax, brackets = slab_tax(825_000, NEW_REGIME_SLABS)
        assert [b.rate for b in brackets] == [0.0, 5.0, 10.0]
        assert [b.taxable_amount for b in brackets] == [300_000.0, 400_000.0, 125_000.0]
        assert [b.tax for b in brackets] == [0.0, 20_000.0, 12_500.0]
        assert tax == 32_500.0

    def test_bracket_sum_equals_tax(self):
        for income in (0, 299_999.99, 731_250.55, 1_925_000, 4_000_000.01):
            tax, brackets = slab_tax(income, NEW_REGIME_SLABS)
            assert sum(b.tax for b in brackets) == pytest.approx(tax, abs=0.01)

    def test_all_slabs_touched(self):
        tax, brackets = slab_tax(1_925_000, NEW_REGIME_SLABS)
        assert len(brackets) == 6
        assert tax == pytest.approx(267_500.0)

    def test_zero_income_has_no_brackets(self):
        assert slab_tax(0, NEW_REGIME_SLABS) == (0.0, [])

    def test_old_regime_exemption_tiers(self):
        assert old_regime_slabs(30)[0][1] == 250_000.0
        assert old_regime_slabs(60)[0][1] == 300_000.0
        assert old_regime_slabs(80)[0][1] == 500_000.0

    def test_super_senior_skips_zero_width_slab(self):
        """At 80+ the 5% slab is 5L-5L wide and is not reported."""
        tax, brackets = slab_tax(600_000, old_regime_slabs(85))
        assert [b.rate for b in brackets] == [0.0, 20.0]
        assert tax == pytest.approx(20_000.0)

    def test_labels(self):
        assert bracket_label(700_000, 1_000_000) == "₹700,000 - ₹1,000,000"
        assert bracket_label(1_500_000, None) == "₹1,500,000+"


# ---------------------------------------------------------------------------
# Annuity / compounding tests
# ---------------------------------------------------------------------------

class TestAnnuity:
    def test_payment_standard(self):
        """1L at 1% a month for 12 months -> 8884.88"""
        assert annuity_payment(100_000, 0.01, 12) == pytest.approx(8_884.88, abs=0.01)

    def test_payment_zero_rate(self):
        assert annuity_payment(100_000, 0, 10) == 10_000.0

    def test_payment_no_periods(self):
        assert annuity_payment(100_000, 0.01, 0) == 0.0

    def test_future_value(self):
        assert future_value(1_000, 0.1, 2) == pytest.approx(1_210.0)

    def test_annuity_future_value(self):
        assert annuity_future_value(100, 0, 12) == 1_200.0
        assert annuity_future_value(100, 0.01, 2) == pytest.approx(201.0)


class TestGrowthPath:
    def test_yearly_values(self):
        path = growth_path(1_000, 0.1, 3)
        assert path.tolist() == pytest.approx([1_100.0, 1_210.0, 1_331.0])

    def test_no_years(self):
        assert len(growth_path(1_000, 0.1, 0)) == 0

    def test_total_depreciation_floors_at_zero(self):
        assert growth_path(100, -2.0, 2).tolist() == [0.0, 0.0]


# ---------------------------------------------------------------------------
# amortize tests
# ---------------------------------------------------------------------------

class TestAmortize:
    def test_zero_rate_schedule(self):
        rows = amortize(1_200, 0, 12, 100)
        assert len(rows) == 12
        assert all(row["principal"] == pytest.approx(100) for row in rows)
        assert rows[-1]["balance"] == 0.0

    def test_extra_payment_shortens_term(self):
        rows = amortize(1_200, 0, 12, 100, extra=100)
        assert len(rows) == 6
        assert rows[-1]["balance"] == 0.0
        assert rows[-1]["extra_payment"] == 0.0
        assert sum(r["payment"] + r["extra_payment"] for r in rows) == pytest.approx(1_200)

    def test_interest_on_opening_balance(self):
        rows = amortize(100_000, 0.01, 12, 8_884.88)
        assert rows[0]["interest"] == pytest.approx(1_000.0)
        assert rows[0]["principal"] == pytest.approx(7_884.88)
        assert rows[-1]["balance"] == 0.0
        assert rows[-1]["cumulative_interest"] == pytest.approx(sum(r["interest"] for r in rows))

    def test_balance_never_increases(self):
        rows = amortize(500_000, 0.0075, 120, annuity_payment(500_000, 0.0075, 120), extra=1_000)
        balances = [r["balance"] for r in rows]
        assert balances == sorted(balances, reverse=True)
