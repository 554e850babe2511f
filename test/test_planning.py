# Test type: unit
# Validation: retirement projection, mutual fund lumpsum/SIP valuation, break-even analysis
# Command: pytest test/test_planning.py -v

import pytest

from fincalc.calculators.planning import (
    calculate_break_even,
    calculate_mutual_fund,
    calculate_retirement,
)
from fincalc.errors import MSG_NO_MARGIN, MSG_PERIOD_TOO_LONG


# ---------------------------------------------------------------------------
# Retirement
# ---------------------------------------------------------------------------

class TestRetirement:
    def test_zero_rate_shortfall(self):
        result = calculate_retirement(
            {
                "currentAge": 30,
                "retirementAge": 60,
                "currentSavings": 100_000,
                "monthlyContribution": 1_000,
                "annualReturnRate": 0,
                "retirementGoal": 500_000,
            }
        )
        assert result.years_to_retirement == 30
        assert result.projected_savings == 460_000.0
        assert result.total_contributions == 460_000.0
        assert result.total_growth == 0.0
        assert result.shortfall == 40_000.0
        assert result.goal_met is False

    def test_savings_compound_monthly(self):
        result = calculate_retirement(
            {"currentAge": 40, "retirementAge": 41, "currentSavings": 100_000, "annualReturnRate": 12}
        )
        assert result.future_value_of_savings == pytest.approx(112_682.50, abs=0.01)
        assert result.future_value_of_contributions == 0.0

    def test_goal_met(self):
        result = calculate_retirement(
            {"currentAge": 30, "retirementAge": 60, "monthlyContribution": 10_000, "annualReturnRate": 10, "retirementGoal": 1_000_000}
        )
        assert result.goal_met is True
        assert result.shortfall == 0.0

    def test_no_goal_is_never_met(self):
        result = calculate_retirement({"currentAge": 30, "retirementAge": 60, "monthlyContribution": 1_000})
        assert result.goal_met is False
        assert result.shortfall == 0.0

    def test_retirement_age_forced_past_current(self):
        result = calculate_retirement({"currentAge": 50, "retirementAge": 45})
        assert result.retirement_age == 51
        assert result.years_to_retirement == 1

    def test_unparseable_ages_use_defaults(self):
        result = calculate_retirement({"currentAge": "abc", "retirementAge": "xyz"})
        assert result.current_age == 25
        assert result.retirement_age == 65
        assert result.years_to_retirement == 40

    def test_period_cap(self, monkeypatch):
        monkeypatch.setenv("FINCALC_MAX_MONTHS", "120")
        result = calculate_retirement({"currentAge": 30, "retirementAge": 60, "monthlyContribution": 1_000})
        assert result.error == MSG_PERIOD_TOO_LONG
        assert result.projected_savings == 0.0


# ---------------------------------------------------------------------------
# Mutual fund
# ---------------------------------------------------------------------------

_LUMPSUM = {
    "investmentType": "lumpsum",
    "initialInvestment": 100_000,
    "purchaseNav": 10,
    "currentNav": 15,
    "startDate": "2020-01-01",
    "endDate": "2023-01-01",
}


class TestMutualFundLumpsum:
    def test_valuation(self):
        result = calculate_mutual_fund(_LUMPSUM)
        assert result.total_investment == 100_000.0
        assert result.units == 10_000.0
        assert result.current_value == 150_000.0
        assert result.gains == 50_000.0
        assert result.absolute_returns == 50.0
        assert result.cagr == pytest.approx(14.47, abs=0.05)
        assert result.duration_years == pytest.approx(3.0, abs=0.01)
        assert result.months_invested == 0

    def test_tax_on_gains(self):
        result = calculate_mutual_fund({**_LUMPSUM, "taxRate": 10})
        assert result.tax_amount == 5_000.0
        assert result.post_tax_value == 145_000.0

    def test_loss_is_untaxed(self):
        result = calculate_mutual_fund({**_LUMPSUM, "currentNav": 8, "taxRate": 10})
        assert result.gains == -20_000.0
        assert result.tax_amount == 0.0
        assert result.post_tax_value == 80_000.0

    def test_entry_load_trims_units(self):
        result = calculate_mutual_fund({**_LUMPSUM, "entryLoad": 1})
        assert result.units == 9_900.0

    def test_exit_load_trims_value(self):
        result = calculate_mutual_fund({**_LUMPSUM, "exitLoad": 1})
        assert result.current_value == 148_500.0

    def test_zero_nav_is_safe(self):
        result = calculate_mutual_fund({**_LUMPSUM, "purchaseNav": 0})
        assert result.error is None
        assert result.units == 0.0


class TestMutualFundSIP:
    _SIP = {
        "investmentType": "SIP",
        "monthlyInvestment": 10_000,
        "purchaseNav": 10,
        "currentNav": 10,
        "startDate": "2022-01-01",
        "endDate": "2023-01-01",
    }

    def test_one_year(self):
        result = calculate_mutual_fund(self._SIP)
        assert result.months_invested == 12
        assert result.total_investment == 120_000.0
        assert result.units == 12_000.0
        assert result.gains == 0.0

    def test_counts_completed_months(self):
        result = calculate_mutual_fund({**self._SIP, "startDate": "2022-01-15", "endDate": "2022-07-10"})
        assert result.months_invested == 5

    @pytest.mark.parametrize(
        "start, end, months",
        [("2023-01-30", "2023-02-28", 0), ("2023-01-31", "2023-04-30", 2)],
    )
    def test_short_month_ends(self, start, end, months):
        result = calculate_mutual_fund({**self._SIP, "startDate": start, "endDate": end})
        assert result.months_invested == months
        assert result.total_investment == months * 10_000.0

    def test_as_of_stands_in_for_end_date(self):
        inputs = {k: v for k, v in self._SIP.items() if k != "endDate"}
        result = calculate_mutual_fund({**inputs, "asOf": "2023-01-01"})
        assert result.months_invested == 12

    def test_garbage_start_date(self):
        result = calculate_mutual_fund({**self._SIP, "startDate": "not a date"})
        assert result.months_invested == 0
        assert result.duration_years == 0.0
        assert result.cagr == 0.0


# ---------------------------------------------------------------------------
# Break-even
# ---------------------------------------------------------------------------

class TestBreakEven:
    _INPUTS = {
        "fixedCost": 10_000,
        "variableCostPerUnit": 20,
        "sellingPricePerUnit": 30,
        "targetProfit": 5_000,
        "currentSales": 1_500,
    }

    def test_analysis(self):
        result = calculate_break_even(self._INPUTS)
        assert result.contribution_margin == 10.0
        assert result.contribution_margin_ratio == 33.33
        assert result.break_even_units == 1_000.0
        assert result.break_even_revenue == 30_000.0
        assert result.units_for_target_profit == 1_500.0
        assert result.revenue_for_target_profit == 45_000.0
        assert result.current_revenue == 45_000.0
        assert result.current_total_cost == 40_000.0
        assert result.current_profit == 5_000.0
        assert result.safety_margin == 33.33
        assert result.additional_units_needed == 0.0
        assert result.additional_units_for_profit == 0.0

    def test_below_break_even(self):
        result = calculate_break_even({**self._INPUTS, "currentSales": 400})
        assert result.additional_units_needed == 600.0
        assert result.additional_units_for_profit == 1_100.0
        assert result.safety_margin == -150.0

    def test_no_margin(self):
        result = calculate_break_even({**self._INPUTS, "sellingPricePerUnit": 20})
        assert result.error == MSG_NO_MARGIN
        assert result.break_even_units == 0.0
        assert result.current_profit == -10_000.0
