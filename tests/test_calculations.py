"""
Tests for financial calculation engine.
"""

import math

import pytest
from datetime import date
from rentalcalc.calculations.irr import (
    calculate_irr,
    calculate_multiple,
    calculate_npv,
    calculate_profit,
    solve_irr,
)
from rentalcalc.calculations.amortization import (
    calculate_loan_constant,
    calculate_monthly_pmi,
    calculate_payment,
    calculate_remaining_balance,
    calculate_total_interest,
    generate_amortization_schedule,
    summarize_by_year,
)
from rentalcalc.calculations.cashflow import (
    PROJECTION_YEARS,
    calculate_month_one,
    calculate_purchase_metrics,
    project,
)
from rentalcalc.schemas import FinancingAssumptions, IncomeAssumptions, ExpenseAssumptions


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Test IRR calculation with simple cash flows."""
        # Investment of 100, returns of 110 after 1 year = 10% return
        cash_flows = [-100, 110]
        irr = calculate_irr(cash_flows)
        assert abs(irr - 0.10) < 0.001

    def test_calculate_irr_multi_period(self):
        """Test IRR with multiple periods."""
        # Investment of 100, annual returns of 20, sale of 100 at end
        cash_flows = [-100, 20, 20, 20, 20, 120]
        irr = calculate_irr(cash_flows)
        assert abs(irr - 0.20) < 0.01  # ~20% IRR

    def test_calculate_npv(self):
        """Test NPV calculation."""
        cash_flows = [-100, 50, 50, 50]
        npv = calculate_npv(cash_flows, 0.10)
        # NPV should be positive since returns exceed cost
        assert npv > 0
        assert npv == pytest.approx(-100 + 50 / 1.1 + 50 / 1.21 + 50 / 1.331)

    def test_irr_negative_returns(self):
        """Test IRR with negative return scenario."""
        cash_flows = [-100, 40, 40, 10]  # Total return < investment
        irr = calculate_irr(cash_flows)
        assert irr < 0  # Should be negative IRR

    def test_rental_hold_and_sale_converges(self):
        """Five-year hold with a sale at the end reaches NPV tolerance."""
        cash_flows = [-75000, 1000, 1000, 1000, 1000, 310000]
        result = solve_irr(cash_flows)
        assert result.converged
        assert result.iterations <= 100
        assert abs(calculate_npv(cash_flows, result.rate)) < 1e-4
        assert result.percent == pytest.approx(result.rate * 100)

    def test_no_sign_change_is_flagged(self):
        """All-positive cash flows have no IRR; result is best-effort."""
        result = solve_irr([100, 50, 50])
        assert not result.converged
        assert math.isfinite(result.rate)
        assert math.isfinite(result.npv)

    def test_strict_irr_raises_without_sign_change(self):
        """Strict IRR refuses cash flows it cannot solve."""
        with pytest.raises(ValueError):
            calculate_irr([100, 50, 50])

    def test_too_few_cash_flows(self):
        with pytest.raises(ValueError):
            solve_irr([-100])

    def test_small_budget_reports_non_convergence(self):
        """An exhausted iteration budget is never reported as exact."""
        result = solve_irr([-75000, 1000, 1000, 1000, 1000, 310000], max_iterations=1)
        assert not result.converged
        assert result.iterations == 1
        assert abs(result.npv) >= 1e-4

    def test_calculate_multiple(self):
        """Test equity multiple calculation."""
        # Invest 100, get back 50 + 100 = 1.5x
        assert calculate_multiple([-100, 50, 100]) == pytest.approx(1.5)

    def test_multiple_requires_investment(self):
        with pytest.raises(ValueError):
            calculate_multiple([50, 100])

    def test_calculate_profit(self):
        assert calculate_profit([-100, 50, 100]) == 50


class TestAmortization:
    """Test loan amortization calculations."""

    def test_calculate_payment(self):
        """Test monthly payment calculation."""
        # $240K loan at 6.5% for 30 years
        payment = calculate_payment(240000, 0.065, 360)
        assert payment == pytest.approx(1517.50, abs=1.0)

    def test_payment_satisfies_annuity_identity(self):
        """Present value of the payments equals the loan amount."""
        for principal, annual_rate, months in [
            (240000, 0.065, 360),
            (100000, 0.03, 180),
            (55000, 0.115, 60),
        ]:
            r = annual_rate / 12
            payment = calculate_payment(principal, annual_rate, months)
            growth = (1 + r) ** months
            assert principal == pytest.approx(payment * (growth - 1) / (r * growth), rel=1e-9)

    def test_zero_rate_payment(self):
        """Zero interest divides the principal evenly."""
        assert calculate_payment(240000, 0.0, 360) == 240000 / 360

    def test_zero_principal(self):
        assert calculate_payment(0, 0.065, 360) == 0.0

    def test_amortization_schedule_length(self):
        """Test amortization schedule has correct number of periods."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate=0.06,
            amortization_months=60,
        )
        assert len(schedule) == 60

    def test_amortization_final_balance(self):
        """Test that final balance is exactly zero."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate=0.06,
            amortization_months=60,
        )
        assert schedule[-1]["ending_balance"] == 0

    def test_amortization_schedule_dates(self):
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate=0.06,
            amortization_months=60,
            start_date=date(2025, 1, 31),
        )
        assert schedule[0]["date"] == "2025-01-31"
        assert schedule[1]["date"] == "2025-02-28"
        assert calculate_total_interest(schedule) > 0

    def test_remaining_balance_matches_schedule(self):
        """Closed-form balance agrees with the rolled-up schedule."""
        yearly = summarize_by_year(240000, 0.065, 360, 30)
        assert yearly[0]["ending_balance"] == pytest.approx(
            calculate_remaining_balance(240000, 0.065, 360, 12), rel=1e-9
        )
        assert calculate_remaining_balance(240000, 0.065, 360, 360) == 0.0

    def test_summary_years_after_payoff(self):
        """Years beyond the term carry no payments and no balance."""
        yearly = summarize_by_year(100000, 0.05, 120, 12)
        assert yearly[9]["ending_balance"] == 0.0
        assert yearly[10]["payment"] == 0.0
        assert yearly[11]["ending_balance"] == 0.0

    def test_loan_constant(self):
        """Annual debt service over loan amount."""
        payment = calculate_payment(240000, 0.065, 360)
        constant = calculate_loan_constant(240000, 0.065, 360)
        assert constant == pytest.approx(payment * 12 / 240000)
        assert constant == pytest.approx(0.0759, abs=1e-4)

    def test_loan_constant_no_loan(self):
        assert calculate_loan_constant(0, 0.065, 360) == 0.0

    def test_pmi_above_80_ltv(self):
        assert calculate_monthly_pmi(270000, 300000, 0.5) == pytest.approx(112.5)

    def test_no_pmi_at_80_ltv(self):
        assert calculate_monthly_pmi(240000, 300000, 0.5) == 0.0


class TestPurchaseAndMonthOne:
    """Test purchase metrics and the month-one breakdown."""

    def test_purchase_metrics(self, acquisition, financing):
        purchase = calculate_purchase_metrics(acquisition, financing)
        assert purchase.down_payment == 60000
        assert purchase.loan_amount == 240000
        assert purchase.total_cash_invested == 84000
        assert purchase.loan_to_value == pytest.approx(80.0)
        assert not purchase.has_pmi
        assert purchase.interest_rate == 6.5
        assert purchase.amortization_months == 360

    def test_month_one_breakdown(self, acquisition, financing, income, expense):
        month_one = calculate_month_one(acquisition, financing, income, expense)
        assert month_one.property_tax == pytest.approx(300)
        assert month_one.insurance == pytest.approx(100)
        assert month_one.maintenance == pytest.approx(125)
        assert month_one.capex == pytest.approx(125)
        assert month_one.management == pytest.approx(200)
        assert month_one.pmi == 0.0
        assert month_one.operating_total == pytest.approx(850)
        assert month_one.total == pytest.approx(850 + month_one.mortgage)

    def test_month_one_includes_pmi(self, acquisition, income, expense):
        financing = FinancingAssumptions(down_payment_percent=10, pmi_percent=0.5)
        month_one = calculate_month_one(acquisition, financing, income, expense)
        assert month_one.pmi == pytest.approx(112.5)
        assert month_one.operating_total == pytest.approx(850 + 112.5)


class TestProjection:
    """Test the year-by-year projection."""

    def test_projection_length(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        assert len(projection.years) == PROJECTION_YEARS
        assert [y.year for y in projection.years] == list(range(1, 31))

    def test_month_one_cash_flow(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        assert projection.effective_gross_income == pytest.approx(2375)
        expected = 2375 - 850 - projection.month_one.mortgage
        assert projection.monthly_cash_flow == pytest.approx(expected)
        assert projection.annual_cash_flow == pytest.approx(expected * 12)

    def test_first_year(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        year1 = projection.years[0]
        assert year1.gross_income == pytest.approx(30000)
        assert year1.operating_expenses == pytest.approx(10200)
        assert year1.net_operating_income == pytest.approx(18300)
        assert year1.mortgage_payment == pytest.approx(projection.month_one.mortgage * 12)
        assert year1.cash_flow == pytest.approx(18300 - year1.mortgage_payment)
        assert year1.property_value == 300000
        assert year1.equity == pytest.approx(300000 - year1.loan_balance)
        assert year1.return_on_equity == pytest.approx(year1.cash_flow / year1.equity * 100)

    def test_growth_compounds_annually(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        year3 = projection.years[2]
        assert year3.property_value == pytest.approx(300000 * 1.03 ** 2)
        assert year3.gross_income == pytest.approx(30000 * 1.02 ** 2)

    def test_flat_expenses_stay_constant(self, acquisition, financing, income):
        """Utilities, HOA and other monthly items are not grown."""
        expense = ExpenseAssumptions(
            property_tax_rate_percent=0,
            insurance_annual=0,
            maintenance_percent=0,
            capex_percent=0,
            management_percent=0,
            utilities_monthly=50,
            hoa_monthly=100,
            other_expenses_monthly=25,
            annual_expense_growth_percent=10,
        )
        projection = project(acquisition, financing, income, expense, 3.0)
        for year in projection.years:
            assert year.operating_expenses == pytest.approx(2100)

    def test_monotonic_growth(self, acquisition, financing, income, expense):
        """Positive growth rates give strictly increasing value and income."""
        projection = project(acquisition, financing, income, expense, 3.0)
        for prev, cur in zip(projection.years, projection.years[1:]):
            assert cur.property_value > prev.property_value
            assert cur.gross_income > prev.gross_income

    def test_zero_growth_is_constant(self, acquisition, financing, expense):
        income = IncomeAssumptions(monthly_rent=2500, annual_rent_growth_percent=0)
        projection = project(acquisition, financing, income, expense, 0.0)
        for year in projection.years:
            assert year.property_value == 300000
            assert year.gross_income == 30000

    def test_loan_paid_off_at_term(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        final = projection.years[29]
        assert final.loan_balance == 0.0
        assert final.equity == final.property_value
        assert all(y.loan_balance >= 0 for y in projection.years)

    def test_short_term_loan_stops_payments(self, acquisition, income, expense):
        financing = FinancingAssumptions(loan_term_years=15)
        projection = project(acquisition, financing, income, expense, 3.0)
        year15, year16 = projection.years[14], projection.years[15]
        assert year15.loan_balance == 0.0
        assert year15.equity == year15.property_value
        assert year16.mortgage_payment == 0.0
        assert year16.cash_flow == pytest.approx(year16.net_operating_income)

    def test_principal_reduces_balance(self, acquisition, financing, income, expense):
        projection = project(acquisition, financing, income, expense, 3.0)
        year1, year2 = projection.years[0], projection.years[1]
        assert year1.principal_paid + year1.interest_paid == pytest.approx(year1.mortgage_payment)
        assert year2.loan_balance == pytest.approx(year1.loan_balance - year2.principal_paid)

    def test_zero_rate_loan(self, acquisition, income, expense):
        financing = FinancingAssumptions(interest_rate=0)
        projection = project(acquisition, financing, income, expense, 3.0)
        assert projection.month_one.mortgage == 240000 / 360
        assert projection.years[0].interest_paid == 0.0
        assert projection.years[29].loan_balance == 0.0

    def test_all_cash_purchase(self, acquisition, income, expense):
        """No loan means no mortgage and equity equal to value."""
        financing = FinancingAssumptions(down_payment_percent=100)
        projection = project(acquisition, financing, income, expense, 3.0)
        assert projection.month_one.mortgage == 0.0
        assert projection.years[0].loan_balance == 0.0
        assert projection.years[0].equity == 300000

    def test_invalid_appreciation(self, acquisition, financing, income, expense):
        with pytest.raises(ValueError):
            project(acquisition, financing, income, expense, -100)
