"""
Tests for input validation and settings.
"""

import pytest
from pydantic import ValidationError

from rentalcalc.config import Settings, get_settings
from rentalcalc.schemas import (
    AcquisitionInputs,
    ExpenseAssumptions,
    FinancingAssumptions,
    IncomeAssumptions,
    PropertySnapshot,
)


class TestInputValidation:
    """Out-of-range assumptions are rejected at construction."""

    @pytest.mark.parametrize("price", [0, -1])
    def test_price_must_be_positive(self, price):
        with pytest.raises(ValidationError):
            AcquisitionInputs(price=price)

    def test_negative_costs(self):
        with pytest.raises(ValidationError):
            AcquisitionInputs(price=100000, closing_costs=-1)

    @pytest.mark.parametrize("down", [-5, 101])
    def test_down_payment_range(self, down):
        with pytest.raises(ValidationError):
            FinancingAssumptions(down_payment_percent=down)

    def test_negative_interest_rate(self):
        with pytest.raises(ValidationError):
            FinancingAssumptions(interest_rate=-0.5)

    def test_loan_term_must_be_positive(self):
        with pytest.raises(ValidationError):
            FinancingAssumptions(loan_term_years=0)

    def test_vacancy_range(self):
        with pytest.raises(ValidationError):
            IncomeAssumptions(vacancy_rate_percent=120)

    def test_growth_above_minus_100(self):
        with pytest.raises(ValidationError):
            IncomeAssumptions(annual_rent_growth_percent=-100)
        assert IncomeAssumptions(annual_rent_growth_percent=-5).annual_rent_growth_percent == -5

    def test_expense_percent_range(self):
        with pytest.raises(ValidationError):
            ExpenseAssumptions(management_percent=150)

    def test_defaults(self):
        financing = FinancingAssumptions()
        assert financing.down_payment_percent == 20
        assert financing.interest_rate == 6.5
        assert financing.loan_term_years == 30
        expense = ExpenseAssumptions()
        assert expense.property_tax_rate_percent == 1.2
        assert expense.insurance_annual == 1200

    def test_frozen(self, income):
        with pytest.raises(ValidationError):
            income.monthly_rent = 3000


class TestPropertySnapshot:
    """Test listing snapshots."""

    def test_coordinates_must_be_paired(self):
        with pytest.raises(ValidationError):
            PropertySnapshot(price=100000, bedrooms=2, bathrooms=1, square_footage=900, latitude=39.7)

    def test_latitude_range(self):
        with pytest.raises(ValidationError):
            PropertySnapshot(
                price=100000, bedrooms=2, bathrooms=1, square_footage=900,
                latitude=95, longitude=0,
            )

    def test_has_coordinates(self, subject):
        assert subject.has_coordinates
        bare = PropertySnapshot(price=100000, bedrooms=2, bathrooms=1, square_footage=900)
        assert not bare.has_coordinates
        assert bare.property_type == "SINGLE_FAMILY"


class TestSettings:
    """Test configuration loading."""

    def test_defaults(self):
        settings = Settings()
        assert settings.default_appreciation_percent == 3.0
        assert settings.sale_cost_percent == 6.0
        assert settings.one_percent_threshold == 1.0
        assert settings.max_comparables == 10
        assert settings.irr_max_iterations == 100

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RENTALCALC_MAX_COMPARABLES", "5")
        assert get_settings().max_comparables == 5

    def test_cached(self):
        assert get_settings() is get_settings()
