"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rentalcalc.config import get_settings
from rentalcalc.schemas import (
    AcquisitionInputs,
    ExpenseAssumptions,
    FinancingAssumptions,
    IncomeAssumptions,
    PropertySnapshot,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "scenario: end-to-end forecast scenarios")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes in a test do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# $300,000 single-family rental with the calculator's default assumptions

@pytest.fixture
def acquisition():
    return AcquisitionInputs(price=300000, closing_costs=9000, renovation_costs=15000)


@pytest.fixture
def financing():
    return FinancingAssumptions(
        down_payment_percent=20,
        interest_rate=6.5,
        loan_term_years=30,
        loan_points=0,
        pmi_percent=0.5,
    )


@pytest.fixture
def income():
    return IncomeAssumptions(
        monthly_rent=2500,
        other_income=0,
        annual_rent_growth_percent=2,
        vacancy_rate_percent=5,
    )


@pytest.fixture
def expense():
    return ExpenseAssumptions(
        property_tax_rate_percent=1.2,
        property_tax_annual_increase_percent=2,
        insurance_annual=1200,
        insurance_annual_increase_percent=3,
        maintenance_percent=5,
        capex_percent=5,
        management_percent=8,
        utilities_monthly=0,
        hoa_monthly=0,
        other_expenses_monthly=0,
        annual_expense_growth_percent=2,
    )


@pytest.fixture
def subject():
    """Listing used as the subject of rent estimates."""
    return PropertySnapshot(
        address="412 Elm St",
        price=300000,
        bedrooms=3,
        bathrooms=2,
        square_footage=2000,
        property_type="SINGLE_FAMILY",
        latitude=39.7392,
        longitude=-104.9903,
    )
