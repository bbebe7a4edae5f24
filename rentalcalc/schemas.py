"""
Input schemas for the calculation engine.

All percentages are expressed as percent values (6.5 = 6.5%), matching the
way the assumptions are entered by users. Models are frozen: a computation
never mutates its inputs.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AcquisitionInputs(BaseModel):
    """Purchase of the property."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(..., gt=0, description="Purchase price")
    closing_costs: float = Field(default=0.0, ge=0)
    renovation_costs: float = Field(default=0.0, ge=0)
    after_repair_value: Optional[float] = Field(default=None, ge=0)


class FinancingAssumptions(BaseModel):
    """Mortgage terms."""

    model_config = ConfigDict(frozen=True)

    down_payment_percent: float = Field(default=20.0, ge=0, le=100)
    interest_rate: float = Field(default=6.5, ge=0, description="Annual rate in percent")
    loan_term_years: int = Field(default=30, gt=0)
    loan_points: float = Field(default=0.0, ge=0)
    pmi_percent: float = Field(default=0.5, ge=0)


class IncomeAssumptions(BaseModel):
    """Rental income and its growth."""

    model_config = ConfigDict(frozen=True)

    monthly_rent: float = Field(default=0.0, ge=0)
    other_income: float = Field(default=0.0, ge=0)
    annual_rent_growth_percent: float = Field(default=2.0, gt=-100)
    vacancy_rate_percent: float = Field(default=5.0, ge=0, le=100)


class ExpenseAssumptions(BaseModel):
    """Operating expenses.

    Maintenance, capex and management are percentages of monthly rent; the
    remaining recurring items are flat monthly amounts.
    """

    model_config = ConfigDict(frozen=True)

    # Property tax (percent of purchase price per year)
    property_tax_rate_percent: float = Field(default=1.2, ge=0)
    property_tax_annual_increase_percent: float = Field(default=2.0, gt=-100)

    # Insurance
    insurance_annual: float = Field(default=1200.0, ge=0)
    insurance_annual_increase_percent: float = Field(default=3.0, gt=-100)

    # Percent of rent
    maintenance_percent: float = Field(default=5.0, ge=0, le=100)
    capex_percent: float = Field(default=5.0, ge=0, le=100)
    management_percent: float = Field(default=8.0, ge=0, le=100)

    # Flat monthly
    utilities_monthly: float = Field(default=0.0, ge=0)
    hoa_monthly: float = Field(default=0.0, ge=0)
    other_expenses_monthly: float = Field(default=0.0, ge=0)

    # Not applied by the projection; flat monthly items stay constant
    annual_expense_growth_percent: float = Field(default=2.0, gt=-100)


class PropertySnapshot(BaseModel):
    """A sourced listing, as used for rule classification and rent estimation."""

    model_config = ConfigDict(frozen=True)

    price: float = Field(..., gt=0)
    bedrooms: float = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    square_footage: float = Field(..., ge=0)
    property_type: str = "SINGLE_FAMILY"

    address: str = ""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    # Estimates sourced from the listing provider
    provider_rent_estimate: Optional[float] = Field(default=None, ge=0)
    value_estimate: Optional[float] = Field(default=None, ge=0)

    # Rent previously estimated by this engine
    custom_rent_estimate: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "PropertySnapshot":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
