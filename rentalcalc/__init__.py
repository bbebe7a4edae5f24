"""
Rental Investment Calculator

Estimates rental property returns and screens listings against the 1% rules.
"""

from rentalcalc.calculations.forecast import ForecastResult, forecast
from rentalcalc.calculations.rent_estimate import RentEstimate, estimate_rent
from rentalcalc.calculations.rules import (
    EstimateSource,
    RuleClassification,
    classify_listing,
    classify_property,
)
from rentalcalc.comparables import (
    ComparableProperty,
    ComparablesLookup,
    InMemoryComparablesLookup,
)
from rentalcalc.schemas import (
    AcquisitionInputs,
    ExpenseAssumptions,
    FinancingAssumptions,
    IncomeAssumptions,
    PropertySnapshot,
)

__version__ = "0.1.0"

__all__ = [
    "AcquisitionInputs",
    "ComparableProperty",
    "ComparablesLookup",
    "EstimateSource",
    "ExpenseAssumptions",
    "FinancingAssumptions",
    "ForecastResult",
    "InMemoryComparablesLookup",
    "IncomeAssumptions",
    "PropertySnapshot",
    "RentEstimate",
    "RuleClassification",
    "classify_listing",
    "classify_property",
    "estimate_rent",
    "forecast",
]
