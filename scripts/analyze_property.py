#!/usr/bin/env python3
"""
Analyze a sample rental property.

Runs the rent estimate, 1% rule classification and 30-year forecast for a
$300,000 single-family listing and prints a summary.

Usage:
    python scripts/analyze_property.py
"""

import sys
import os
import logging

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rentalcalc import (
    AcquisitionInputs,
    FinancingAssumptions,
    IncomeAssumptions,
    InMemoryComparablesLookup,
    PropertySnapshot,
    classify_property,
    estimate_rent,
    forecast,
)
from rentalcalc.config import get_settings


SUBJECT = PropertySnapshot(
    address="412 Elm St",
    price=300000,
    bedrooms=3,
    bathrooms=2,
    square_footage=1800,
    latitude=39.7392,
    longitude=-104.9903,
)

NEARBY_LISTINGS = [
    PropertySnapshot(
        address="418 Elm St", price=310000, bedrooms=3, bathrooms=2,
        square_footage=1750, latitude=39.7395, longitude=-104.9899,
        provider_rent_estimate=2450,
    ),
    PropertySnapshot(
        address="120 Oak Ave", price=295000, bedrooms=3, bathrooms=1,
        square_footage=1650, latitude=39.7410, longitude=-104.9920,
        provider_rent_estimate=2300,
    ),
    PropertySnapshot(
        address="77 Pine Ct", price=330000, bedrooms=4, bathrooms=2,
        square_footage=1950, latitude=39.7370, longitude=-104.9880,
        custom_rent_estimate=2650,
    ),
]


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    estimate = estimate_rent(SUBJECT, InMemoryComparablesLookup(NEARBY_LISTINGS))
    print(f"Estimated rent: ${estimate.estimated_rent:,.0f} "
          f"({estimate.source.value}, confidence {estimate.confidence_score:.2f})")
    for comp in estimate.comparables:
        print(f"  {comp.address}: ${comp.rent:,.0f} at {comp.distance_miles:.2f} mi")

    rules = classify_property(SUBJECT.price, estimate.estimated_rent, SUBJECT.square_footage)
    print(f"Rent/value: {rules.rent_to_value_ratio:.3f}% "
          f"(meets 1% rule: {rules.meets_rent_rule})")
    print(f"Sqft/value: {rules.sqft_to_value_ratio:.3f}% "
          f"(meets 1% rule: {rules.meets_sqft_rule})")

    result = forecast(
        AcquisitionInputs(price=SUBJECT.price, closing_costs=9000, renovation_costs=15000),
        FinancingAssumptions(down_payment_percent=20, interest_rate=6.5, loan_term_years=30),
        IncomeAssumptions(monthly_rent=estimate.estimated_rent),
    )

    print()
    print(f"Cash invested:      ${result.purchase.total_cash_invested:,.2f}")
    print(f"Mortgage payment:   ${result.monthly_expenses.mortgage:,.2f}/mo")
    print(f"Loan interest:      ${result.total_interest:,.2f} over the term")
    print(f"Monthly cash flow:  ${result.monthly_cash_flow:,.2f}")
    print(f"Cap rate:           {result.returns.cap_rate:.2f}%")
    print(f"Cash-on-cash:       {result.returns.cash_on_cash_return:.2f}%")
    print(f"IRR 5/10/15 yr:     {result.five_year_irr:.2f}% / "
          f"{result.ten_year_irr:.2f}% / {result.fifteen_year_irr:.2f}%")
    if not result.irr_converged:
        print("  (IRR search did not converge; values are best-effort)")
    print(f"30-yr ROI:          {result.totals.return_on_investment:.1f}%")


if __name__ == "__main__":
    main()
