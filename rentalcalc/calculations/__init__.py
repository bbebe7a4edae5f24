"""
Financial Calculation Engine

Core calculation modules for rental property investment analysis.
All calculations are pure functions of their inputs.
"""

from rentalcalc.calculations import (
    amortization,
    cashflow,
    forecast,
    geo,
    irr,
    rent_estimate,
    returns,
    rules,
)

__all__ = [
    "amortization",
    "cashflow",
    "forecast",
    "geo",
    "irr",
    "rent_estimate",
    "returns",
    "rules",
]
