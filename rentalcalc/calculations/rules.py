"""
Investment Rule Classification

The "1% rules" used to screen listings:
- Rent rule: monthly rent should be at least 1% of purchase price
- Sqft rule: square footage should be at least 1% of purchase price
"""

import enum
from dataclasses import dataclass
from typing import Optional

from rentalcalc.config import get_settings
from rentalcalc.schemas import PropertySnapshot

ONE_PERCENT_THRESHOLD = 1.0


class EstimateSource(str, enum.Enum):
    """Where a rent figure came from."""
    provider = "provider"
    custom = "custom"


@dataclass(frozen=True)
class RuleClassification:
    """Ratios (in percent) and rule flags for one property."""

    rent_to_value_ratio: float
    sqft_to_value_ratio: float
    meets_rent_rule: bool
    meets_sqft_rule: bool
    meets_combined_rules: bool


@dataclass(frozen=True)
class ListingClassification:
    """Rule classification of a sourced listing, with the rent it used."""

    rent_estimate: Optional[float]
    estimate_source: EstimateSource
    rules: RuleClassification


def rent_to_value_ratio(price: float, monthly_rent: Optional[float]) -> float:
    """Monthly rent as a percent of price; 0 when rent is unknown."""
    if not monthly_rent:
        return 0.0
    return monthly_rent / price * 100


def sqft_to_value_ratio(price: float, square_footage: float) -> float:
    """Square footage as a percent of price."""
    return square_footage / price * 100


def classify_property(
    price: float,
    rent_estimate: Optional[float],
    square_footage: float,
    threshold: float = ONE_PERCENT_THRESHOLD,
) -> RuleClassification:
    """
    Classify a property against the 1% rules.

    A ratio exactly at the threshold satisfies the rule.

    Args:
        price: Purchase/list price
        rent_estimate: Monthly rent, or None if no estimate exists
        square_footage: Living area in square feet
        threshold: Rule threshold in percent (default 1.0)

    Raises:
        ValueError: If price is not positive
    """
    if price <= 0:
        raise ValueError("price must be positive")

    rent_ratio = rent_to_value_ratio(price, rent_estimate)
    sqft_ratio = sqft_to_value_ratio(price, square_footage)
    meets_rent = rent_ratio >= threshold
    meets_sqft = sqft_ratio >= threshold

    return RuleClassification(
        rent_to_value_ratio=rent_ratio,
        sqft_to_value_ratio=sqft_ratio,
        meets_rent_rule=meets_rent,
        meets_sqft_rule=meets_sqft,
        meets_combined_rules=meets_rent and meets_sqft,
    )


def classify_listing(snapshot: PropertySnapshot) -> ListingClassification:
    """
    Classify a sourced listing before it is stored.

    The provider's rent estimate takes precedence over one computed by
    this engine.
    """
    if snapshot.provider_rent_estimate:
        rent = snapshot.provider_rent_estimate
        source = EstimateSource.provider
    else:
        rent = snapshot.custom_rent_estimate
        source = EstimateSource.custom

    rules = classify_property(
        snapshot.price,
        rent,
        snapshot.square_footage,
        threshold=get_settings().one_percent_threshold,
    )
    return ListingClassification(rent_estimate=rent, estimate_source=source, rules=rules)
