"""
Rent Estimation

Estimates monthly rent for a listing, in order of preference:
1. The listing provider's own rent estimate, with confidence based on how
   many comparables support it
2. A similarity- and distance-weighted average of comparable rents
3. A rule-of-thumb model by property type, size and value

The comparables lookup is supplied by the caller; it is queried exactly
once per estimate. The weights and confidence constants below are product
heuristics and are expected to be tuned.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple, Union

from rentalcalc.calculations.rules import EstimateSource
from rentalcalc.comparables import ComparableProperty, ComparablesLookup
from rentalcalc.schemas import PropertySnapshot

logger = logging.getLogger(__name__)

# Provider estimate confidence tiers
PROVIDER_CONFIDENCE = 0.90
PROVIDER_CONFIDENCE_MANY_COMPS = 0.95  # >= 5 comparables
PROVIDER_CONFIDENCE_SOME_COMPS = 0.90  # >= 3 comparables
PROVIDER_CONFIDENCE_FEW_COMPS = 0.85

# Comparable weighting
ROOM_SIMILARITY_SPAN = 3.0
DISTANCE_DECAY = 5.0

# Comparable-based confidence
COMPS_BASE_CONFIDENCE = 0.5
COMPS_PER_CONFIDENCE_POINT = 20.0
COMPS_MAX_CONFIDENCE = 0.9
NEAR_DISTANCE_MILES = 0.1
NEAR_DISTANCE_BONUS = 0.2
CLOSE_DISTANCE_MILES = 0.25
CLOSE_DISTANCE_BONUS = 0.1

# Rule-of-thumb model
BASE_RENT_BY_TYPE = {
    "SINGLE_FAMILY": 1500.0,
    "MULTI_FAMILY": 1200.0,
    "CONDO": 1300.0,
    "APARTMENT": 1100.0,
}
DEFAULT_BASE_RENT = 1200.0
BASELINE_BEDROOMS = 2
BASELINE_BATHROOMS = 1
RENT_PER_BEDROOM = 200.0
RENT_PER_BATHROOM = 150.0
BASELINE_SQFT = 1200.0
RENT_PER_SQFT = 1.5
ANNUAL_RENT_TO_VALUE = 0.08
FALLBACK_CONFIDENCE = 0.6

LookupLike = Union[ComparablesLookup, Callable[[PropertySnapshot], Sequence[ComparableProperty]]]


@dataclass(frozen=True)
class RentEstimate:
    """Estimated monthly rent with its provenance."""

    estimated_rent: float
    source: EstimateSource
    confidence_score: float  # 0.0 - 1.0
    comparables: Tuple[ComparableProperty, ...] = field(default_factory=tuple)


def _find_comparables(lookup: LookupLike, subject: PropertySnapshot) -> List[ComparableProperty]:
    find = getattr(lookup, "find_comparables", lookup)
    comps = list(find(subject))
    comps.sort(key=lambda c: c.distance_miles)
    return comps


def comparable_weight(subject: PropertySnapshot, comp: ComparableProperty) -> float:
    """
    Weight of one comparable: mean similarity times distance decay.

    Each similarity is 1 - |difference| / span, floored at zero. A comparable
    half a mile away gets a distance weight of about 0.29.
    """
    bedroom_similarity = max(0.0, 1 - abs(subject.bedrooms - comp.bedrooms) / ROOM_SIMILARITY_SPAN)
    bathroom_similarity = max(0.0, 1 - abs(subject.bathrooms - comp.bathrooms) / ROOM_SIMILARITY_SPAN)
    if subject.square_footage > 0:
        sqft_similarity = max(
            0.0, 1 - abs(subject.square_footage - comp.square_footage) / subject.square_footage
        )
    else:
        sqft_similarity = 0.0

    distance_weight = 1 / (1 + comp.distance_miles * DISTANCE_DECAY)
    return (bedroom_similarity + bathroom_similarity + sqft_similarity) / 3 * distance_weight


def weighted_comparable_rent(subject: PropertySnapshot, comparables: Sequence[ComparableProperty]) -> float:
    """Weighted average rent of the comparables (unrounded)."""
    if not comparables:
        raise ValueError("At least one comparable required")

    weights = [comparable_weight(subject, comp) for comp in comparables]
    total_weight = sum(weights)
    if total_weight <= 0:
        return sum(comp.rent for comp in comparables) / len(comparables)

    return sum(comp.rent * w for comp, w in zip(comparables, weights)) / total_weight


def comparables_confidence(comparables: Sequence[ComparableProperty]) -> float:
    """Confidence of a comparable-based estimate, capped at 0.9."""
    confidence = COMPS_BASE_CONFIDENCE + len(comparables) / COMPS_PER_CONFIDENCE_POINT

    avg_distance = sum(comp.distance_miles for comp in comparables) / len(comparables)
    if avg_distance < NEAR_DISTANCE_MILES:
        confidence += NEAR_DISTANCE_BONUS
    elif avg_distance < CLOSE_DISTANCE_MILES:
        confidence += CLOSE_DISTANCE_BONUS

    return min(confidence, COMPS_MAX_CONFIDENCE)


def provider_confidence(comparable_count: int) -> float:
    """Confidence of a provider estimate given how many comparables back it."""
    if comparable_count == 0:
        return PROVIDER_CONFIDENCE
    if comparable_count >= 5:
        return PROVIDER_CONFIDENCE_MANY_COMPS
    if comparable_count >= 3:
        return PROVIDER_CONFIDENCE_SOME_COMPS
    return PROVIDER_CONFIDENCE_FEW_COMPS


def rule_of_thumb_rent(subject: PropertySnapshot) -> float:
    """
    Rent from property characteristics alone, for when there are no comparables.

    Starts from a base rent per property type and adjusts for bedrooms,
    bathrooms and size relative to a 2bd/1ba, 1200 sqft baseline. With a
    value estimate, blends 50/50 with 8% of value per year.
    """
    rent = BASE_RENT_BY_TYPE.get(subject.property_type, DEFAULT_BASE_RENT)
    rent += (subject.bedrooms - BASELINE_BEDROOMS) * RENT_PER_BEDROOM
    rent += (subject.bathrooms - BASELINE_BATHROOMS) * RENT_PER_BATHROOM
    rent += (subject.square_footage - BASELINE_SQFT) * RENT_PER_SQFT / 100

    if subject.value_estimate:
        value_based_rent = subject.value_estimate * ANNUAL_RENT_TO_VALUE / 12
        rent = (rent + value_based_rent) / 2

    return float(round(rent))


def estimate_rent(subject: PropertySnapshot, comparables_lookup: LookupLike) -> RentEstimate:
    """
    Estimate monthly rent for a listing.

    Args:
        subject: The listing to estimate
        comparables_lookup: Object with find_comparables(subject), or a
            plain callable taking the subject, returning comparables

    Returns:
        RentEstimate with comparables sorted nearest first
    """
    comparables = _find_comparables(comparables_lookup, subject)

    if subject.provider_rent_estimate:
        return RentEstimate(
            estimated_rent=subject.provider_rent_estimate,
            source=EstimateSource.provider,
            confidence_score=provider_confidence(len(comparables)),
            comparables=tuple(comparables),
        )

    if comparables:
        estimated = float(round(weighted_comparable_rent(subject, comparables)))
        logger.debug("Rent for %s estimated from %d comparables", subject.address, len(comparables))
        return RentEstimate(
            estimated_rent=estimated,
            source=EstimateSource.custom,
            confidence_score=comparables_confidence(comparables),
            comparables=tuple(comparables),
        )

    logger.info("No comparables for %s, using rule-of-thumb rent", subject.address or "listing")
    return RentEstimate(
        estimated_rent=rule_of_thumb_rent(subject),
        source=EstimateSource.custom,
        confidence_score=FALLBACK_CONFIDENCE,
    )
