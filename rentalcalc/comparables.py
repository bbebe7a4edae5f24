# rentalcalc/comparables.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from rentalcalc.calculations.geo import bounding_box, distance_miles
from rentalcalc.config import get_settings
from rentalcalc.schemas import PropertySnapshot


@dataclass(frozen=True)
class ComparableProperty:
    address: str
    rent: float
    bedrooms: float
    bathrooms: float
    square_footage: float
    distance_miles: float


# ----------------------------
# Comparable lookup interface
# ----------------------------

class ComparablesLookup(Protocol):
    """Range/geo query over a property store, supplied by the caller."""

    def find_comparables(self, subject: PropertySnapshot) -> list[ComparableProperty]:
        ...


def listing_rent(listing: PropertySnapshot) -> float | None:
    """Rent figure of a stored listing: a non-zero provider estimate first, then our own."""
    return listing.provider_rent_estimate or listing.custom_rent_estimate


# ----------------------------
# In-memory implementation
# ----------------------------

class InMemoryComparablesLookup:
    """
    Bounding-box + attribute filter over an in-memory list of listings.

    A listing is comparable when it lies inside the search box around the
    subject, is within one bedroom and one bathroom of it, is within the
    square-footage tolerance, has the same property type, and carries a
    rent figure. Results are the nearest `limit` matches, nearest first.
    """

    def __init__(
        self,
        listings: Iterable[PropertySnapshot],
        *,
        search_degrees: float | None = None,
        sqft_tolerance: float | None = None,
        limit: int | None = None,
    ) -> None:
        settings = get_settings()
        self._listings: list[PropertySnapshot] = list(listings)
        self.search_degrees = settings.comparable_search_degrees if search_degrees is None else search_degrees
        self.sqft_tolerance = settings.comparable_sqft_tolerance if sqft_tolerance is None else sqft_tolerance
        self.limit = settings.max_comparables if limit is None else limit

    def _matches(self, subject: PropertySnapshot, listing: PropertySnapshot) -> bool:
        if listing is subject or not listing.has_coordinates:
            return False

        min_lat, max_lat, min_lon, max_lon = bounding_box(
            subject.latitude, subject.longitude, self.search_degrees
        )
        if not (min_lat <= listing.latitude <= max_lat and min_lon <= listing.longitude <= max_lon):
            return False

        if abs(listing.bedrooms - subject.bedrooms) > 1:
            return False
        if abs(listing.bathrooms - subject.bathrooms) > 1:
            return False

        low_sqft = subject.square_footage * (1 - self.sqft_tolerance)
        high_sqft = subject.square_footage * (1 + self.sqft_tolerance)
        if not (low_sqft <= listing.square_footage <= high_sqft):
            return False

        return listing.property_type == subject.property_type and listing_rent(listing) is not None

    def find_comparables(self, subject: PropertySnapshot) -> list[ComparableProperty]:
        if not subject.has_coordinates:
            return []

        comps = [
            ComparableProperty(
                address=listing.address,
                rent=listing_rent(listing),
                bedrooms=listing.bedrooms,
                bathrooms=listing.bathrooms,
                square_footage=listing.square_footage,
                distance_miles=distance_miles(
                    subject.latitude, subject.longitude, listing.latitude, listing.longitude
                ),
            )
            for listing in self._listings
            if self._matches(subject, listing)
        ]
        comps.sort(key=lambda c: c.distance_miles)
        return comps[: self.limit]
