"""
Data Models.

Defines the value objects that flow through the discovery pipeline:

- SearchRequest: Center, radius and keyword set for one discovery call
- VenueCandidate: Raw provider record, lives only within one call
- Venue: Normalized record consumed by the map and list views
- ExclusionRules: Category and name denylist
- PartialFailure / DiscoveryResult: Outcome of a discovery call

Example:
    from sweetspot.models import LatLng, SearchRequest

    request = SearchRequest(
        center=LatLng(lat=35.6812, lng=139.7671),
        radius_meters=3000,
        keywords=["tiramisu", "patisserie"],
    )
"""

from sweetspot.models.schemas import (
    ADDRESS_UNKNOWN,
    DiscoveryResult,
    ExclusionRules,
    LatLng,
    PartialFailure,
    SearchRequest,
    Venue,
    VenueCandidate,
    VenueDetails,
    normalize_text,
)

__all__ = [
    "ADDRESS_UNKNOWN",
    "DiscoveryResult",
    "ExclusionRules",
    "LatLng",
    "PartialFailure",
    "SearchRequest",
    "Venue",
    "VenueCandidate",
    "VenueDetails",
    "normalize_text",
]
