"""Map provider candidates onto the internal Venue record."""

from typing import Optional

from sweetspot.models.schemas import ADDRESS_UNKNOWN, LatLng, Venue, VenueCandidate


def normalize(candidate: VenueCandidate, origin: Optional[LatLng] = None) -> Venue:
    """Build a Venue from a candidate. Never fails.

    Missing rating, rating count and price level stay None so "no rating"
    remains distinguishable from "rated zero".

    Args:
        candidate: Provider record.
        origin: Search center; when given, distance_meters is filled in.
    """
    address = (candidate.address or "").strip() or ADDRESS_UNKNOWN
    distance = (
        round(origin.distance_to(candidate.location), 1) if origin is not None else None
    )

    return Venue(
        id=Venue.id_for(candidate.provider_id),
        name=candidate.name,
        address=address,
        location=candidate.location,
        rating=candidate.rating,
        rating_count=candidate.rating_count,
        price_level=candidate.price_level,
        source_provider_id=candidate.provider_id,
        distance_meters=distance,
        open_now=candidate.open_now,
        photo_reference=candidate.photo_reference,
    )
