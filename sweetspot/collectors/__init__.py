"""
Place-Search Provider Clients.

- base: VenueProviderClient interface (one keyword search per call)
- google_places: Google Places Nearby Search over httpx
- retrying: Optional tenacity-based retry wrapper for any client

Example:
    from sweetspot.collectors import GooglePlacesClient
    from sweetspot.models import LatLng

    async with GooglePlacesClient() as client:
        candidates = await client.search("tiramisu", LatLng(lat=35.68, lng=139.76), 3000)
"""

from sweetspot.collectors.base import VenueProviderClient
from sweetspot.collectors.google_places import GooglePlacesClient
from sweetspot.collectors.retrying import RetryingProviderClient

__all__ = [
    "GooglePlacesClient",
    "RetryingProviderClient",
    "VenueProviderClient",
]
