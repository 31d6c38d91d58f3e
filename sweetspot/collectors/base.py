"""Base interface for place-search provider clients.

All provider clients should extend VenueProviderClient and implement search().
Clients that can look up a single place also override details().
"""

from abc import ABC, abstractmethod
from typing import Optional

from sweetspot.models.schemas import LatLng, VenueCandidate, VenueDetails


class VenueProviderClient(ABC):
    """Abstract base class for place-search providers.

    One call to search() issues one outbound request. Implementations raise
    a ProviderError subclass on failure; a search with no matches returns an
    empty list.
    """

    #: Provider name used in logs, metrics and error messages.
    name: str = "provider"

    #: Largest search radius the provider accepts.
    max_radius_meters: int = 50000

    @abstractmethod
    async def search(
        self,
        keyword: str,
        center: LatLng,
        radius_meters: int,
    ) -> list[VenueCandidate]:
        """Search for venues matching a keyword around a point.

        Args:
            keyword: Free-text keyword (e.g. "tiramisu").
            center: Search center.
            radius_meters: Search radius in metres.

        Returns:
            Candidates in provider order, possibly empty.

        Raises:
            ProviderError: Timeout, rate limiting, transport or payload errors.
        """
        ...

    async def details(self, provider_id: str) -> Optional[VenueDetails]:
        """Fetch extended information for one place.

        Providers without a details lookup keep this default.

        Returns:
            The place details, or None if the provider no longer knows the id.

        Raises:
            ProviderError: Timeout, rate limiting, transport or payload errors.
        """
        raise NotImplementedError(f"{self.name} does not support place details")
