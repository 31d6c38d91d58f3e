"""Retry wrapper for place-search clients.

The discovery pipeline never retries on its own. Callers that want
retry-on-timeout wrap their client before handing it to the coordinator:

    client = RetryingProviderClient(GooglePlacesClient(), attempts=3)
    coordinator = DiscoveryCoordinator(client)
"""

from typing import Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sweetspot.collectors.base import VenueProviderClient
from sweetspot.core.exceptions import ProviderRateLimitError, ProviderTimeoutError
from sweetspot.models.schemas import LatLng, VenueCandidate, VenueDetails

logger = structlog.get_logger(__name__)


class RetryingProviderClient(VenueProviderClient):
    """Retries timeouts and rate limits of a wrapped client.

    Other provider errors pass through on the first attempt. When attempts
    run out the last ProviderError is re-raised unchanged.
    """

    def __init__(
        self,
        inner: VenueProviderClient,
        attempts: int = 3,
        wait_min: float = 0.5,
        wait_max: float = 4.0,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._inner = inner
        self._attempts = attempts
        self._wait_min = wait_min
        self._wait_max = wait_max
        self.name = inner.name
        self.max_radius_meters = inner.max_radius_meters

    @property
    def inner(self) -> VenueProviderClient:
        return self._inner

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "provider_search_retrying",
            provider=self.name,
            attempt=retry_state.attempt_number,
            max_attempts=self._attempts,
            error=str(exc),
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type((ProviderTimeoutError, ProviderRateLimitError)),
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._wait_min, min=self._wait_min, max=self._wait_max),
            before_sleep=self._log_retry,
            reraise=True,
        )

    async def search(
        self,
        keyword: str,
        center: LatLng,
        radius_meters: int,
    ) -> list[VenueCandidate]:
        async for attempt in self._retrying():
            with attempt:
                return await self._inner.search(keyword, center, radius_meters)
        # Unreachable: reraise=True surfaces the final error
        raise AssertionError("retry loop exited without a result")

    async def details(self, provider_id: str) -> Optional[VenueDetails]:
        async for attempt in self._retrying():
            with attempt:
                return await self._inner.details(provider_id)
        raise AssertionError("retry loop exited without a result")
