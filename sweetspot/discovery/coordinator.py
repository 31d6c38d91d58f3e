"""Nearby venue discovery coordinator.

Fans a search request out into one provider call per keyword, waits for all
of them to settle, then runs the merged candidates through the pipeline:

    dedupe -> exclusion -> ranking -> normalization

A failing keyword is recorded as a PartialFailure and the rest of the call
carries on. Only a call where every keyword fails raises.
"""

import asyncio
import time
from typing import Optional, Union

import structlog

from sweetspot.collectors.base import VenueProviderClient
from sweetspot.core.exceptions import (
    AllProvidersFailedError,
    ProviderCancelledError,
    ProviderError,
    ValidationError,
)
from sweetspot.discovery.dedupe import dedupe
from sweetspot.discovery.exclusion import filter_excluded
from sweetspot.discovery.normalizer import normalize
from sweetspot.discovery.ranking import rank
from sweetspot.models.schemas import (
    DiscoveryResult,
    ExclusionRules,
    PartialFailure,
    SearchRequest,
    VenueCandidate,
)
from sweetspot.monitoring.metrics import record_discovery_run, record_excluded_candidates

logger = structlog.get_logger(__name__)

KeywordOutcome = Union[list[VenueCandidate], ProviderError]


class DiscoveryCoordinator:
    """Runs keyword searches concurrently and composes the pipeline stages.

    The provider client is created and closed by the caller; the coordinator
    only borrows it.

    Example:
        async with GooglePlacesClient() as client:
            coordinator = DiscoveryCoordinator(client)
            venues, failures = await coordinator.discover_nearby_venues(request, rules)
    """

    def __init__(
        self,
        client: VenueProviderClient,
        max_concurrency: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ):
        """Initialize the coordinator.

        Args:
            client: Provider client used for every keyword search.
            max_concurrency: Width of the search semaphore. Defaults to the
                number of keywords in each request.
            deadline_seconds: Default overall deadline for a discovery call.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._client = client
        self._max_concurrency = max_concurrency
        self._deadline_seconds = deadline_seconds

    @property
    def client(self) -> VenueProviderClient:
        return self._client

    def validate_request(self, request: SearchRequest) -> None:
        """Check a request against the provider's limits.

        Raises:
            ValidationError: If the request cannot be served.
        """
        if not request.keywords:
            raise ValidationError("At least one keyword is required", field="keywords")

        max_radius = self._client.max_radius_meters
        if request.radius_meters <= 0:
            raise ValidationError("radius_meters must be positive", field="radius_meters")
        if request.radius_meters > max_radius:
            raise ValidationError(
                f"radius_meters must not exceed {max_radius}",
                field="radius_meters",
            )

    async def discover_nearby_venues(
        self,
        request: SearchRequest,
        rules: ExclusionRules,
        *,
        deadline: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> DiscoveryResult:
        """Discover venues around the request center.

        Args:
            request: Center, radius and keywords.
            rules: Exclusion denylist applied to the merged candidates.
            deadline: Seconds to wait for keyword searches before abandoning
                the outstanding ones. Overrides the coordinator default.
            cancel_event: When set, outstanding searches are abandoned.

        Returns:
            Ranked venues and the keywords that failed.

        Raises:
            ValidationError: Bad request; no provider call was made.
            AllProvidersFailedError: Every keyword search failed.
        """
        started = time.perf_counter()

        try:
            self.validate_request(request)
        except ValidationError as e:
            logger.warning("discovery_request_invalid", error=str(e), field=e.field)
            record_discovery_run("invalid", time.perf_counter() - started)
            raise

        log = logger.bind(
            provider=self._client.name,
            keywords=len(request.keywords),
            radius_meters=request.radius_meters,
        )
        log.info("discovery_started")

        outcomes = await self._fan_out(
            request,
            deadline if deadline is not None else self._deadline_seconds,
            cancel_event,
        )

        collected: list[VenueCandidate] = []
        failures: list[PartialFailure] = []
        for keyword, outcome in outcomes:
            if isinstance(outcome, ProviderError):
                log.warning(
                    "discovery_keyword_failed",
                    keyword=keyword,
                    kind=outcome.kind.value,
                    error=str(outcome),
                )
                failures.append(PartialFailure(keyword=keyword, error=outcome))
            else:
                collected.extend(outcome)

        if len(failures) == len(outcomes):
            log.error("discovery_failed", failures=len(failures))
            record_discovery_run("failed", time.perf_counter() - started)
            raise AllProvidersFailedError(failures)

        unique = dedupe(collected)
        survivors = filter_excluded(unique, rules)
        record_excluded_candidates(len(unique) - len(survivors))
        venues = tuple(normalize(candidate, origin=request.center) for candidate in rank(survivors))

        duration = time.perf_counter() - started
        record_discovery_run("partial" if failures else "complete", duration)
        log.info(
            "discovery_completed",
            candidates=len(collected),
            unique=len(unique),
            excluded=len(unique) - len(survivors),
            venues=len(venues),
            failures=len(failures),
            duration=round(duration, 3),
        )
        return DiscoveryResult(venues=venues, partial_failures=tuple(failures))

    # -------------------------------------------------------------------------
    # Fan-out / Fan-in
    # -------------------------------------------------------------------------

    async def _search_keyword(
        self,
        keyword: str,
        request: SearchRequest,
        semaphore: asyncio.Semaphore,
    ) -> KeywordOutcome:
        async with semaphore:
            try:
                return await self._client.search(keyword, request.center, request.radius_meters)
            except ProviderError as e:
                return e

    async def _fan_out(
        self,
        request: SearchRequest,
        deadline: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> list[tuple[str, KeywordOutcome]]:
        """Run one search per keyword and collect outcomes in keyword order."""
        semaphore = asyncio.Semaphore(self._max_concurrency or len(request.keywords))
        tasks = [
            asyncio.create_task(self._search_keyword(keyword, request, semaphore))
            for keyword in request.keywords
        ]
        cancel_waiter = (
            asyncio.ensure_future(cancel_event.wait()) if cancel_event is not None else None
        )

        loop = asyncio.get_running_loop()
        stop_at = loop.time() + deadline if deadline is not None else None
        pending = set(tasks)
        reason = "completed"

        try:
            while pending:
                waiting = set(pending)
                if cancel_waiter is not None:
                    waiting.add(cancel_waiter)
                timeout = None if stop_at is None else max(0.0, stop_at - loop.time())

                done, _ = await asyncio.wait(
                    waiting,
                    timeout=timeout,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                pending -= done

                if cancel_waiter is not None and cancel_waiter in done:
                    reason = "cancelled"
                    break
                if not done:
                    reason = "deadline exceeded"
                    break
        finally:
            leftovers = [task for task in pending if not task.done()]
            for task in leftovers:
                task.cancel()
            if cancel_waiter is not None:
                cancel_waiter.cancel()
                leftovers.append(cancel_waiter)
            if leftovers:
                await asyncio.gather(*leftovers, return_exceptions=True)

        if reason != "completed":
            logger.warning(
                "discovery_searches_abandoned",
                reason=reason,
                abandoned=sum(1 for task in tasks if task.cancelled()),
            )

        outcomes: list[tuple[str, KeywordOutcome]] = []
        for keyword, task in zip(request.keywords, tasks):
            if task.cancelled():
                outcomes.append(
                    (
                        keyword,
                        ProviderCancelledError(
                            self._client.name,
                            f"Search abandoned: {reason}",
                            {"keyword": keyword},
                        ),
                    )
                )
            else:
                outcomes.append((keyword, task.result()))
        return outcomes
