"""
Dependency Injection Container for SweetSpot.

Builds the provider client, exclusion rules and discovery coordinator from
settings and owns their lifecycle. There is no global instance: the
surrounding application creates one container and passes it (or the
coordinator) where it is needed.

Usage:
    async with DiscoveryContainer() as container:
        result = await container.discover(SearchRequest.nearby(35.68, 139.76))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from sweetspot.config.settings import Settings, get_settings
from sweetspot.core.exceptions import ConfigurationError, InitializationError
from sweetspot.core.logging import configure_logging

if TYPE_CHECKING:
    from sweetspot.collectors.base import VenueProviderClient
    from sweetspot.discovery.coordinator import DiscoveryCoordinator
    from sweetspot.models.schemas import (
        DiscoveryResult,
        ExclusionRules,
        SearchRequest,
        VenueDetails,
    )

logger = structlog.get_logger(__name__)


class DiscoveryContainer:
    """
    Container for the discovery pipeline dependencies.

    Services are created lazily on first access and cached. A client passed
    in by the caller is used as-is and never closed by the container.

    Example:
        container = DiscoveryContainer()
        await container.initialize()

        venues, failures = await container.coordinator.discover_nearby_venues(
            request, container.exclusion_rules
        )

        await container.shutdown()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: VenueProviderClient | None = None,
        exclusion_rules: ExclusionRules | None = None,
    ):
        """
        Initialize the container.

        Args:
            settings: Application settings. Defaults to get_settings().
            client: Pre-built provider client. Built from settings if omitted.
            exclusion_rules: Rules to use instead of the configured ones.
        """
        self._settings = settings or get_settings()
        self._client: VenueProviderClient | None = client
        self._owns_client = client is None
        self._http_client_owner = None
        self._exclusion_rules = exclusion_rules
        self._coordinator: DiscoveryCoordinator | None = None
        self._initialized = False

        logger.info("discovery_container_created")

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        return self._settings

    @property
    def client(self) -> "VenueProviderClient":
        """
        Get the provider client (lazy initialization).

        Raises:
            InitializationError: If the client cannot be created.
        """
        if self._client is None:
            try:
                from sweetspot.collectors.google_places import GooglePlacesClient
                from sweetspot.collectors.retrying import RetryingProviderClient

                google = GooglePlacesClient(settings=self._settings)
                self._http_client_owner = google

                if self._settings.retry_attempts > 0:
                    self._client = RetryingProviderClient(
                        google, attempts=self._settings.retry_attempts
                    )
                else:
                    self._client = google
                logger.info(
                    "provider_client_created",
                    provider=google.name,
                    retry_attempts=self._settings.retry_attempts,
                )
            except ConfigurationError as e:
                logger.error("provider_client_creation_failed", error=str(e))
                raise InitializationError(
                    "GooglePlacesClient",
                    f"Failed to create provider client: {e.message}",
                    {"config_key": e.config_key},
                )
        return self._client

    @property
    def exclusion_rules(self) -> "ExclusionRules":
        """
        Get the exclusion rules (lazy load).

        Raises:
            InitializationError: If the rules file cannot be loaded.
        """
        if self._exclusion_rules is None:
            from sweetspot.config.exclusion_rules import load_configured_exclusion_rules

            try:
                self._exclusion_rules = load_configured_exclusion_rules(self._settings)
            except ConfigurationError as e:
                logger.error("exclusion_rules_load_failed", error=str(e))
                raise InitializationError(
                    "ExclusionRules",
                    f"Failed to load exclusion rules: {e.message}",
                    {"path": self._settings.exclusion_rules_path},
                )
            logger.info(
                "exclusion_rules_loaded",
                categories=len(self._exclusion_rules.excluded_categories),
                name_patterns=len(self._exclusion_rules.excluded_name_patterns),
            )
        return self._exclusion_rules

    @property
    def coordinator(self) -> "DiscoveryCoordinator":
        """Get the discovery coordinator (lazy initialization)."""
        if self._coordinator is None:
            from sweetspot.discovery.coordinator import DiscoveryCoordinator

            self._coordinator = DiscoveryCoordinator(
                self.client,
                max_concurrency=self._settings.discovery_max_concurrency,
                deadline_seconds=self._settings.discovery_deadline_seconds,
            )
        return self._coordinator

    async def initialize(self) -> None:
        """
        Build all services up front.

        Call this at application startup so configuration errors surface
        before the first discovery call.

        Raises:
            InitializationError: If any service fails to initialize.
        """
        if self._initialized:
            logger.warning("container_already_initialized")
            return

        configure_logging(self._settings.log_level, self._settings.log_format)
        logger.info("container_initializing")
        _ = self.exclusion_rules
        _ = self.coordinator
        self._initialized = True
        logger.info("container_initialized")

    async def discover(
        self,
        request: "SearchRequest",
        rules: Optional["ExclusionRules"] = None,
    ) -> "DiscoveryResult":
        """Run a discovery call with the configured rules unless others are given."""
        return await self.coordinator.discover_nearby_venues(
            request,
            rules if rules is not None else self.exclusion_rules,
        )

    async def details(self, provider_id: str) -> Optional["VenueDetails"]:
        """Look up phone, website, opening hours and photos for one venue."""
        return await self.client.details(provider_id)

    async def shutdown(self) -> None:
        """
        Release resources created by the container.

        Call this at application shutdown.
        """
        logger.info("container_shutting_down")

        if self._owns_client and self._http_client_owner is not None:
            await self._http_client_owner.aclose()
            logger.info("provider_client_closed")

        self._http_client_owner = None
        self._coordinator = None
        if self._owns_client:
            self._client = None
        self._initialized = False
        logger.info("container_shutdown_complete")

    async def __aenter__(self) -> "DiscoveryContainer":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized
