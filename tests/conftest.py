"""
Pytest Configuration and Shared Fixtures.

This module provides common fixtures for all tests:

- make_candidate: Factory for VenueCandidate records
- fake_client: Scriptable in-memory provider client
- tokyo: Search center used across tests
- rules: Small exclusion rule set
"""

import asyncio
from typing import Any, Union

import pytest

from sweetspot.collectors.base import VenueProviderClient
from sweetspot.config.settings import get_settings
from sweetspot.core.exceptions import ProviderError
from sweetspot.models.schemas import ExclusionRules, LatLng, VenueCandidate

TOKYO = LatLng(lat=35.6812, lng=139.7671)


class FakeProviderClient(VenueProviderClient):
    """Provider client returning scripted outcomes per keyword.

    An outcome is a list of candidates, a ProviderError to raise, or a
    ``(delay_seconds, outcome)`` tuple to simulate latency.
    """

    name = "fake"

    def __init__(self, outcomes: dict[str, Any] | None = None, max_radius_meters: int = 50000):
        self.outcomes = outcomes or {}
        self.max_radius_meters = max_radius_meters
        self.calls: list[tuple[str, LatLng, int]] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def search(self, keyword: str, center: LatLng, radius_meters: int) -> list[VenueCandidate]:
        self.calls.append((keyword, center, radius_meters))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            outcome: Union[list, ProviderError, tuple] = self.outcomes.get(keyword, [])
            if isinstance(outcome, tuple):
                delay, outcome = outcome
                await asyncio.sleep(delay)
            else:
                # Yield so concurrent searches actually overlap
                await asyncio.sleep(0)
            if isinstance(outcome, BaseException):
                raise outcome
            return list(outcome)
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def tokyo() -> LatLng:
    """Return the search center used in tests."""
    return TOKYO


@pytest.fixture
def make_candidate():
    """Return a factory for VenueCandidate records with sensible defaults."""

    def _make(provider_id: str, **overrides: Any) -> VenueCandidate:
        data: dict[str, Any] = {
            "provider_id": provider_id,
            "name": f"Venue {provider_id}",
            "location": LatLng(lat=35.6812, lng=139.7671),
            "categories": frozenset(),
            "rating": None,
            "rating_count": None,
            "price_level": None,
            "address": None,
        }
        data.update(overrides)
        if not isinstance(data["categories"], frozenset):
            data["categories"] = frozenset(data["categories"])
        return VenueCandidate(**data)

    return _make


@pytest.fixture
def rules() -> ExclusionRules:
    """Return a small exclusion rule set."""
    return ExclusionRules(
        excluded_categories={"supermarket", "convenience_store"},
        excluded_name_patterns={"superchainmart", "ローソン"},
    )


@pytest.fixture
def fake_client():
    """Return a factory for FakeProviderClient instances."""

    def _make(outcomes: dict[str, Any] | None = None, **kwargs: Any) -> FakeProviderClient:
        return FakeProviderClient(outcomes, **kwargs)

    return _make
