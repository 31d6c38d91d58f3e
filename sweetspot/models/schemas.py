"""Pydantic models for SweetSpot discovery entities."""

import math
import unicodedata
from dataclasses import dataclass, field
from typing import Iterator, Optional
from uuid import UUID, NAMESPACE_URL, uuid5

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sweetspot.core.exceptions import ProviderError

EARTH_RADIUS_METERS = 6_371_000.0
ADDRESS_UNKNOWN = "address unknown"

# Venue ids are derived from provider ids so they stay stable across calls.
VENUE_ID_NAMESPACE = uuid5(NAMESPACE_URL, "https://sweetspot.app/venues")


# =============================================================================
# Base Models
# =============================================================================


class FrozenModel(BaseModel):
    """Base model for immutable value objects."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class LatLng(FrozenModel):
    """Geographic coordinate pair."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude")

    def distance_to(self, other: "LatLng") -> float:
        """Great-circle distance to another point in metres (haversine)."""
        lat1 = math.radians(self.lat)
        lat2 = math.radians(other.lat)
        dlat = lat2 - lat1
        dlng = math.radians(other.lng - self.lng)

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_METERS * c

    def as_param(self) -> str:
        """Format as the provider's ``lat,lng`` query parameter."""
        return f"{self.lat},{self.lng}"


# =============================================================================
# Discovery Request
# =============================================================================


class SearchRequest(FrozenModel):
    """A nearby-venue discovery request.

    Keywords are stripped and de-duplicated in first-occurrence order.
    Range checks against the provider's limits happen in the coordinator
    so invalid requests are rejected before any network call.
    """

    center: LatLng
    radius_meters: int = Field(..., description="Search radius in metres")
    keywords: tuple[str, ...] = Field(..., description="Ordered, de-duplicated keywords")

    @field_validator("keywords", mode="before")
    @classmethod
    def _dedupe_keywords(cls, value):
        if isinstance(value, str):
            value = [value]
        seen: dict[str, None] = {}
        for keyword in value or ():
            cleaned = str(keyword).strip()
            if cleaned:
                seen.setdefault(cleaned, None)
        return tuple(seen)

    @classmethod
    def nearby(
        cls,
        lat: float,
        lng: float,
        radius_meters: Optional[int] = None,
        keywords: Optional[list[str]] = None,
    ) -> "SearchRequest":
        """Build a request around a point, filling gaps from settings."""
        from sweetspot.config.settings import get_settings

        settings = get_settings()
        return cls(
            center=LatLng(lat=lat, lng=lng),
            radius_meters=radius_meters if radius_meters is not None else settings.default_radius_meters,
            keywords=keywords if keywords is not None else settings.default_keywords,
        )


# =============================================================================
# Provider Candidate
# =============================================================================


class VenueCandidate(FrozenModel):
    """Raw place returned by the provider for one keyword search."""

    provider_id: str = Field(..., min_length=1, description="Provider place id")
    name: str = Field(..., description="Display name")
    location: LatLng
    categories: frozenset[str] = Field(default_factory=frozenset, description="Provider type tags")
    rating: Optional[float] = Field(None, ge=0.0, le=5.0, description="Average rating (0-5)")
    rating_count: Optional[int] = Field(None, ge=0, description="Number of ratings")
    price_level: Optional[int] = Field(None, ge=0, le=4, description="Provider price level")
    address: Optional[str] = Field(None, description="Formatted address or vicinity")
    open_now: Optional[bool] = Field(None, description="Open at search time, if known")
    photo_reference: Optional[str] = Field(None, description="First provider photo reference")


# =============================================================================
# Normalized Venue
# =============================================================================


class Venue(FrozenModel):
    """Normalized venue consumed by the map and list views."""

    id: UUID = Field(..., description="Stable id derived from the provider id")
    name: str
    address: str = Field(..., description="Best available address, never empty")
    location: LatLng
    rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    rating_count: Optional[int] = Field(None, ge=0)
    price_level: Optional[int] = Field(None, ge=0, le=4)
    source_provider_id: str
    distance_meters: Optional[float] = Field(
        None, ge=0.0, description="Distance from the search center"
    )
    open_now: Optional[bool] = None
    photo_reference: Optional[str] = None

    @staticmethod
    def id_for(provider_id: str) -> UUID:
        """Return the venue id for a provider id."""
        return uuid5(VENUE_ID_NAMESPACE, provider_id)


class VenueDetails(FrozenModel):
    """Extended place information fetched for a single venue on demand."""

    provider_id: str = Field(..., min_length=1)
    name: str
    address: Optional[str] = None
    location: Optional[LatLng] = None
    phone_number: Optional[str] = None
    website_url: Optional[str] = None
    opening_hours: tuple[str, ...] = Field(
        default_factory=tuple, description="One line per weekday, provider formatted"
    )
    open_now: Optional[bool] = None
    rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    rating_count: Optional[int] = Field(None, ge=0)
    price_level: Optional[int] = Field(None, ge=0, le=4)
    photo_references: tuple[str, ...] = Field(default_factory=tuple)
    categories: frozenset[str] = Field(default_factory=frozenset)

    @property
    def opening_hours_text(self) -> Optional[str]:
        """Weekday lines joined for display, or None when unknown."""
        return "\n".join(self.opening_hours) if self.opening_hours else None


# =============================================================================
# Exclusion Rules
# =============================================================================


def normalize_text(value: str) -> str:
    """NFKC-normalize, case-fold and collapse whitespace."""
    folded = unicodedata.normalize("NFKC", value).casefold()
    return " ".join(folded.split())


class ExclusionRules(FrozenModel):
    """Denylist of provider categories and venue-name substrings."""

    excluded_categories: frozenset[str] = Field(default_factory=frozenset)
    excluded_name_patterns: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("excluded_categories", mode="before")
    @classmethod
    def _lower_categories(cls, value):
        if isinstance(value, str):
            value = [value]
        return frozenset(str(v).strip().lower() for v in value or () if str(v).strip())

    @field_validator("excluded_name_patterns", mode="before")
    @classmethod
    def _normalize_patterns(cls, value):
        if isinstance(value, str):
            value = [value]
        patterns = (normalize_text(str(v)) for v in value or ())
        return frozenset(p for p in patterns if p)

    @classmethod
    def empty(cls) -> "ExclusionRules":
        return cls()


# =============================================================================
# Discovery Result
# =============================================================================


@dataclass(frozen=True)
class PartialFailure:
    """A keyword whose search failed while the discovery call went on."""

    keyword: str
    error: ProviderError


@dataclass(frozen=True)
class DiscoveryResult:
    """Ranked venues plus the keywords that failed along the way."""

    venues: tuple[Venue, ...] = ()
    partial_failures: tuple[PartialFailure, ...] = field(default_factory=tuple)

    @property
    def is_partial(self) -> bool:
        """True when some results may be incomplete."""
        return bool(self.partial_failures)

    def __iter__(self) -> Iterator:
        # Allows ``venues, failures = await coordinator.discover_nearby_venues(...)``
        yield self.venues
        yield self.partial_failures
