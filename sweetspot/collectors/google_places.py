"""Google Places client.

Issues keyword searches around a point against the Places API Nearby Search
endpoint and maps the response onto VenueCandidate records. Single places can
be looked up through the Place Details endpoint.

API Reference: https://developers.google.com/maps/documentation/places/web-service/search-nearby
"""

import asyncio
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from sweetspot.collectors.base import VenueProviderClient
from sweetspot.config.settings import Settings, get_settings
from sweetspot.core.exceptions import (
    ConfigurationError,
    ProviderMalformedResponseError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from sweetspot.models.schemas import LatLng, VenueCandidate, VenueDetails
from sweetspot.monitoring.metrics import track_provider_request

logger = structlog.get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================

PROVIDER_NAME = "google_places"

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PLACE_PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"

# Hard limit of the Nearby Search endpoint
MAX_RADIUS_METERS = 50000

# Fields requested from Place Details (billing is per field group)
PLACE_DETAIL_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "geometry/location",
    "rating",
    "user_ratings_total",
    "price_level",
    "opening_hours",
    "formatted_phone_number",
    "website",
    "photos",
    "types",
]

DEFAULT_PHOTO_MAX_WIDTH = 400

# Payload statuses that are not errors
_SEARCH_STATUSES = {"OK", "ZERO_RESULTS"}
_DETAILS_STATUSES = {"OK", "NOT_FOUND", "ZERO_RESULTS"}


# =============================================================================
# Google Places Client
# =============================================================================


class GooglePlacesClient(VenueProviderClient):
    """Async client for the Places API Nearby Search and Place Details endpoints.

    Example:
        async with GooglePlacesClient() as client:
            candidates = await client.search(
                "tiramisu",
                LatLng(lat=35.6812, lng=139.7671),
                radius_meters=3000,
            )
            details = await client.details(candidates[0].provider_id)
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_requests_per_second: Optional[int] = None,
        place_type: Optional[str] = None,
        language: Optional[str] = None,
        max_radius_meters: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Google Places API key. If not provided, loads from settings.
            timeout: Timeout for a whole search call in seconds.
            max_requests_per_second: Client-side QPS throttle.
            place_type: Optional Places type filter (e.g. "cafe").
            language: Result language code.
            max_radius_meters: Largest accepted search radius, capped at
                the endpoint limit of 50000.
            http_client: Pre-built httpx client. Not closed by this client.
            settings: Settings to fill unset arguments from. Defaults to
                get_settings().
        """
        settings = settings if settings is not None else get_settings()
        self._api_key = api_key or (
            settings.google_places_api_key.get_secret_value()
            if settings.google_places_api_key
            else None
        )
        if not self._api_key:
            raise ConfigurationError(
                "Google Places API key not configured",
                config_key="google_places_api_key",
            )

        self._timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self._place_type = place_type if place_type is not None else settings.place_type
        self._language = language or settings.language
        self.max_radius_meters = min(
            max_radius_meters or settings.max_radius_meters,
            MAX_RADIUS_METERS,
        )

        self._client = http_client
        self._owns_client = http_client is None

        # Rate limiting: track request start times within the last second
        self._request_times: list[float] = []
        self._max_requests_per_second = (
            max_requests_per_second or settings.provider_max_requests_per_second
        )
        self._throttle_lock = asyncio.Lock()

    async def __aenter__(self) -> "GooglePlacesClient":
        """Enter async context manager."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._client

    async def _rate_limit(self) -> None:
        """Enforce the client-side QPS limit."""
        async with self._throttle_lock:
            loop = asyncio.get_running_loop()
            now = loop.time()

            # Remove timestamps older than 1 second
            self._request_times = [t for t in self._request_times if now - t < 1.0]

            # If at limit, wait until oldest request expires
            if len(self._request_times) >= self._max_requests_per_second:
                wait_time = 1.0 - (now - self._request_times[0])
                if wait_time > 0:
                    await asyncio.sleep(wait_time)
                now = loop.time()

            self._request_times.append(now)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def search(
        self,
        keyword: str,
        center: LatLng,
        radius_meters: int,
    ) -> list[VenueCandidate]:
        """Run one Nearby Search for a keyword.

        Returns:
            Parsed candidates; empty for ZERO_RESULTS.

        Raises:
            ProviderTimeoutError: The call did not finish within the timeout.
            ProviderRateLimitError: HTTP 429 or OVER_QUERY_LIMIT.
            ProviderTransportError: Network errors and rejected requests.
            ProviderMalformedResponseError: Unparseable payloads.
        """
        params: dict[str, Any] = {
            "location": center.as_param(),
            "radius": radius_meters,
            "keyword": keyword,
            "language": self._language,
            "key": self._api_key,
        }
        if self._place_type:
            params["type"] = self._place_type

        context = {"keyword": keyword}
        with track_provider_request(self.name):
            payload = await self._call(NEARBY_SEARCH_URL, params, context, _SEARCH_STATUSES)
            candidates = self._parse_payload(payload, keyword)

        logger.info(
            "google_places_search_completed",
            keyword=keyword,
            results=len(candidates),
        )
        return candidates

    async def details(self, provider_id: str) -> Optional[VenueDetails]:
        """Fetch phone, website, opening hours and photos for one place.

        Returns:
            The place details, or None for NOT_FOUND.

        Raises:
            Same provider errors as search().
        """
        params = {
            "place_id": provider_id,
            "fields": ",".join(PLACE_DETAIL_FIELDS),
            "language": self._language,
            "key": self._api_key,
        }

        context = {"place_id": provider_id}
        with track_provider_request(self.name):
            payload = await self._call(PLACE_DETAILS_URL, params, context, _DETAILS_STATUSES)
            if payload["status"] != "OK":
                logger.info("google_places_details_not_found", place_id=provider_id)
                return None

            details = self.to_details(payload.get("result"), provider_id)
            if details is None:
                raise ProviderMalformedResponseError(
                    self.name,
                    "Place details result could not be parsed",
                    context,
                )

        logger.info("google_places_details_completed", place_id=provider_id)
        return details

    def photo_url(self, photo_reference: str, max_width: int = DEFAULT_PHOTO_MAX_WIDTH) -> str:
        """Build a Place Photo URL for a photo reference.

        The URL embeds the API key, so hand it only to trusted renderers.
        """
        params = {
            "maxwidth": max_width,
            "photo_reference": photo_reference,
            "key": self._api_key,
        }
        return str(httpx.URL(PLACE_PHOTO_URL, params=params))

    # -------------------------------------------------------------------------
    # Request / Response Handling
    # -------------------------------------------------------------------------

    async def _call(
        self,
        url: str,
        params: dict[str, Any],
        context: dict[str, Any],
        ok_statuses: set[str],
    ) -> dict[str, Any]:
        """Throttle, then fetch within the call timeout."""
        await self._rate_limit()
        try:
            return await asyncio.wait_for(
                self._fetch(url, params, context, ok_statuses),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("google_places_timeout", timeout=self._timeout, **context)
            raise ProviderTimeoutError(
                self.name,
                f"Request timed out after {self._timeout}s",
                context,
            )

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any],
        context: dict[str, Any],
        ok_statuses: set[str],
    ) -> dict[str, Any]:
        """Perform the HTTP request and check the payload status."""
        client = self._ensure_client()

        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("google_places_timeout", error=str(e), **context)
            raise ProviderTimeoutError(
                self.name,
                f"Request timeout: {e}",
                context,
            )
        except httpx.HTTPError as e:
            logger.error("google_places_request_error", error=str(e), **context)
            raise ProviderTransportError(
                self.name,
                f"Request failed: {e}",
                {**context, "original_error": str(e)},
            )

        if response.status_code == 429:
            logger.warning("google_places_rate_limited", **context)
            raise ProviderRateLimitError(
                self.name,
                "Rate limited by Google Places API",
                {**context, "status_code": 429},
            )
        if response.status_code >= 400:
            logger.error(
                "google_places_http_error",
                status_code=response.status_code,
                **context,
            )
            raise ProviderTransportError(
                self.name,
                f"HTTP error {response.status_code}",
                {**context, "status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderMalformedResponseError(
                self.name,
                f"Response is not valid JSON: {e}",
                context,
            )

        if not isinstance(payload, dict) or "status" not in payload:
            raise ProviderMalformedResponseError(
                self.name,
                "Response is missing a status field",
                context,
            )

        status = payload["status"]
        if status == "OVER_QUERY_LIMIT":
            logger.warning("google_places_over_query_limit", **context)
            raise ProviderRateLimitError(
                self.name,
                payload.get("error_message") or status,
                {**context, "status": status},
            )
        if status not in ok_statuses:
            logger.error(
                "google_places_api_error",
                status=status,
                error=payload.get("error_message"),
                **context,
            )
            raise ProviderTransportError(
                self.name,
                f"API error {status}: {payload.get('error_message') or 'no message'}",
                {**context, "status": status},
            )

        return payload

    def _parse_payload(self, payload: dict[str, Any], keyword: str) -> list[VenueCandidate]:
        """Map a successful payload onto candidates.

        Individual malformed entries are skipped. A payload whose entries are
        all unusable is treated as malformed.
        """
        if payload.get("status") == "ZERO_RESULTS":
            return []

        results = payload.get("results", [])
        if not isinstance(results, list):
            raise ProviderMalformedResponseError(
                self.name,
                "'results' is not a list",
                {"keyword": keyword},
            )

        candidates: list[VenueCandidate] = []
        for raw in results:
            candidate = self.to_candidate(raw)
            if candidate is None:
                logger.warning(
                    "google_places_result_skipped",
                    keyword=keyword,
                    preview=str(raw)[:200],
                )
                continue
            candidates.append(candidate)

        if results and not candidates:
            raise ProviderMalformedResponseError(
                self.name,
                f"None of {len(results)} results could be parsed",
                {"keyword": keyword},
            )
        return candidates

    @staticmethod
    def to_candidate(raw: Any) -> Optional[VenueCandidate]:
        """Convert one Nearby Search result to a VenueCandidate.

        Returns None when the result lacks a place id or usable coordinates.
        Out-of-range optional fields are dropped rather than the whole result.
        """
        if not isinstance(raw, dict):
            return None

        place_id = raw.get("place_id")
        location = _parse_location(raw)
        if not place_id or location is None:
            return None

        address = _strip_or_none(raw.get("formatted_address")) or _strip_or_none(raw.get("vicinity"))
        photos = _parse_photo_references(raw.get("photos"))

        try:
            return VenueCandidate(
                provider_id=str(place_id),
                name=str(raw.get("name") or "").strip(),
                location=location,
                categories=_parse_types(raw.get("types")),
                rating=_in_range(_safe_float(raw.get("rating")), 0.0, 5.0),
                rating_count=_in_range(_safe_int(raw.get("user_ratings_total")), 0, None),
                price_level=_in_range(_safe_int(raw.get("price_level")), 0, 4),
                address=address,
                open_now=_parse_open_now(raw.get("opening_hours")),
                photo_reference=photos[0] if photos else None,
            )
        except PydanticValidationError:
            return None

    @staticmethod
    def to_details(raw: Any, provider_id: str) -> Optional[VenueDetails]:
        """Convert a Place Details result to VenueDetails.

        Returns None when the result is not an object.
        """
        if not isinstance(raw, dict):
            return None

        hours = raw.get("opening_hours") if isinstance(raw.get("opening_hours"), dict) else {}
        weekday_text = hours.get("weekday_text") or []

        try:
            return VenueDetails(
                provider_id=str(raw.get("place_id") or provider_id),
                name=str(raw.get("name") or "").strip(),
                address=_strip_or_none(raw.get("formatted_address")),
                location=_parse_location(raw),
                phone_number=_strip_or_none(raw.get("formatted_phone_number")),
                website_url=_strip_or_none(raw.get("website")),
                opening_hours=tuple(
                    str(line) for line in weekday_text if isinstance(weekday_text, list) and line
                ),
                open_now=_parse_open_now(hours),
                rating=_in_range(_safe_float(raw.get("rating")), 0.0, 5.0),
                rating_count=_in_range(_safe_int(raw.get("user_ratings_total")), 0, None),
                price_level=_in_range(_safe_int(raw.get("price_level")), 0, 4),
                photo_references=tuple(_parse_photo_references(raw.get("photos"))),
                categories=_parse_types(raw.get("types")),
            )
        except PydanticValidationError:
            return None


# =============================================================================
# Helpers
# =============================================================================


def _parse_location(raw: dict[str, Any]) -> Optional[LatLng]:
    geometry = raw.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        return None
    lat = _safe_float(location.get("lat"))
    lng = _safe_float(location.get("lng"))
    if lat is None or lng is None:
        return None
    try:
        return LatLng(lat=lat, lng=lng)
    except PydanticValidationError:
        return None


def _parse_types(value: Any) -> frozenset[str]:
    if not isinstance(value, list):
        return frozenset()
    return frozenset(str(t) for t in value if t)


def _parse_open_now(hours: Any) -> Optional[bool]:
    if not isinstance(hours, dict):
        return None
    open_now = hours.get("open_now")
    return open_now if isinstance(open_now, bool) else None


def _parse_photo_references(photos: Any) -> list[str]:
    if not isinstance(photos, list):
        return []
    return [
        str(photo["photo_reference"])
        for photo in photos
        if isinstance(photo, dict) and photo.get("photo_reference")
    ]


def _in_range(value: Any, low: Any, high: Any) -> Any:
    """Return value if within [low, high] (None bound = open), else None."""
    if value is None:
        return None
    if low is not None and value < low:
        return None
    if high is not None and value > high:
        return None
    return value


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    try:
        if value is None:
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
