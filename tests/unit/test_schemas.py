"""Unit tests for discovery data models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from sweetspot.config.settings import DEFAULT_KEYWORDS
from sweetspot.core.exceptions import ProviderTimeoutError
from sweetspot.models.schemas import (
    DiscoveryResult,
    ExclusionRules,
    LatLng,
    PartialFailure,
    SearchRequest,
    Venue,
    VenueDetails,
    normalize_text,
)


class TestLatLng:
    """Test coordinate validation and distance."""

    @pytest.mark.parametrize("lat,lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_out_of_range_rejected(self, lat, lng):
        """Coordinates outside the globe are rejected."""
        with pytest.raises(PydanticValidationError):
            LatLng(lat=lat, lng=lng)

    def test_distance_to_self_is_zero(self, tokyo):
        """A point is zero metres from itself."""
        assert tokyo.distance_to(tokyo) == 0.0

    def test_one_degree_latitude(self):
        """One degree of latitude is about 111 km."""
        distance = LatLng(lat=0, lng=0).distance_to(LatLng(lat=1, lng=0))

        assert distance == pytest.approx(111_195, rel=1e-3)

    def test_as_param(self):
        """Points format as lat,lng."""
        assert LatLng(lat=35.5, lng=139.25).as_param() == "35.5,139.25"

    def test_immutable(self, tokyo):
        """Coordinates cannot be reassigned."""
        with pytest.raises(PydanticValidationError):
            tokyo.lat = 0


class TestSearchRequest:
    """Test keyword cleanup and defaults."""

    def test_keywords_stripped_and_deduplicated(self, tokyo):
        """Keywords are stripped and de-duplicated in order."""
        request = SearchRequest(
            center=tokyo,
            radius_meters=1000,
            keywords=[" tiramisu ", "cake", "tiramisu", "", "   ", "cake"],
        )

        assert request.keywords == ("tiramisu", "cake")

    def test_single_string_keyword(self, tokyo):
        """A bare string is one keyword."""
        request = SearchRequest(center=tokyo, radius_meters=1000, keywords="gelato")

        assert request.keywords == ("gelato",)

    def test_nearby_uses_settings_defaults(self):
        """nearby() fills radius and keywords from settings."""
        request = SearchRequest.nearby(35.0, 139.0)

        assert request.center == LatLng(lat=35.0, lng=139.0)
        assert request.radius_meters == 5000
        assert request.keywords == tuple(DEFAULT_KEYWORDS)

    def test_nearby_overrides(self):
        """Explicit arguments win over settings."""
        request = SearchRequest.nearby(35.0, 139.0, radius_meters=800, keywords=["gelato"])

        assert request.radius_meters == 800
        assert request.keywords == ("gelato",)

    def test_nearby_reads_env(self, monkeypatch):
        """nearby() sees environment overrides."""
        monkeypatch.setenv("DEFAULT_RADIUS_METERS", "1500")
        monkeypatch.setenv("DEFAULT_KEYWORDS", '["pudding"]')

        request = SearchRequest.nearby(35.0, 139.0)

        assert request.radius_meters == 1500
        assert request.keywords == ("pudding",)


class TestVenue:
    """Test venue id derivation."""

    def test_id_is_stable(self):
        """The same provider id gives the same venue id."""
        assert Venue.id_for("ChIJ1") == Venue.id_for("ChIJ1")

    def test_id_differs_per_provider_id(self):
        """Different provider ids give different venue ids."""
        assert Venue.id_for("ChIJ1") != Venue.id_for("ChIJ2")


class TestExclusionRules:
    """Test rule normalization."""

    def test_categories_lowercased(self):
        """Categories are stripped and lower-cased."""
        rules = ExclusionRules(excluded_categories=["Supermarket", " convenience_store "])

        assert rules.excluded_categories == frozenset({"supermarket", "convenience_store"})

    def test_patterns_normalized(self):
        """Name patterns are NFKC folded and blanks dropped."""
        rules = ExclusionRules(excluded_name_patterns=["ＬＡＷＳＯＮ", "Seven  Eleven", ""])

        assert rules.excluded_name_patterns == frozenset({"lawson", "seven eleven"})

    def test_empty(self):
        """empty() has no rules."""
        rules = ExclusionRules.empty()

        assert not rules.excluded_categories
        assert not rules.excluded_name_patterns

    def test_unknown_field_rejected(self):
        """Unknown keys are rejected."""
        with pytest.raises(PydanticValidationError):
            ExclusionRules(excluded_brands=["x"])

    def test_bare_string_category(self):
        """A bare string is one category, not characters."""
        rules = ExclusionRules(excluded_categories="Supermarket")

        assert rules.excluded_categories == frozenset({"supermarket"})

    def test_bare_string_pattern(self):
        """A bare string is one name pattern, not characters."""
        rules = ExclusionRules(excluded_name_patterns="LAWSON")

        assert rules.excluded_name_patterns == frozenset({"lawson"})


class TestNormalizeText:
    """Test text normalization."""

    def test_full_width_and_case(self):
        """Full-width text folds to ASCII lower case."""
        assert normalize_text("  ＦａｍｉｌｙＭａｒｔ　Ginza ") == "familymart ginza"


class TestDiscoveryResult:
    """Test the result container."""

    def test_unpacks_into_venues_and_failures(self):
        """The result unpacks into venues and failures."""
        failure = PartialFailure(keyword="cake", error=ProviderTimeoutError("fake", "slow"))
        result = DiscoveryResult(venues=(), partial_failures=(failure,))

        venues, failures = result

        assert venues == ()
        assert failures == (failure,)
        assert result.is_partial

    def test_complete_result_not_partial(self):
        """No failures means a complete result."""
        assert not DiscoveryResult().is_partial


class TestVenueDetails:
    """Test the details model."""

    def test_opening_hours_text(self):
        """Weekday lines are joined with newlines."""
        details = VenueDetails(
            provider_id="ChIJ1",
            name="Tiramisu Lab",
            opening_hours=("Monday: 10:00 AM – 8:00 PM", "Tuesday: Closed"),
        )

        assert details.opening_hours_text == "Monday: 10:00 AM – 8:00 PM\nTuesday: Closed"

    def test_unknown_opening_hours(self):
        """No weekday lines means no text."""
        details = VenueDetails(provider_id="ChIJ1", name="Tiramisu Lab")

        assert details.opening_hours == ()
        assert details.opening_hours_text is None
        assert details.photo_references == ()
