"""Unit tests for Prometheus metric helpers."""

import pytest
from prometheus_client import REGISTRY

from sweetspot.core.exceptions import ProviderTimeoutError
from sweetspot.monitoring.metrics import (
    record_discovery_run,
    record_excluded_candidates,
    track_provider_request,
)


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestTrackProviderRequest:
    """Test provider request tracking."""

    def test_success(self):
        """A clean exit counts as success."""
        before = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="success")

        with track_provider_request("metrics-test"):
            pass

        after = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="success")
        assert after == before + 1

    def test_provider_error_labelled_with_kind(self):
        """Provider errors are labelled with their kind."""
        before = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="timeout")

        with pytest.raises(ProviderTimeoutError):
            with track_provider_request("metrics-test"):
                raise ProviderTimeoutError("metrics-test", "slow")

        after = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="timeout")
        assert after == before + 1

    def test_other_error_labelled_error(self):
        """Other exceptions are labelled "error"."""
        before = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="error")

        with pytest.raises(KeyError):
            with track_provider_request("metrics-test"):
                raise KeyError("boom")

        after = _sample("sweetspot_provider_requests_total", provider="metrics-test", status="error")
        assert after == before + 1

    def test_latency_observed(self):
        """Every tracked request is timed."""
        before = _sample("sweetspot_provider_latency_seconds_count", provider="metrics-test")

        with track_provider_request("metrics-test"):
            pass

        assert _sample("sweetspot_provider_latency_seconds_count", provider="metrics-test") == before + 1


class TestDiscoveryMetrics:
    """Test discovery-level counters."""

    def test_record_discovery_run(self):
        """A finished run bumps the outcome counter and histogram."""
        before = _sample("sweetspot_discovery_runs_total", outcome="partial")
        before_count = _sample("sweetspot_discovery_duration_seconds_count")

        record_discovery_run("partial", 0.2)

        assert _sample("sweetspot_discovery_runs_total", outcome="partial") == before + 1
        assert _sample("sweetspot_discovery_duration_seconds_count") == before_count + 1

    def test_record_excluded_candidates(self):
        """Excluded counts accumulate and zero is ignored."""
        before = _sample("sweetspot_candidates_excluded_total")

        record_excluded_candidates(3)
        record_excluded_candidates(0)

        assert _sample("sweetspot_candidates_excluded_total") == before + 3
