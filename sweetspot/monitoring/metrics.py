"""
Prometheus metrics for SweetSpot observability.

Usage:
    from sweetspot.monitoring.metrics import track_provider_request

    with track_provider_request("google_places"):
        candidates = await client.search(keyword, center, radius)

    # Or manually
    DISCOVERY_RUNS_TOTAL.labels(outcome="partial").inc()
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

from sweetspot.core.exceptions import ProviderError


# =============================================================================
# Metric Definitions
# =============================================================================

# Provider metrics
PROVIDER_REQUESTS_TOTAL = Counter(
    "sweetspot_provider_requests_total",
    "Total place-search provider requests",
    ["provider", "status"],
)

PROVIDER_LATENCY = Histogram(
    "sweetspot_provider_latency_seconds",
    "Latency of place-search provider requests",
    ["provider"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Discovery metrics
DISCOVERY_RUNS_TOTAL = Counter(
    "sweetspot_discovery_runs_total",
    "Total discovery calls by outcome",
    ["outcome"],
)

DISCOVERY_DURATION = Histogram(
    "sweetspot_discovery_duration_seconds",
    "Duration of discovery calls in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

CANDIDATES_EXCLUDED_TOTAL = Counter(
    "sweetspot_candidates_excluded_total",
    "Candidates dropped by the exclusion policy",
)


# =============================================================================
# Tracking Helpers
# =============================================================================


@contextmanager
def track_provider_request(provider: str) -> Generator[None, None, None]:
    """
    Context manager to track a provider request's duration and status.

    Provider errors are labelled with their kind (timeout, rate_limited, ...);
    anything else is labelled "error".
    """
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except ProviderError as e:
        status = e.kind.value
        raise
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        PROVIDER_REQUESTS_TOTAL.labels(provider=provider, status=status).inc()
        PROVIDER_LATENCY.labels(provider=provider).observe(duration)


def record_discovery_run(outcome: str, duration: float) -> None:
    """Record a finished discovery call.

    Args:
        outcome: "complete", "partial", "failed" or "invalid".
        duration: Wall time in seconds.
    """
    DISCOVERY_RUNS_TOTAL.labels(outcome=outcome).inc()
    DISCOVERY_DURATION.observe(duration)


def record_excluded_candidates(count: int) -> None:
    """Record candidates dropped by the exclusion policy."""
    if count > 0:
        CANDIDATES_EXCLUDED_TOTAL.inc(count)
