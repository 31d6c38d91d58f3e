"""
Monitoring.

Prometheus metrics for provider calls and discovery runs. Expose them with
``prometheus_client.start_http_server`` or the surrounding web framework.
"""

from sweetspot.monitoring.metrics import (
    CANDIDATES_EXCLUDED_TOTAL,
    DISCOVERY_DURATION,
    DISCOVERY_RUNS_TOTAL,
    PROVIDER_LATENCY,
    PROVIDER_REQUESTS_TOTAL,
    record_discovery_run,
    record_excluded_candidates,
    track_provider_request,
)

__all__ = [
    "CANDIDATES_EXCLUDED_TOTAL",
    "DISCOVERY_DURATION",
    "DISCOVERY_RUNS_TOTAL",
    "PROVIDER_LATENCY",
    "PROVIDER_REQUESTS_TOTAL",
    "record_discovery_run",
    "record_excluded_candidates",
    "track_provider_request",
]
