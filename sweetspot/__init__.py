"""
SweetSpot - nearby dessert venue discovery.

This package contains the venue discovery pipeline behind the shop finder:
- collectors: Place-search provider clients (Google Places)
- discovery: Fan-out coordinator plus dedupe, exclusion, ranking and
  normalization stages
- models: Pydantic models for requests, candidates and venues
- config: Pydantic settings and exclusion rule loading
- core: Exceptions, logging setup and the dependency container
- monitoring: Prometheus metrics
"""

__version__ = "0.1.0"
