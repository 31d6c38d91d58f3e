"""
SweetSpot Test Suite.

- unit/: Pipeline stages, models, settings, provider clients
- integration/: Coordinator driving the Google Places client over a mocked transport
- conftest.py: Shared fixtures and test configuration

Run tests with: pytest
"""
