"""
Nearby Venue Discovery.

Pipeline stages, each a pure function over candidates:
- dedupe: Merge keyword result lists by provider id
- exclusion: Drop denylisted categories and chain brands
- ranking: Order by rating, then rating count
- normalizer: Map candidates onto Venue records

The DiscoveryCoordinator runs the keyword searches concurrently and
composes the stages.
"""

from sweetspot.discovery.coordinator import DiscoveryCoordinator
from sweetspot.discovery.dedupe import dedupe
from sweetspot.discovery.exclusion import filter_excluded, is_excluded
from sweetspot.discovery.normalizer import normalize
from sweetspot.discovery.ranking import rank, rank_key

__all__ = [
    "DiscoveryCoordinator",
    "dedupe",
    "filter_excluded",
    "is_excluded",
    "normalize",
    "rank",
    "rank_key",
]
