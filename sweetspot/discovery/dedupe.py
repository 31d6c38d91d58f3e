"""Merge candidate lists from several keyword searches by provider id."""

from typing import Iterable

from sweetspot.models.schemas import VenueCandidate


def dedupe(candidates: Iterable[VenueCandidate]) -> list[VenueCandidate]:
    """Collapse candidates sharing a provider id.

    The first record wins, except that a later duplicate carrying a rating
    replaces a kept record without one. Each id keeps the position of its
    first appearance.
    """
    kept: dict[str, VenueCandidate] = {}
    for candidate in candidates:
        existing = kept.get(candidate.provider_id)
        if existing is None:
            kept[candidate.provider_id] = candidate
        elif existing.rating is None and candidate.rating is not None:
            # Reassigning an existing key keeps its insertion position
            kept[candidate.provider_id] = candidate
    return list(kept.values())
