"""Ordering of surviving candidates."""

from typing import Iterable

from sweetspot.models.schemas import VenueCandidate


def rank_key(candidate: VenueCandidate) -> tuple[float, int]:
    """Sort key: rating then rating count, both descending. Absent counts as zero."""
    rating = candidate.rating if candidate.rating is not None else 0.0
    rating_count = candidate.rating_count if candidate.rating_count is not None else 0
    return (-rating, -rating_count)


def rank(candidates: Iterable[VenueCandidate]) -> list[VenueCandidate]:
    """Order candidates best first.

    sorted() is stable, so candidates with equal keys keep their input order.
    """
    return sorted(candidates, key=rank_key)
