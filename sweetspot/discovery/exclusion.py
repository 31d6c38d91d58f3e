"""Exclusion policy: drop venues that are not genuine dessert destinations.

Provider category tags are missing or inconsistent for many venues, so a
name denylist (chain convenience stores, supermarkets) backs up the
category check.
"""

from typing import Iterable

from sweetspot.models.schemas import ExclusionRules, VenueCandidate, normalize_text


def is_excluded(candidate: VenueCandidate, rules: ExclusionRules) -> bool:
    """Return True if the candidate matches the category or name denylist."""
    if rules.excluded_categories and any(
        category.lower() in rules.excluded_categories for category in candidate.categories
    ):
        return True

    if rules.excluded_name_patterns:
        name = normalize_text(candidate.name)
        return any(pattern in name for pattern in rules.excluded_name_patterns)

    return False


def filter_excluded(
    candidates: Iterable[VenueCandidate],
    rules: ExclusionRules,
) -> list[VenueCandidate]:
    """Keep the candidates that are not excluded, in their original order."""
    return [candidate for candidate in candidates if not is_excluded(candidate, rules)]
