# core/filters.py
from typing import AbstractSet, List, Sequence

from .models import CATEGORY_LEGENDARY, Entry, FilterCriteria


def normalize_query(text: str | None) -> str:
    return (text or "").strip().casefold()


def is_legendary_mode(category: str | None) -> bool:
    return (category or "").strip().lower() == CATEGORY_LEGENDARY


def apply_filters(
    loaded: Sequence[Entry],
    criteria: FilterCriteria,
    legendary_ids: AbstractSet[int],
) -> List[Entry]:
    """
    Filtered view of the loaded sequence, order preserved.
    - non-empty query: keep names containing it (case-insensitive substring)
    - "legendary" category: keep ids in legendary_ids; any other value keeps all
    Both filters apply together when both are active.
    """
    filtered = list(loaded)

    term = normalize_query(criteria.query)
    if term:
        filtered = [e for e in filtered if term in e.name.casefold()]

    if is_legendary_mode(criteria.category):
        filtered = [e for e in filtered if e.entry_id in legendary_ids]

    return filtered
