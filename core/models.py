# core/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import UnknownRangeError

CATEGORY_ALL = "all"
CATEGORY_LEGENDARY = "legendary"

# Inclusive id ranges per generation, plus the combined range.
GEN_RANGES: Dict[str, Tuple[int, int]] = {
    "all": (1, 493),
    "1": (1, 151),
    "2": (152, 251),
    "3": (252, 386),
    "4": (387, 493),
}
DEFAULT_RANGE = "1"
ID_UNIVERSE = range(GEN_RANGES["all"][0], GEN_RANGES["all"][1] + 1)


def resolve_range(name: str) -> Tuple[int, int]:
    key = str(name).strip().lower()
    if key not in GEN_RANGES:
        raise UnknownRangeError(name)
    return GEN_RANGES[key]


@dataclass(frozen=True)
class Entry:
    """
    One catalog entry as returned by the upstream /pokemon/{id} endpoint.
    Immutable once fetched; the entry cache owns it.
    """
    entry_id: int
    name: str
    types: Tuple[str, ...] = ()
    sprite_url: str = ""

    @property
    def display_name(self) -> str:
        return self.name.upper()

    @property
    def unique_types(self) -> List[str]:
        seen: List[str] = []
        for t in self.types:
            if t not in seen:
                seen.append(t)
        return seen

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Entry":
        """
        Build an Entry from the API shape:
          {id, name, types: [{type: {name}}], sprites: {front_default}}
        Raises KeyError/TypeError/ValueError on a malformed payload.
        """
        types = tuple(
            str(t["type"]["name"]) for t in payload.get("types") or []
        )
        sprites = payload.get("sprites") or {}
        return cls(
            entry_id=int(payload["id"]),
            name=str(payload["name"]),
            types=types,
            sprite_url=sprites.get("front_default") or "",
        )


@dataclass(frozen=True)
class FilterCriteria:
    """Raw user input; normalised by the filter engine on every pass."""
    query: str = ""
    category: str = CATEGORY_ALL


@dataclass(frozen=True)
class SpeciesRef:
    name: str
    url: str


@dataclass(frozen=True)
class ClassificationOutcome:
    ref: SpeciesRef
    species_id: Optional[int] = None
    is_legendary: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LegendaryReport:
    """
    Result of one legendary index build: the listing size, every per-item
    outcome, and the listing error if the first phase failed.
    """
    listed: int = 0
    outcomes: List[ClassificationOutcome] = field(default_factory=list)
    listing_error: Optional[str] = None

    @property
    def legendary_ids(self) -> set[int]:
        return {
            o.species_id
            for o in self.outcomes
            if o.ok and o.is_legendary and o.species_id is not None
        }

    @property
    def failures(self) -> List[ClassificationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def classified(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def coverage(self) -> float:
        if not self.listed:
            return 0.0
        return self.classified / self.listed

    @property
    def complete(self) -> bool:
        return self.listing_error is None and not self.failures
