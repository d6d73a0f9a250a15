# core/source.py
from typing import Any, Dict, List, Protocol

from .models import Entry, SpeciesRef


class CatalogSource(Protocol):
    """
    Upstream data source. Every method raises SourceError on failure;
    nothing is retried.
    """

    def list_species(self, limit: int) -> List[SpeciesRef]:
        ...

    def fetch_species(self, url: str) -> Dict[str, Any]:
        ...

    def fetch_entry(self, entry_id: int) -> Entry:
        ...
