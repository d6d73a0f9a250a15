# core/cache.py
import os
from collections import OrderedDict
from typing import List, Optional

from .models import Entry
from .logger import get_logger

logger = get_logger(__name__)

# 0 keeps the cache unbounded; the id universe is small and fixed.
ENTRY_CACHE_MAX = int(os.getenv("ENTRY_CACHE_MAX", "0"))


class EntryCache:
    """
    id -> Entry mapping shared by every range load of one viewer.

    Entries are immutable and keyed by an authoritative id, so a repeated
    put for an id already present keeps the first Entry. With max_entries
    set, the least recently used entry is evicted once the bound is hit.
    """

    def __init__(self, max_entries: int = ENTRY_CACHE_MAX):
        self.max_entries = max(0, max_entries)
        self._entries: "OrderedDict[int, Entry]" = OrderedDict()

    def get(self, entry_id: int) -> Optional[Entry]:
        entry = self._entries.get(entry_id)
        if entry is not None and self.max_entries:
            self._entries.move_to_end(entry_id)
        return entry

    def put(self, entry_id: int, entry: Entry) -> None:
        if entry_id in self._entries:
            return
        self._entries[entry_id] = entry
        if self.max_entries and len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Entry cache full (%d); evicted id %d.", self.max_entries, evicted)

    def ids(self) -> List[int]:
        return sorted(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
