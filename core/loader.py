# core/loader.py
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cache import EntryCache
from .errors import EntryFetchError, SourceError
from .logger import get_logger
from .models import Entry
from .source import CatalogSource

logger = get_logger(__name__)

FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "16"))


class RangeLoader:
    """
    Resolves an inclusive id range to entries, from the cache or the source,
    and publishes the result as the currently loaded sequence.

    Every call takes a generation number; only the most recently issued
    call may replace the loaded sequence and fire on_loaded. Results of
    superseded calls are still returned and cached.
    """

    def __init__(
        self,
        source: CatalogSource,
        cache: EntryCache,
        on_loaded: Optional[Callable[[Sequence[Entry]], None]] = None,
        workers: int = FETCH_WORKERS,
    ):
        self.source = source
        self.cache = cache
        self.on_loaded = on_loaded
        self.workers = max(1, workers)
        self._lock = threading.Lock()
        self._generation = 0
        self._loaded: Tuple[Entry, ...] = ()

    @property
    def loaded(self) -> Tuple[Entry, ...]:
        return self._loaded

    @property
    def generation(self) -> int:
        return self._generation

    def load(self, start: int, end: int) -> List[Entry]:
        if start < 1 or end < start:
            raise ValueError(f"Invalid id range [{start}, {end}]")

        with self._lock:
            self._generation += 1
            generation = self._generation

        ids = range(start, end + 1)
        resolved: Dict[int, Entry] = {}
        misses: List[int] = []
        with self._lock:
            for entry_id in ids:
                entry = self.cache.get(entry_id)
                if entry is None:
                    misses.append(entry_id)
                else:
                    resolved[entry_id] = entry

        logger.info(
            "Loading range [%d, %d]: %d cached, %d to fetch (generation %d).",
            start, end, len(resolved), len(misses), generation,
        )

        if misses:
            self._fetch_missing(start, end, misses, resolved)

        entries = [resolved[entry_id] for entry_id in ids]

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding result of superseded load [%d, %d] (generation %d < %d).",
                    start, end, generation, self._generation,
                )
                return entries
            self._loaded = tuple(entries)
            published = self._loaded

        if self.on_loaded is not None:
            self.on_loaded(published)
        return entries

    def _fetch_missing(
        self, start: int, end: int, misses: List[int], resolved: Dict[int, Entry]
    ) -> None:
        failed: List[int] = []
        fetched: Dict[int, Entry] = {}

        # Submit every miss before waiting on any of them.
        with ThreadPoolExecutor(max_workers=min(self.workers, len(misses))) as executor:
            futures: Dict[int, Future] = {
                entry_id: executor.submit(self.source.fetch_entry, entry_id)
                for entry_id in misses
            }
            for entry_id, future in futures.items():
                try:
                    fetched[entry_id] = future.result()
                except SourceError as e:
                    logger.error("Fetching entry %d failed: %s", entry_id, e)
                    failed.append(entry_id)

        with self._lock:
            for entry_id, entry in fetched.items():
                self.cache.put(entry_id, entry)
        resolved.update(fetched)

        if failed:
            raise EntryFetchError(start, end, failed)
