# tests/conftest.py

"""Fixtures and an in-memory catalog source for the test suite"""

import threading
import time
from collections import Counter

import pytest

from core.errors import SourceError
from core.models import Entry, SpeciesRef

NAMES = {
    1: "bulbasaur",
    4: "charmander",
    6: "charizard",
    7: "squirtle",
    144: "articuno",
    150: "mewtwo",
}


def make_entry(entry_id, name=None, types=("normal",)):
    name = name or NAMES.get(entry_id, f"mon-{entry_id}")
    return Entry(
        entry_id=entry_id,
        name=name,
        types=tuple(types),
        sprite_url=f"https://img.example/{entry_id}.png",
    )


class FakeSource:
    """
    Catalog source with call counting, per-id latency and injectable
    failures. Unknown ids get a generated entry.
    """

    def __init__(self, entries=None, species=None, latency=None, fail_ids=(), fail_urls=()):
        self.entries = dict(entries or {})
        self.species = dict(species or {})  # url -> payload
        self.latency = dict(latency or {})
        self.fail_ids = set(fail_ids)
        self.fail_urls = set(fail_urls)
        self.fail_listing = False
        self.entry_calls = Counter()
        self.species_calls = Counter()
        self.listing_calls = 0
        self._lock = threading.Lock()

    def list_species(self, limit):
        with self._lock:
            self.listing_calls += 1
        if self.fail_listing:
            raise SourceError("fake://species", "listing down")
        refs = [SpeciesRef(name=f"s{i}", url=url) for i, url in enumerate(self.species)]
        return refs[:limit]

    def fetch_species(self, url):
        with self._lock:
            self.species_calls[url] += 1
        if url in self.fail_urls:
            raise SourceError(url, "species down")
        return self.species[url]

    def fetch_entry(self, entry_id):
        with self._lock:
            self.entry_calls[entry_id] += 1
        delay = self.latency.get(entry_id)
        if delay:
            time.sleep(delay)
        if entry_id in self.fail_ids:
            raise SourceError(f"fake://pokemon/{entry_id}", "entry down")
        return self.entries.get(entry_id) or make_entry(entry_id)

    @property
    def total_entry_calls(self):
        return sum(self.entry_calls.values())


@pytest.fixture
def source():
    return FakeSource(entries={i: make_entry(i) for i in NAMES})


@pytest.fixture
def species_source():
    species = {
        "fake://species/1": {"id": 1, "is_legendary": False},
        "fake://species/144": {"id": 144, "is_legendary": True},
        "fake://species/150": {"id": 150, "is_legendary": True},
        "fake://species/7": {"id": 7, "is_legendary": False},
    }
    return FakeSource(species=species)
