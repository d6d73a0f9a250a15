# fetchers/__init__.py
from core.errors import SourceError

from . import pokeapi

SOURCES = {
    "pokeapi": pokeapi.PokeApiSource,
}


def get_source(name: str):
    key = (name or "").strip().lower()
    factory = SOURCES.get(key)
    if factory is None:
        raise SourceError(f"source:{name}", f"no catalog source registered as '{name}'")
    return factory()
