# core/errors.py
from typing import Iterable


class PokedexError(Exception):
    """Base for viewer errors."""


class SourceError(PokedexError):
    """An upstream call failed (transport, status code or payload)."""

    def __init__(self, url: str, detail: str):
        super().__init__(f"Request to {url} failed: {detail}")
        self.url = url
        self.detail = detail


class EntryFetchError(PokedexError):
    def __init__(self, start: int, end: int, failed_ids: Iterable[int]):
        self.start = start
        self.end = end
        self.failed_ids = sorted(failed_ids)
        super().__init__(
            f"Loading range [{start}, {end}] failed for ids {self.failed_ids}"
        )


class UnknownRangeError(PokedexError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown range name '{self.name}'"
