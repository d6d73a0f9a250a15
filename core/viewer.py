# core/viewer.py
from typing import List, Optional, Sequence

from .cache import EntryCache
from .filters import apply_filters
from .legendary import LegendaryIndex
from .loader import RangeLoader
from .logger import get_logger
from .models import DEFAULT_RANGE, Entry, FilterCriteria, LegendaryReport, resolve_range
from .render import PresentationSink
from .source import CatalogSource

logger = get_logger(__name__)


class PokedexViewer:
    """
    Owns one viewer's state: entry cache, legendary index, the currently
    loaded sequence and the active filter criteria. Every load and every
    criteria change ends in a full re-render through the sink.
    """

    def __init__(
        self,
        source: CatalogSource,
        sink: PresentationSink,
        cache: Optional[EntryCache] = None,
        index: Optional[LegendaryIndex] = None,
        loader: Optional[RangeLoader] = None,
        criteria: Optional[FilterCriteria] = None,
    ):
        self.source = source
        self.sink = sink
        self.cache = cache if cache is not None else EntryCache()
        self.index = index if index is not None else LegendaryIndex()
        self.criteria = criteria or FilterCriteria()
        self.loader = loader or RangeLoader(source, self.cache)
        self.loader.on_loaded = self._on_loaded
        self.visible: List[Entry] = []

    @property
    def loaded(self) -> Sequence[Entry]:
        return self.loader.loaded

    def start(self, default_range: str = DEFAULT_RANGE) -> LegendaryReport:
        report = self.index.build(self.source)
        self.select_range(default_range)
        return report

    def select_range(self, name: str) -> List[Entry]:
        start, end = resolve_range(name)
        logger.info("Range '%s' selected: [%d, %d]", name, start, end)
        return self.load_range(start, end)

    def load_range(self, start: int, end: int) -> List[Entry]:
        return self.loader.load(start, end)

    def set_query(self, text: str) -> List[Entry]:
        return self.set_criteria(
            FilterCriteria(query=text, category=self.criteria.category)
        )

    def set_category(self, value: str) -> List[Entry]:
        return self.set_criteria(
            FilterCriteria(query=self.criteria.query, category=value)
        )

    def set_criteria(self, criteria: FilterCriteria) -> List[Entry]:
        self.criteria = criteria
        return self.refresh()

    def refresh(self) -> List[Entry]:
        self.visible = apply_filters(self.loader.loaded, self.criteria, self.index.ids)
        logger.debug(
            "Filter pass: %d of %d entries visible (query=%r, category=%r).",
            len(self.visible), len(self.loader.loaded),
            self.criteria.query, self.criteria.category,
        )
        self.sink.show(self.visible, self.criteria)
        return self.visible

    def _on_loaded(self, loaded: Sequence[Entry]) -> None:
        self.refresh()
