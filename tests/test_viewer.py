import pytest
from conftest import FakeSource, make_entry

from core.errors import EntryFetchError, UnknownRangeError
from core.legendary import LegendaryIndex
from core.models import FilterCriteria
from core.render import MemorySink
from core.viewer import PokedexViewer


@pytest.fixture
def viewer(species_source):
    species_source.entries = {
        4: make_entry(4, "charmander", ("fire",)),
        6: make_entry(6, "charizard", ("fire", "flying")),
        7: make_entry(7, "squirtle", ("water",)),
        144: make_entry(144, "articuno"),
        150: make_entry(150, "mewtwo"),
    }
    return PokedexViewer(species_source, MemorySink(), index=LegendaryIndex(workers=1))


def test_start_builds_index_and_loads_first_generation(viewer):
    report = viewer.start()
    assert report.complete
    assert viewer.index.ids == frozenset({144, 150})
    assert [e.entry_id for e in viewer.loaded] == list(range(1, 152))
    assert viewer.sink.renders == 1
    assert len(viewer.sink.entries) == 151


def test_select_named_ranges(viewer):
    viewer.select_range("2")
    assert viewer.loaded[0].entry_id == 152
    assert viewer.loaded[-1].entry_id == 251
    viewer.select_range("all")
    assert len(viewer.loaded) == 493


def test_unknown_range_name(viewer):
    with pytest.raises(UnknownRangeError):
        viewer.select_range("5")


def test_query_and_category_rerender(viewer):
    viewer.start()
    viewer.set_query("CHAR")
    assert [e.entry_id for e in viewer.sink.entries] == [4, 6]
    viewer.set_category("legendary")
    assert viewer.sink.entries == []
    viewer.set_query("")
    assert [e.entry_id for e in viewer.sink.entries] == [144, 150]
    assert viewer.criteria == FilterCriteria(query="", category="legendary")
    assert viewer.sink.renders == 4


def test_load_applies_current_criteria(viewer):
    viewer.start()
    viewer.set_query("mew")
    viewer.select_range("1")
    assert [e.entry_id for e in viewer.visible] == [150]


def test_failed_load_keeps_previous_view(viewer):
    viewer.start()
    renders = viewer.sink.renders
    viewer.source.fail_ids = {200}
    with pytest.raises(EntryFetchError):
        viewer.select_range("2")
    assert viewer.loaded[-1].entry_id == 151
    assert viewer.sink.renders == renders


def test_viewers_share_no_state():
    a = PokedexViewer(FakeSource(), MemorySink())
    b = PokedexViewer(FakeSource(), MemorySink())
    a.load_range(1, 3)
    assert len(a.cache) == 3
    assert len(b.cache) == 0
    assert b.loaded == ()


def test_listing_failure_still_loads(species_source):
    species_source.fail_listing = True
    viewer = PokedexViewer(species_source, MemorySink())
    report = viewer.start()
    assert report.listing_error
    assert len(viewer.loaded) == 151
    viewer.set_category("legendary")
    assert viewer.visible == []
