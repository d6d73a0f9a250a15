from conftest import make_entry

from core.filters import apply_filters, is_legendary_mode, normalize_query
from core.models import FilterCriteria


def _loaded():
    return [
        make_entry(4, "charmander"),
        make_entry(6, "charizard"),
        make_entry(7, "squirtle"),
    ]


def test_empty_query_and_all_is_identity():
    loaded = _loaded()
    assert apply_filters(loaded, FilterCriteria(), {6}) == loaded


def test_query_substring_keeps_order():
    result = apply_filters(_loaded(), FilterCriteria(query="char"), set())
    assert [e.name for e in result] == ["charmander", "charizard"]


def test_query_is_trimmed_and_case_insensitive():
    result = apply_filters(_loaded(), FilterCriteria(query="  ChAR  "), set())
    assert [e.entry_id for e in result] == [4, 6]


def test_whitespace_query_passes_everything():
    loaded = _loaded()
    assert apply_filters(loaded, FilterCriteria(query="   "), set()) == loaded


def test_legendary_mode_on_first_generation():
    loaded = [make_entry(i) for i in range(1, 152)]
    result = apply_filters(loaded, FilterCriteria(category="legendary"), {150, 144})
    assert [e.entry_id for e in result] == [144, 150]


def test_unknown_category_passes_everything():
    loaded = _loaded()
    assert apply_filters(loaded, FilterCriteria(category="mythical"), {4}) == loaded


def test_filters_intersect():
    result = apply_filters(_loaded(), FilterCriteria(query="char", category="legendary"), {6, 7})
    assert [e.entry_id for e in result] == [6]


def test_legendary_mode_with_empty_index_shows_nothing():
    assert apply_filters(_loaded(), FilterCriteria(category="legendary"), frozenset()) == []


def test_apply_does_not_mutate_input():
    loaded = _loaded()
    apply_filters(loaded, FilterCriteria(query="squ"), set())
    assert len(loaded) == 3


def test_helpers():
    assert normalize_query(None) == ""
    assert normalize_query(" Mew ") == "mew"
    assert is_legendary_mode(" Legendary ")
    assert not is_legendary_mode("all")
