# tests/test_rows.py
import pytest

from ratify.forms.rows import SuggestionRows
from ratify.forms.state import FormState
from ratify.models.recommendation import Suggestion


def _loaded(suggestions):
    state = FormState()
    state.reset({"name": "Old", "genre": "rock", "suggestions": suggestions})
    rows = SuggestionRows(state.control)
    rows.seed()
    return state, rows


def test_seed_matches_loaded_suggestions():
    state, rows = _loaded([{"title": "A", "artist": "B"}, {"title": "C", "artist": "D"}])
    assert len(rows) == 2
    rendered = rows.render()
    assert [(r["title"]["value"], r["artist"]["value"]) for r in rendered] == [("A", "B"), ("C", "D")]
    assert rendered[1]["title"]["name"] == "suggestions[1].title"


def test_add_keeps_existing_values():
    state, rows = _loaded([{"title": "A", "artist": "B"}])
    rows.add()
    assert len(rows) == 2
    assert rows.values() == [Suggestion("A", "B"), Suggestion("", "")]
    assert state.is_dirty is True


def test_add_from_empty_create_form():
    state = FormState()
    rows = SuggestionRows(state.control)
    rows.seed()
    assert len(rows) == 0
    rows.add()
    assert state.get_values() == {"suggestions": [{"title": "", "artist": ""}]}


def test_remove_last_row_drops_its_values():
    state, rows = _loaded([{"title": "A", "artist": "B"}, {"title": "C", "artist": "D"}])
    assert rows.remove() is True
    assert len(rows) == 1
    assert state.get_values()["suggestions"] == [{"title": "A", "artist": "B"}]


def test_remove_specific_row_keeps_other_keys():
    state, rows = _loaded(
        [{"title": "A", "artist": "1"}, {"title": "B", "artist": "2"}, {"title": "C", "artist": "3"}]
    )
    keys = rows.keys
    rows.remove(0)
    assert rows.keys == keys[1:]
    assert [s.title for s in rows.values()] == ["B", "C"]


def test_remove_on_empty_is_noop():
    state = FormState()
    rows = SuggestionRows(state.control)
    assert rows.remove() is False
    assert len(rows) == 0


def test_remove_out_of_range_raises():
    state, rows = _loaded([{"title": "A", "artist": "B"}])
    with pytest.raises(IndexError):
        rows.remove(3)


def test_trailing_empty_rows_are_kept_in_payload():
    state, rows = _loaded([{"title": "A", "artist": "B"}])
    rows.add()
    rows.add()
    assert len(state.get_values()["suggestions"]) == 3


def test_editing_a_row_through_its_field():
    state, rows = _loaded([{"title": "A", "artist": "B"}])
    title, artist = rows.fields(0)
    artist.change("Massive Attack")
    assert state.get_value("suggestions[0].artist") == "Massive Attack"


def test_render_placeholders_while_loading():
    state, rows = _loaded([{"title": "A", "artist": "B"}])
    rendered = rows.render(is_loading=True)
    assert rendered[0]["title"]["kind"] == "placeholder"
