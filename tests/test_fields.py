# tests/test_fields.py
from unittest.mock import Mock

import pytest

from ratify.forms.errors import MissingControlError
from ratify.forms.fields import MAX_TEXT_LENGTH, SelectField, TextField, is_safe_number_value
from ratify.forms.state import FormState


@pytest.fixture
def form():
    return FormState()


@pytest.mark.parametrize("text", ["", "1", "-1", "+2", "1.", "1.5", ".5", "-"])
def test_safe_number_accepts_partial_numbers(text):
    assert is_safe_number_value(text) is True


@pytest.mark.parametrize("text", ["1.5e", "1..2", "abc", "1-", "99999999999999999999", None])
def test_safe_number_rejects(text):
    assert is_safe_number_value(text) is False


def test_field_requires_control():
    with pytest.raises(MissingControlError):
        TextField("name", None)


def test_number_only_keystrokes(form):
    field = TextField("bpm", form.control, is_number_only=True)
    accepted = [field.change(v) for v in ("1", "1.", "1.5", "1.5e")]
    assert accepted == [True, True, True, False]
    assert form.get_value("bpm") == "1.5"


def test_number_only_allows_lone_decimal_point(form):
    field = TextField("bpm", form.control, is_number_only=True)
    assert field.change(".") is True
    assert field.value == "."


def test_text_longer_than_limit_is_rejected(form):
    field = TextField("description", form.control)
    assert field.change("x" * (MAX_TEXT_LENGTH + 1)) is False
    assert field.change("x" * MAX_TEXT_LENGTH) is True


def test_change_calls_callbacks_with_id_and_value(form):
    on_change = Mock()
    on_parent_change = Mock()
    field = TextField(
        "name", form.control, id="name", on_change=on_change, on_parent_change=on_parent_change
    )
    field.change("Chill")
    on_change.assert_called_once_with("Chill")
    on_parent_change.assert_called_once_with("name", "Chill")


def test_rejected_change_skips_callbacks(form):
    on_parent_change = Mock()
    field = TextField("bpm", form.control, is_number_only=True, on_parent_change=on_parent_change)
    field.change("abc")
    on_parent_change.assert_not_called()


def test_blur_fires_parent_hook_only_without_error(form):
    on_parent_blur = Mock()
    field = TextField(
        "name", form.control, rules={"required": "Name is required."}, on_parent_blur=on_parent_blur
    )
    field.change("")
    field.blur()
    on_parent_blur.assert_not_called()
    assert form.is_touched("name")

    field.change("Chill")
    field.blur()
    on_parent_blur.assert_called_once_with("name", "Chill")


def test_loading_renders_placeholder_and_writes_nothing(form):
    field = TextField("name", form.control, is_loading=True, value="preset")
    assert field.render() == {"kind": "placeholder", "width": 50}
    assert field.change("typed") is False
    assert form.get_value("name") is None
    assert form.is_registered("name") is False

    field.is_loading = False
    assert form.get_value("name") == "preset"
    assert field.render()["kind"] == "text"


def test_sync_mirrors_external_value(form):
    field = TextField("name", form.control)
    field.sync("From outside")
    assert form.get_value("name") == "From outside"
    assert form.is_dirty is True


def test_error_sources_are_independent(form):
    field = TextField(
        "name",
        form.control,
        rules={"required": "Name is required."},
        is_invalid=lambda error: field.value == "bad",
        custom_error_message="Not that one.",
    )
    field.change("bad")
    view = field.render()
    assert view["error"] is True
    assert view["messages"] == ["Not that one."]

    field.change("")
    assert field.render()["messages"] == ["Name is required."]


def test_render_reports_required_and_style(form):
    view = TextField("name", form.control, label="Name", rules={"required": "Name is required."}).render()
    assert view["required"] is True
    assert view["label"] == "Name"
    assert view["style"]["minWidth"] == 75
    assert view["max_length"] == MAX_TEXT_LENGTH

    number = TextField("bpm", form.control, is_number_only=True, max_width=40).render()
    assert number["style"]["maxWidth"] == 40
    assert number["input_mode"] == "numeric"


def test_select_placeholder_while_options_load(form, genre_options):
    field = SelectField("genre", form.control, options_loading=True)
    assert field.render()["kind"] == "placeholder"
    assert field.change("rock") is False

    field.set_options(genre_options)
    view = field.render()
    assert view["kind"] == "select"
    assert {"value": "hip-hop", "label": "Hip Hop"} in view["options"]


def test_select_only_accepts_known_options(form, genre_options):
    field = SelectField("genre", form.control, options=genre_options)
    assert field.change("polka") is False
    assert field.change("ambient") is True
    assert field.change("") is True


@pytest.mark.parametrize("value", [123, 1.5, ["x"], {"a": 1}, True])
def test_text_field_refuses_non_text(form, value):
    field = TextField("name", form.control, rules={"required": True})
    assert field.change(value) is False
    assert field.value == ""
    assert form.is_valid is False


def test_number_only_field_refuses_raw_numbers(form):
    field = TextField("bpm", form.control, is_number_only=True)
    assert field.change(120) is False
    assert field.change("120") is True
