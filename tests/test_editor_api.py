# tests/test_editor_api.py
"""End-to-end editor sessions over HTTP, backed by the JSON store and a fake Spotify."""
import pytest


@pytest.fixture
def existing(client):
    body = {
        "name": "Old",
        "genre": "rock",
        "suggestions": [{"title": "A", "artist": "B"}],
    }
    return client.post("/api/recommendations/", json=body).json()


def _open(client, recommendation_id=None):
    body = {"recommendation_id": recommendation_id} if recommendation_id else None
    response = client.post("/api/editor/", json=body)
    assert response.status_code == 201
    return response.json()


def _change(client, sid, name, value):
    return client.patch(f"/api/editor/{sid}/fields", json={"name": name, "value": value}).json()


def test_create_flow(client, fake_spotify):
    opened = _open(client)
    sid = opened["session_id"]
    view = opened["view"]
    assert view["mode"] == "create"
    assert view["row_count"] == 0
    assert view["submit"]["disabled"] is True

    _change(client, sid, "name", "Chill")
    result = _change(client, sid, "genre", "ambient")
    assert result["accepted"] is True
    assert result["view"]["submit"]["disabled"] is False

    client.post(f"/api/editor/{sid}/rows")
    _change(client, sid, "suggestions[0].title", "Teardrop")

    response = client.post(f"/api/editor/{sid}/submit")
    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"] == "saved"
    assert payload["location"] == "/recommendations"

    toast = client.get("/api/notifications").json()["toast"]
    assert toast["message"] == "Recommendation created."
    rec_id = toast["link"].rsplit("/", 1)[-1]
    stored = client.get(f"/api/recommendations/{rec_id}").json()
    assert stored["suggestions"] == [{"title": "Teardrop", "artist": ""}]


def test_edit_flow_loads_record(client, fake_spotify, existing):
    view = _open(client, existing["id"])["view"]
    assert view["title"] == "Edit Recommendation"
    assert view["fields"]["name"]["value"] == "Old"
    assert view["rows"][0]["artist"]["value"] == "B"
    assert view["submit"]["text"] == "Save"


def test_edit_flow_saves(client, fake_spotify, existing):
    sid = _open(client, existing["id"])["session_id"]
    _change(client, sid, "name", "New")
    payload = client.post(f"/api/editor/{sid}/submit").json()
    assert payload["outcome"] == "saved"
    assert payload["view"]["is_dirty"] is False
    assert client.get("/api/notifications").json()["toast"]["message"] == "Recommendation saved."
    assert client.get(f"/api/recommendations/{existing['id']}").json()["name"] == "New"


def test_save_rejected_by_store_keeps_session_dirty(client, fake_spotify, existing):
    sid = _open(client, existing["id"])["session_id"]
    _change(client, sid, "name", "New")
    client.delete(f"/api/recommendations/{existing['id']}")

    payload = client.post(f"/api/editor/{sid}/submit").json()

    assert payload["outcome"] == "failed"
    assert payload["location"] is None
    assert payload["view"]["is_dirty"] is True
    assert payload["view"]["submit"]["loading"] is False
    toast = client.get("/api/notifications").json()["toast"]
    assert toast == {"message": "Error saving recommendation.", "is_error": True, "link": None, "show": True}


def test_submit_clean_form_conflicts(client, fake_spotify, existing):
    sid = _open(client, existing["id"])["session_id"]
    assert client.post(f"/api/editor/{sid}/submit").status_code == 409


def test_missing_record_reports_load_failure(client, fake_spotify):
    view = _open(client, "nope")["view"]
    assert view["status"] == "load_failed"
    assert view["load_error"]


def test_number_and_option_filtering(client, fake_spotify):
    sid = _open(client)["session_id"]
    assert _change(client, sid, "genre", "polka")["accepted"] is False
    response = client.patch(f"/api/editor/{sid}/fields", json={"name": "unknown", "value": "x"})
    assert response.status_code == 404


def test_rows_over_http(client, fake_spotify, existing):
    sid = _open(client, existing["id"])["session_id"]
    client.post(f"/api/editor/{sid}/rows")
    view = client.post(f"/api/editor/{sid}/rows").json()["view"]
    assert view["row_count"] == 3
    view = client.delete(f"/api/editor/{sid}/rows/0").json()["view"]
    assert view["row_count"] == 2
    assert view["rows"][0]["title"]["value"] == ""
    assert client.delete(f"/api/editor/{sid}/rows/7").status_code == 404
    assert client.delete(f"/api/editor/{sid}/rows").json()["view"]["row_count"] == 1


def test_blur_and_close(client, fake_spotify):
    sid = _open(client)["session_id"]
    view = client.post(f"/api/editor/{sid}/fields/blur", json={"name": "name"}).json()["view"]
    assert view["fields"]["name"]["messages"] == []
    assert client.delete(f"/api/editor/{sid}").status_code == 204
    assert client.get(f"/api/editor/{sid}").status_code == 404


def test_genres_unavailable_still_opens(client, no_spotify):
    view = _open(client)["view"]
    assert view["genres_error"]
    assert view["fields"]["genre"]["options"] == []


def test_empty_notification_slot(client):
    assert client.get("/api/notifications").json()["toast"] is None


def test_session_is_discarded_after_save_navigates(client, state, fake_spotify):
    sid = _open(client)["session_id"]
    _change(client, sid, "name", "Chill")
    _change(client, sid, "genre", "ambient")

    payload = client.post(f"/api/editor/{sid}/submit").json()

    assert payload["outcome"] == "saved"
    assert payload["location"] == "/recommendations"
    assert client.get(f"/api/editor/{sid}").status_code == 404
    assert state.get_editor(sid) is None


def test_non_text_value_is_refused(client, fake_spotify):
    sid = _open(client)["session_id"]
    for value in (123, ["x"], {"a": 1}):
        result = _change(client, sid, "name", value)
        assert result["accepted"] is False
    assert result["view"]["fields"]["name"]["value"] == ""
    assert result["view"]["is_valid"] is False


def test_blank_name_cannot_be_submitted(client, fake_spotify):
    sid = _open(client)["session_id"]
    _change(client, sid, "genre", "ambient")
    view = _change(client, sid, "name", "   ")["view"]
    assert view["is_valid"] is False
    assert view["submit"]["disabled"] is True
    assert client.post(f"/api/editor/{sid}/submit").status_code == 409
