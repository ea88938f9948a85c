# tests/conftest.py
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from ratify import config
from ratify.api.app import app
from ratify.api.state import AppState, get_state
from ratify.core import rating_store, recommendation_store, spotify_client
from ratify.models.playlist import GenreOption

GENRES = ["ambient", "hip-hop", "rock"]


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point every JSON store at a per-test directory."""
    monkeypatch.setattr(config, "DATA_DIR", tmp_path)
    monkeypatch.setattr(recommendation_store, "RECOMMENDATIONS_PATH", tmp_path / "recommendations.json")
    monkeypatch.setattr(rating_store, "RATINGS_PATH", tmp_path / "ratings.json")
    return tmp_path


@pytest.fixture
def fake_spotify(monkeypatch):
    """A Mock standing in for spotipy.Spotify, returned by get_spotify_client()."""
    sp = Mock()
    sp.recommendation_genre_seeds.return_value = {"genres": list(GENRES)}
    monkeypatch.setattr(spotify_client, "get_spotify_client", lambda: sp)
    return sp


@pytest.fixture
def no_spotify(monkeypatch):
    monkeypatch.setattr(spotify_client, "get_spotify_client", lambda: None)


@pytest.fixture
def state():
    fresh = AppState()
    app.dependency_overrides[get_state] = lambda: fresh
    yield fresh
    app.dependency_overrides.pop(get_state, None)


@pytest.fixture
def client(state):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def genre_options():
    return [GenreOption(value=g, label=spotify_client.genre_label(g)) for g in GENRES]

