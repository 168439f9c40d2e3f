"""HTTP routes, exercised through FastAPI's test client."""

import threading

import pytest
from conftest import ARTIST, DATE, LYRICS, TITLE
from fastapi.testclient import TestClient
from lyricle import config
from lyricle.errors import GeniusApiError
from lyricle.main import create_app, run
from lyricle.models import GeniusMetadata
from lyricle.store import SongRepository

HEADERS = {"x-user-id": "player-one"}


@pytest.fixture()
def client():
    with TestClient(create_app(SongRepository())) as test_client:
        yield test_client


@pytest.fixture()
def scheduled(client):
    res = client.post("/api/admin/songs", json={"title": TITLE, "artist": ARTIST, "lyrics": LYRICS})
    assert res.status_code == 201
    song = res.json()
    res = client.put(f"/api/admin/games/{DATE}", json={"song_id": song["id"]})
    assert res.status_code == 200
    return res.json()


def _title(state):
    return "".join(t["value"] for t in state["masked"]["title"])


class TestPlayerRoutes:
    def test_get_game_state(self, client, scheduled):
        res = client.get(f"/api/games/{DATE}", headers=HEADERS)
        assert res.status_code == 200
        state = res.json()
        assert state["id"] == scheduled["id"]
        assert _title(state) == "_____ __ ___ _._._."
        assert "song" not in state

    def test_guess_flow_until_win(self, client, scheduled):
        for word in ("party", "in", "the", "u", "s", "a", "miley", "cyrus"):
            res = client.post(f"/api/games/{DATE}/guess", json={"guess": word}, headers=HEADERS)
            assert res.status_code == 200
        state = res.json()
        assert state["song"] == {"title": TITLE, "artist": ARTIST}
        assert _title(state) == TITLE

    def test_duplicate_guess(self, client, scheduled):
        client.post(f"/api/games/{DATE}/guess", json={"guess": "party"}, headers=HEADERS)
        res = client.post(f"/api/games/{DATE}/guess", json={"guess": "Party"}, headers=HEADERS)
        assert res.status_code == 400
        assert res.json()["error"] == "DUPLICATE_GUESS"

    def test_missing_player_header(self, client, scheduled):
        res = client.get(f"/api/games/{DATE}")
        assert res.status_code == 400
        assert res.json()["field"] == "player_id"

    def test_bad_date(self, client):
        res = client.get("/api/games/2025-1-1", headers=HEADERS)
        assert res.status_code == 400
        assert res.json()["field"] == "date"

    def test_unknown_game(self, client):
        res = client.get("/api/games/2030-01-01", headers=HEADERS)
        assert res.status_code == 404
        assert res.json()["error"] == "GAME_NOT_FOUND"

    def test_month(self, client, scheduled):
        res = client.get("/api/games/month/2025-01", headers=HEADERS)
        assert res.status_code == 200
        assert [s["date"] for s in res.json()] == [DATE]

    def test_stats(self, client, scheduled):
        client.post(f"/api/games/{DATE}/guess", json={"guess": "party"}, headers=HEADERS)
        client.post(f"/api/games/{DATE}/guess", json={"guess": "wrong"}, headers=HEADERS)
        res = client.get("/api/games/stats", params={"date": DATE})
        assert res.status_code == 200
        stats = res.json()
        assert stats["total_guesses"] == 2
        assert stats["correct_guesses"] == 1
        assert stats["average_attempts"] == 2


class TestAdminRoutes:
    def test_schedule_unknown_song(self, client):
        res = client.put(f"/api/admin/games/{DATE}", json={"song_id": "missing"})
        assert res.status_code == 404
        assert res.json()["error"] == "SONG_NOT_FOUND"

    def test_delete_game(self, client, scheduled):
        assert client.delete(f"/api/admin/games/{DATE}").status_code == 204
        assert client.delete(f"/api/admin/games/{DATE}").status_code == 404

    def test_song_from_track_metadata(self, client):
        body = {
            "lyrics": LYRICS,
            "track": {"id": "t1", "name": TITLE, "artists": [{"name": ARTIST}]},
        }
        res = client.post("/api/admin/songs", json=body)
        assert res.status_code == 201
        assert res.json()["artist"] == ARTIST

    def test_song_without_title(self, client):
        res = client.post("/api/admin/songs", json={"artist": ARTIST, "lyrics": LYRICS})
        assert res.status_code == 400
        assert res.json()["field"] == "title"

    def test_song_from_genius(self, client, monkeypatch):
        threads = {}

        async def fake_search(title, artist):
            threads["loop"] = threading.get_ident()
            return GeniusMetadata(url="https://genius.com/p", title=title, artist=artist)

        async def fake_fetch(url):
            return LYRICS

        services = client.app.state.services
        create = services.songs.create

        def recording_create(*args, **kwargs):
            threads["store"] = threading.get_ident()
            return create(*args, **kwargs)

        monkeypatch.setattr("lyricle.genius.search", fake_search)
        monkeypatch.setattr("lyricle.genius.fetch_lyrics", fake_fetch)
        monkeypatch.setattr(services.songs, "create", recording_create)

        res = client.post("/api/admin/songs", json={"title": TITLE, "artist": ARTIST})
        assert res.status_code == 201
        song = res.json()
        assert song["lyrics"] == LYRICS
        assert song["genius"]["url"] == "https://genius.com/p"
        assert threads["store"] != threads["loop"]

    def test_genius_outage(self, client, monkeypatch):
        async def failing_search(title, artist):
            raise GeniusApiError("503 Service Unavailable")

        monkeypatch.setattr("lyricle.genius.search", failing_search)
        res = client.post("/api/admin/songs", json={"title": TITLE, "artist": ARTIST})
        assert res.status_code == 502
        assert res.json()["error"] == "GENIUS_API_ERROR"


class TestRun:
    def test_serves_app_factory(self, monkeypatch):
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: calls.append((args, kwargs)))
        monkeypatch.setattr(config, "HOST", "0.0.0.0")
        monkeypatch.setattr(config, "PORT", 9000)

        run()

        assert calls == [
            (("lyricle.main:create_app",), {"factory": True, "host": "0.0.0.0", "port": 9000})
        ]
