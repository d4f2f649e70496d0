"""Tests for the tournament HTTP API."""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from decide2watch.config import Settings
from decide2watch.main import create_app
from decide2watch.services.tmdb import TmdbClient


def _catalog(request: httpx.Request) -> httpx.Response:
    """Minimal TMDB: 20 trending movies, and details for any of them."""
    path = request.url.path
    if path.endswith("/trending/movie/week"):
        results = [
            {
                "id": i,
                "title": f"Movie {i}",
                "poster_path": None,
                "backdrop_path": None,
                "overview": "Plot.",
                "vote_average": 7.0,
                "vote_count": 5,
                "genre_ids": [18],
                "release_date": "2020-01-01",
                "popularity": 10.0,
            }
            for i in range(1, 21)
        ]
        return httpx.Response(200, json={"page": 1, "results": results, "total_pages": 1})
    if path.startswith("/3/movie/"):
        return httpx.Response(200, json={"runtime": 95, "credits": {"cast": []}})
    return httpx.Response(404, json={"status_message": "not found"})


@pytest.fixture
async def api(settings: Settings):
    app = create_app(settings)
    http = httpx.AsyncClient(transport=httpx.MockTransport(_catalog))
    app.state.tmdb = TmdbClient.from_settings(settings, http_client=http)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await http.aclose()


async def _start(client: AsyncClient, size: int = 8) -> dict:
    resp = await client.post("/api/tournament/config", json={"bracket_size": size})
    assert resp.status_code == 200
    resp = await client.post("/api/tournament/start")
    assert resp.status_code == 200
    return resp.json()


class TestTournamentAPI:
    """Test the /api/tournament endpoints against a mocked catalog."""

    async def test_initial_state(self, api) -> None:
        resp = await api.get("/api/tournament")
        assert resp.status_code == 200
        data = resp.json()
        assert data["screen"] == "configuring"
        assert data["rounds"] == []
        assert data["champion"] is None
        assert data["progress"] == 0.0

    async def test_set_config(self, api) -> None:
        resp = await api.post(
            "/api/tournament/config",
            json={"content_filter": "tv", "bracket_size": 32, "genre_id": 18},
        )
        data = resp.json()
        assert data["config"]["content_filter"] == "tv"
        assert data["config"]["bracket_size"] == 32
        assert data["config"]["genre_id"] == 18

    async def test_unsupported_size_reports_error(self, api) -> None:
        resp = await api.post("/api/tournament/config", json={"bracket_size": 10})
        assert resp.status_code == 200
        assert "10" in resp.json()["error"]

    async def test_invalid_filter_is_422(self, api) -> None:
        resp = await api.post("/api/tournament/config", json={"content_filter": "books"})
        assert resp.status_code == 422

    async def test_start_opens_bracket(self, api) -> None:
        data = await _start(api)
        assert data["screen"] == "in_progress"
        assert len(data["rounds"]) == 1
        assert data["rounds"][0]["name"] == "Quarterfinals"
        assert len(data["rounds"][0]["matchups"]) == 4
        assert data["rounds"][0]["matchups"][0]["a"]["runtime"] == 95

    async def test_start_with_short_supply(self, api) -> None:
        data = await _start(api, size=32)
        assert data["screen"] == "configuring"
        assert "got 20" in data["error"]

    async def test_full_bracket(self, api) -> None:
        await _start(api)
        data = {}
        for _ in range(7):
            resp = await api.post("/api/tournament/pick", json={"side": "a"})
            assert resp.status_code == 200
            data = resp.json()
        assert data["screen"] == "complete"
        assert data["champion"] is not None
        assert data["progress"] == 1.0
        assert data["champion"]["id"] == data["rounds"][0]["matchups"][0]["a"]["id"]

    async def test_pick_outside_bracket_is_409(self, api) -> None:
        resp = await api.post("/api/tournament/pick", json={"side": "a"})
        assert resp.status_code == 409

    async def test_pick_bad_side_is_422(self, api) -> None:
        await _start(api)
        resp = await api.post("/api/tournament/pick", json={"side": "c"})
        assert resp.status_code == 422

    async def test_reset(self, api) -> None:
        await _start(api)
        await api.post("/api/tournament/pick", json={"side": "b"})
        resp = await api.post("/api/tournament/reset")
        data = resp.json()
        assert data["screen"] == "configuring"
        assert data["rounds"] == []
        assert data["config"]["bracket_size"] == 16


class TestStartWithMalformedCatalog:
    """A catalog answering 200 with a non-JSON body."""

    async def test_reports_error_and_allows_retry(self, settings: Settings) -> None:
        app = create_app(settings)
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        app.state.tmdb = TmdbClient.from_settings(settings, http_client=http)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/api/tournament/start")
            assert resp.status_code == 200
            data = resp.json()
            assert data["screen"] == "configuring"
            assert data["error"].startswith("Couldn't load titles")

            resp = await client.post("/api/tournament/start")
            assert resp.status_code == 200
        await http.aclose()


class TestStartWithoutKey:
    """POST /api/tournament/start without a TMDB key."""

    async def test_returns_503(self) -> None:
        app = create_app(Settings(tmdb_api_key=""))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/api/tournament/start")
            assert resp.status_code == 503


class TestMisc:
    """Health check and genre listing."""

    async def test_health(self, api) -> None:
        resp = await api.get("/health")
        assert resp.json()["status"] == "ok"

    async def test_genres(self, api) -> None:
        resp = await api.get("/api/genres")
        assert resp.status_code == 200
        genres = resp.json()
        assert {"id": 35, "name": "Comedy"} in genres
        assert len(genres) == 17
