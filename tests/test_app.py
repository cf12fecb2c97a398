from unittest.mock import MagicMock

import pytest

from anistream.errors import FetchError, NotFoundError
from anistream.models import Anime, AnimeInfo, Episode, VideoServer
from anistream.service import AnimeService
from anistream.web import create_app


@pytest.fixture
def service():
    return MagicMock(spec=AnimeService)


@pytest.fixture
def client(service):
    app = create_app(service)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_search(client, service):
    """Search returns camelCase anime records."""
    service.search_animes.return_value = [Anime(id="demo", title="Demo", poster="https://x/p.jpg", type="TV")]
    rv = client.get("/api/search?q=demo")
    assert rv.status_code == 200
    assert rv.get_json()["results"] == [{"id": "demo", "title": "Demo", "poster": "https://x/p.jpg", "type": "TV"}]
    assert rv.headers["Access-Control-Allow-Origin"] == "*"
    service.search_animes.assert_called_once_with("demo")


def test_search_without_query(client, service):
    rv = client.get("/api/search")
    assert rv.get_json()["results"] == []
    service.search_animes.assert_not_called()


def test_anime_detail(client, service):
    service.get_anime_info.return_value = AnimeInfo(
        anime=Anime(id="demo", title="Demo", poster="https://x/p.jpg", synopsis=""),
        episodes=[Episode.for_anime("demo", 1), Episode.for_anime("demo", 2)],
    )
    rv = client.get("/api/anime/demo")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["anime"]["synopsis"] == ""
    assert data["episodes"][1] == {"id": "demo-2", "number": 2, "animeId": "demo"}


def test_anime_detail_errors(client, service):
    service.get_anime_info.side_effect = NotFoundError("no title")
    assert client.get("/api/anime/demo").status_code == 404

    service.get_anime_info.side_effect = FetchError("proxy down")
    assert client.get("/api/anime/demo").status_code == 502


def test_episode_servers(client, service):
    service.get_video_servers.return_value = [VideoServer(server="sw", title="SW", url="https://sw/e/1")]
    rv = client.get("/api/anime/demo/episodes/3/servers")
    assert rv.get_json() == {"servers": [{"server": "sw", "title": "SW", "url": "https://sw/e/1"}]}
    service.get_video_servers.assert_called_once_with("demo", 3)


def test_other_sources(client, service):
    service.find_other_sources.side_effect = lambda current, html: [
        *current,
        VideoServer(server="Mega", title="Mega", url="https://mega.nz/embed/1"),
    ]
    rv = client.post(
        "/api/servers/other-sources",
        json={"html": "<iframe>", "servers": [{"server": "sw", "title": "SW", "url": "https://sw/e/1"}]},
    )
    assert [s["server"] for s in rv.get_json()["servers"]] == ["sw", "Mega"]


def test_other_sources_requires_html(client, service):
    rv = client.post("/api/servers/other-sources", json={})
    assert rv.status_code == 400


def test_trending(client, service):
    service.trending.return_value = [Anime(id="demo", title="Demo", poster="https://x/p.jpg", type="TV")]
    rv = client.get("/api/trending")
    assert rv.status_code == 200
    assert [a["id"] for a in rv.get_json()["results"]] == ["demo"]
    service.trending.assert_called_once_with(12)

    client.get("/api/trending?limit=5")
    service.trending.assert_called_with(5)


def test_other_sources_rejects_non_object_body(client, service):
    rv = client.post("/api/servers/other-sources", json=[1])
    assert rv.status_code == 400
    service.find_other_sources.assert_not_called()


def test_other_sources_ignores_non_list_servers(client, service):
    service.find_other_sources.return_value = []
    rv = client.post("/api/servers/other-sources", json={"html": "<iframe>", "servers": "sw"})
    assert rv.status_code == 200
    service.find_other_sources.assert_called_once_with([], "<iframe>")
