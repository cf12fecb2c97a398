from unittest.mock import MagicMock, patch

import pytest
import requests

from anistream.config import Settings

SEARCH_HTML = """
<html><body>
  <ul class="ListAnimes AX Rows A03 C02 D02">
    <li><article class="Anime alt B">
      <a href="/anime/one-piece-tv">
        <div class="Image fa-play-circle-o"><figure><img src="/uploads/animes/covers/one-piece.jpg" alt="One Piece"></figure></div>
        <span class="Type tv">Anime</span>
        <h3 class="Title">One Piece</h3>
      </a>
    </article></li>
    <li><article class="Anime alt B">
      <a href="/anime/untitled-entry">
        <div class="Image"><figure><img src="https://cdn.example.com/untitled.jpg"></figure></div>
      </a>
    </article></li>
  </ul>
</body></html>
"""

DETAIL_HTML = """
<html><body>
  <div class="Ficha fchlt">
    <div class="Container">
      <h1 class="Title">Demo Anime</h1>
      <span class="Type tv">Anime</span>
    </div>
  </div>
  <div class="Thumb Poster"><figure><img src="/uploads/animes/covers/demo.jpg" alt="Demo"></figure></div>
  <div class="Description"><p>A short   synopsis.</p></div>
  <script>
    var anime_info = ["42","Demo Anime","demo"];
    var episodes = [[3,903],[2,902],[1,901]];
    var last_seen = 0;
  </script>
</body></html>
"""

VIDEOS_HTML = """
<html><body>
  <script>var foo = 1;</script>
  <script>
    var videos = {"SUB":[{"server":"sw","title":"SW","ads":0,"url":"https://sw.example/f/1","allow_mobile":true,"code":"https://streamwish.to/e/abc"},{"server":"mega","title":"","code":"https://mega.nz/embed/xyz"}],"LAT":[{"server":"okru","title":"Okru","code":"https://ok.ru/videoembed/1"}]};
    $(document).ready(function(){});
  </script>
</body></html>
"""


def proxy_response(html):
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"contents": html, "status": {"http_code": 200}}
    return response


@pytest.fixture
def settings():
    return Settings(base_url="https://www3.animeflv.net", proxy_url="https://proxy.test/get?url=")


@pytest.fixture
def mock_get():
    with patch("requests.Session.get") as mocked:
        yield mocked


@pytest.fixture
def failing_get(mock_get):
    response = MagicMock()
    response.status_code = 500
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    mock_get.return_value = response
    return mock_get
