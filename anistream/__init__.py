from anistream.errors import ExtractionError, FetchError, NotFoundError, ParseError
from anistream.models import Anime, AnimeInfo, Episode, VideoServer
from anistream.service import AnimeService

__all__ = [
    "Anime",
    "AnimeInfo",
    "AnimeService",
    "Episode",
    "ExtractionError",
    "FetchError",
    "NotFoundError",
    "ParseError",
    "VideoServer",
]
