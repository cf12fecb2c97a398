from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

SLUG_RE = re.compile(r"^[A-Za-z0-9._~-]+$")


def is_valid_slug(value: str) -> bool:
    return bool(value) and bool(SLUG_RE.match(value))


@dataclass(slots=True, frozen=True)
class Anime:
    id: str
    title: str
    poster: str
    type: Optional[str] = None
    synopsis: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "title": self.title, "poster": self.poster}
        if self.type is not None:
            data["type"] = self.type
        if self.synopsis is not None:
            data["synopsis"] = self.synopsis
        return data


@dataclass(slots=True, frozen=True)
class Episode:
    id: str
    number: int
    anime_id: str

    @classmethod
    def for_anime(cls, anime_id: str, number: int) -> "Episode":
        return cls(id=f"{anime_id}-{number}", number=number, anime_id=anime_id)

    def to_dict(self) -> dict:
        return {"id": self.id, "number": self.number, "animeId": self.anime_id}


@dataclass(slots=True, frozen=True)
class VideoServer:
    server: str
    title: str
    url: str

    @classmethod
    def from_raw(cls, raw: dict) -> Optional["VideoServer"]:
        server = str(raw.get("server") or "").strip()
        url = str(raw.get("code") or raw.get("url") or "").strip()
        if not url:
            return None
        title = str(raw.get("title") or "").strip() or server
        return cls(server=server, title=title, url=url)

    def to_dict(self) -> dict:
        return {"server": self.server, "title": self.title, "url": self.url}


@dataclass(slots=True, frozen=True)
class AnimeInfo:
    anime: Anime
    episodes: List[Episode] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "anime": self.anime.to_dict(),
            "episodes": [ep.to_dict() for ep in self.episodes],
        }
