from __future__ import annotations

import os
from dataclasses import dataclass

BASE_URL = "https://www3.animeflv.net"
PROXY_URL = "https://api.allorigins.win/get?url="
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
}
TIMEOUT = 15.0

TRENDING_QUERY = "2025"
TRENDING_LIMIT = 12

MAX_FRAGMENT_LENGTH = 5000
DEFAULT_MODEL = "gemini-2.0-flash"

SUB_BUCKET = "SUB"
DUB_BUCKETS = ("LAT", "DUB")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class Settings:
    base_url: str = BASE_URL
    proxy_url: str = PROXY_URL
    timeout: float = TIMEOUT
    include_dub: bool = False
    trending_query: str = TRENDING_QUERY
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            base_url=os.getenv("ANISTREAM_BASE_URL", BASE_URL).rstrip("/"),
            proxy_url=os.getenv("ANISTREAM_PROXY_URL", PROXY_URL),
            timeout=float(os.getenv("ANISTREAM_TIMEOUT", TIMEOUT)),
            include_dub=_env_flag("ANISTREAM_INCLUDE_DUB"),
            trending_query=os.getenv("ANISTREAM_TRENDING_QUERY", TRENDING_QUERY),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        )

    @property
    def server_buckets(self) -> tuple[str, ...]:
        if self.include_dub:
            return (SUB_BUCKET, *DUB_BUCKETS)
        return (SUB_BUCKET,)
