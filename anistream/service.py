from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from anistream.ai import GeminiExtractor
from anistream.config import TRENDING_LIMIT, Settings
from anistream.extractors import StructuredExtractor
from anistream.fetcher import ProxyFetcher
from anistream.models import Anime, AnimeInfo, VideoServer

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    SEARCH = "search"
    DETAIL = "detail"
    SERVERS = "servers"
    AI_APPEND = "ai_append"


@dataclass(slots=True, frozen=True)
class Step:
    stage: Stage
    args: Dict[str, Any] = field(default_factory=dict)


def next_step(
    stage: Optional[Stage],
    query: Optional[str] = None,
    slug: Optional[str] = None,
    episode_number: Optional[int] = None,
    fragment: Optional[str] = None,
) -> Optional[Step]:
    """Next extraction call for the current stage and the identifiers at hand.

    The pipeline runs search -> detail -> servers -> AI append; a stage is only
    reachable once the identifiers it needs are known. Returns ``None`` when
    nothing further can run.
    """
    if stage is None:
        return Step(Stage.SEARCH, {"query": query or ""}) if query is not None else None
    if stage is Stage.SEARCH and slug:
        return Step(Stage.DETAIL, {"slug": slug})
    if stage is Stage.DETAIL and slug and episode_number is not None:
        return Step(Stage.SERVERS, {"slug": slug, "episode_number": episode_number})
    if stage in (Stage.SERVERS, Stage.AI_APPEND) and fragment is not None:
        return Step(Stage.AI_APPEND, {"html_fragment": fragment})
    return None


class AnimeService:
    """Entry point consumed by the UI: search, detail, servers and the AI fallback.

    Search and server lookups degrade to ``[]`` on any failure; an empty list is
    the uniform "not found" signal. Detail lookups raise, since there is no
    meaningful empty anime. The AI fallback only ever appends.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        extractor: StructuredExtractor | None = None,
        ai: GeminiExtractor | None = None,
    ):
        self.settings = settings or Settings.from_env()
        self.extractor = extractor or StructuredExtractor(
            ProxyFetcher(self.settings.proxy_url, self.settings.timeout),
            base_url=self.settings.base_url,
            buckets=self.settings.server_buckets,
        )
        self.ai = ai or GeminiExtractor(self.settings.gemini_api_key, self.settings.gemini_model)

    def search_animes(self, query: str) -> list[Anime]:
        result = self.extractor.extract_search(query)
        if not result.is_ok:
            logger.error("Error searching animes for %r: %s", query, result.error)
        return result.unwrap_or([])

    def trending(self, limit: int = TRENDING_LIMIT) -> list[Anime]:
        return self.search_animes(self.settings.trending_query)[:limit]

    def get_anime_info(self, slug: str) -> AnimeInfo:
        result = self.extractor.extract_detail(slug)
        if not result.is_ok:
            logger.error("Error fetching anime info for %s: %s", slug, result.error)
        return result.unwrap()

    def get_video_servers(self, slug: str, episode_number: int) -> list[VideoServer]:
        result = self.extractor.extract_servers(slug, episode_number)
        if not result.is_ok:
            logger.warning(
                "Structured server extraction failed for %s-%s (%s), AI fallback is available",
                slug,
                episode_number,
                result.error,
            )
        return result.unwrap_or([])

    def extract_from_fragment(self, html_fragment: str) -> list[VideoServer]:
        return self.ai.extract_from_fragment(html_fragment)

    def find_other_sources(self, current: Sequence[VideoServer], html_fragment: str) -> list[VideoServer]:
        found = self.extract_from_fragment(html_fragment)
        logger.info("AI fallback added %d server(s)", len(found))
        return [*current, *found]

    def run(self, step: Step, current: Sequence[VideoServer] = ()):
        if step.stage is Stage.SEARCH:
            return self.search_animes(**step.args)
        if step.stage is Stage.DETAIL:
            return self.get_anime_info(**step.args)
        if step.stage is Stage.SERVERS:
            return self.get_video_servers(**step.args)
        return self.find_other_sources(current, **step.args)
