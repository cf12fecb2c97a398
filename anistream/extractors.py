from __future__ import annotations

import logging
import re
from typing import Sequence
from urllib.parse import quote

from anistream.config import BASE_URL, SUB_BUCKET
from anistream.errors import Extraction, ExtractionError, NotFoundError, ParseError
from anistream.fetcher import ProxyFetcher
from anistream.models import Anime, AnimeInfo, Episode, VideoServer, is_valid_slug
from anistream.parser import (
    absolute_url,
    extract_literal,
    find_script,
    parse_document,
    select_attr,
    select_text,
    slug_from_url,
)

logger = logging.getLogger(__name__)

# Scraping contract with the site. These hooks break without notice.
SEARCH_ITEM_SELECTOR = ".ListAnimes .Anime"
DETAIL_TITLE_SELECTOR = ".Ficha .Title"
DETAIL_TYPE_SELECTOR = ".Ficha .Type"
DETAIL_POSTER_SELECTOR = ".Thumb img"
DETAIL_SYNOPSIS_SELECTOR = ".Description p"
EPISODES_MARKER = "var episodes = ["
EPISODES_RE = re.compile(r"var\s+episodes\s*=\s*\[(.*?)\];", re.S)
VIDEOS_MARKER = "var videos = {"
VIDEOS_RE = re.compile(r"var\s+videos\s*=\s*(\{.*?\});", re.S)


def search_url(query: str, base_url: str = BASE_URL) -> str:
    return f"{base_url}/browse?q={quote(query, safe='')}"


def anime_url(slug: str, base_url: str = BASE_URL) -> str:
    return f"{base_url}/anime/{slug}"


def episode_url(slug: str, number: int, base_url: str = BASE_URL) -> str:
    return f"{base_url}/ver/{slug}-{number}"


def parse_search_results(page: str, base_url: str = BASE_URL) -> list[Anime]:
    doc = parse_document(page)
    results = []
    for item in doc.select(SEARCH_ITEM_SELECTOR):
        title = select_text(item, ".Title")
        slug = slug_from_url(select_attr(item, "a", "href"))
        if not title or not is_valid_slug(slug):
            continue
        results.append(
            Anime(
                id=slug,
                title=title,
                poster=absolute_url(base_url, select_attr(item, "img", "src")),
                type=select_text(item, ".Type") or "TV",
            )
        )
    return results


def _episode_number(raw) -> int | None:
    if not isinstance(raw, list) or not raw:
        return None
    value = raw[0]
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value >= 1:
        return value
    return None


def parse_episodes(page_or_doc, slug: str) -> list[Episode]:
    """Episodes from the inline ``var episodes = [...]`` block, oldest first.

    The site lists episodes newest first, so the decoded array is reversed,
    then sorted by number in case the source order is scrambled.
    A page without the block has no episodes; a block that does not decode
    raises :class:`ParseError`.
    """
    doc = parse_document(page_or_doc) if isinstance(page_or_doc, str) else page_or_doc
    try:
        script = find_script(doc, EPISODES_MARKER)
        raw_episodes = extract_literal(script, EPISODES_RE, wrap="[]")
    except NotFoundError:
        logger.info("No episode list found for %s", slug)
        return []

    episodes = []
    for raw in raw_episodes:
        number = _episode_number(raw)
        if number is None:
            logger.warning("Skipping malformed episode entry for %s: %r", slug, raw)
            continue
        episodes.append(Episode.for_anime(slug, number))
    episodes.reverse()
    episodes.sort(key=lambda ep: ep.number)
    return episodes


def parse_anime_detail(page: str, slug: str, base_url: str = BASE_URL) -> AnimeInfo:
    doc = parse_document(page)
    title = select_text(doc, DETAIL_TITLE_SELECTOR)
    if not title:
        raise NotFoundError(f"No title found on detail page for {slug}")

    anime = Anime(
        id=slug,
        title=title,
        poster=absolute_url(base_url, select_attr(doc, DETAIL_POSTER_SELECTOR, "src")),
        type=select_text(doc, DETAIL_TYPE_SELECTOR) or None,
        synopsis=select_text(doc, DETAIL_SYNOPSIS_SELECTOR),
    )
    return AnimeInfo(anime=anime, episodes=parse_episodes(doc, slug))


def parse_video_servers(page: str, buckets: Sequence[str] = (SUB_BUCKET,)) -> list[VideoServer]:
    doc = parse_document(page)
    script = find_script(doc, VIDEOS_MARKER)
    data = extract_literal(script, VIDEOS_RE)
    if not isinstance(data, dict):
        raise ParseError("Video map is not an object")

    servers = []
    for bucket in buckets:
        entries = data.get(bucket)
        if not isinstance(entries, list):
            continue
        for raw in entries:
            if not isinstance(raw, dict):
                continue
            server = VideoServer.from_raw(raw)
            if server:
                servers.append(server)
    return servers


class StructuredExtractor:
    """Fetches site pages through the proxy and turns them into typed records.

    Each ``extract_*`` method returns an :class:`Extraction` so the caller can
    tell data, an empty result and a failure apart.
    """

    def __init__(self, fetcher: ProxyFetcher, base_url: str = BASE_URL, buckets: Sequence[str] = (SUB_BUCKET,)):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.buckets = tuple(buckets)

    def extract_search(self, query: str) -> Extraction[list[Anime]]:
        try:
            page = self.fetcher.fetch(search_url(query, self.base_url))
            return Extraction.ok(parse_search_results(page, self.base_url))
        except ExtractionError as e:
            return Extraction.err(e)

    def extract_detail(self, slug: str) -> Extraction[AnimeInfo]:
        if not is_valid_slug(slug):
            return Extraction.err(NotFoundError(f"Invalid anime slug {slug!r}"))
        try:
            page = self.fetcher.fetch(anime_url(slug, self.base_url))
            return Extraction.ok(parse_anime_detail(page, slug, self.base_url))
        except ExtractionError as e:
            return Extraction.err(e)

    def extract_servers(self, slug: str, number: int) -> Extraction[list[VideoServer]]:
        if not is_valid_slug(slug):
            return Extraction.err(NotFoundError(f"Invalid anime slug {slug!r}"))
        try:
            page = self.fetcher.fetch(episode_url(slug, number, self.base_url))
            return Extraction.ok(parse_video_servers(page, self.buckets))
        except ExtractionError as e:
            return Extraction.err(e)
