from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from anistream.config import HEADERS, PROXY_URL, TIMEOUT
from anistream.errors import EnvelopeError, FetchError

logger = logging.getLogger(__name__)


class ProxyFetcher:
    """Retrieves remote HTML through a CORS proxy that wraps pages in ``{"contents": ...}``."""

    def __init__(self, proxy_url: str = PROXY_URL, timeout: float = TIMEOUT, session: requests.Session | None = None):
        self.proxy_url = proxy_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def proxied(self, target_url: str) -> str:
        return f"{self.proxy_url}{quote(target_url, safe='')}"

    def fetch(self, target_url: str) -> str:
        url = self.proxied(target_url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Error fetching %s: %s", target_url, e)
            raise FetchError(f"Failed to fetch {target_url} from proxy: {e}") from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise EnvelopeError(f"Proxy response for {target_url} is not JSON") from e

        contents = envelope.get("contents") if isinstance(envelope, dict) else None
        if not isinstance(contents, str):
            raise EnvelopeError(f"Proxy envelope for {target_url} has no contents")
        return contents
