from __future__ import annotations

import json
import logging

from google import genai
from google.genai import types

from anistream.config import DEFAULT_MODEL, MAX_FRAGMENT_LENGTH
from anistream.models import VideoServer

logger = logging.getLogger(__name__)

PROMPT = (
    "Analyze this HTML fragment and extract only the URLs of video iframes or streaming "
    "servers (such as ok.ru, mega, vidoza, streamtape). Return only a JSON array in the form "
    '[{{"server": "Name", "url": "URL"}}] and nothing else. HTML: {html}'
)


def truncate_fragment(html_fragment: str, limit: int = MAX_FRAGMENT_LENGTH) -> str:
    return (html_fragment or "")[:limit]


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_model_response(text: str | None) -> list[VideoServer]:
    if not text or not text.strip():
        return []
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.warning("AI response is not valid JSON: %s. Content: %s...", e, text[:200])
        return []
    if not isinstance(data, list):
        logger.warning("AI did not return a JSON list. Content: %s...", text[:200])
        return []

    servers = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        server = VideoServer.from_raw(raw)
        if server:
            servers.append(server)
    return servers


class GeminiExtractor:
    """Best-effort extraction of streaming links from arbitrary HTML with a Gemini model.

    Every failure (missing key, SDK or network error, unusable response) ends in an
    empty list; nothing is retried.
    """

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_MODEL, client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def extract_from_fragment(self, html_fragment: str) -> list[VideoServer]:
        if self._client is None and not self.api_key:
            logger.warning("GEMINI_API_KEY is not configured, skipping AI extraction")
            return []

        prompt = PROMPT.format(html=truncate_fragment(html_fragment))
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(response_mime_type="application/json"),
            )
            text = response.text
        except Exception as e:
            logger.error("AI extraction error: %s", e)
            return []
        return parse_model_response(text)
