from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from anistream.errors import NotFoundError, ParseError


def parse_document(html: str | None) -> BeautifulSoup:
    # lxml recovers from broken markup instead of raising
    return BeautifulSoup(html or "", "lxml")


def clean_text(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def select_text(node, selector: str) -> str:
    found = node.select_one(selector)
    return clean_text(found.get_text(" ")) if found else ""


def select_attr(node, selector: str, attr: str) -> str:
    found = node.select_one(selector)
    if not found:
        return ""
    value = found.get(attr) or ""
    if isinstance(value, list):
        value = " ".join(value)
    return value.strip()


def find_script(doc: BeautifulSoup, marker: str) -> str:
    for script in doc.find_all("script"):
        content = script.string or script.get_text()
        if content and marker in content:
            return content
    raise NotFoundError(f"No script contains {marker!r}")


def extract_literal(text: str, pattern: str | re.Pattern, wrap: str | None = None) -> Any:
    """Read a JSON literal embedded in a larger blob of script text.

    The locator runs ``pattern`` and takes its first group; a miss raises
    :class:`NotFoundError`. The decoder then parses the captured span, optionally
    wrapped with the two characters of ``wrap`` (``"[]"`` turns ``1,2`` into
    ``[1,2]``); invalid JSON raises :class:`ParseError`.
    """
    match = re.search(pattern, text, re.S) if isinstance(pattern, str) else pattern.search(text)
    if not match:
        raise NotFoundError(f"Pattern {getattr(pattern, 'pattern', pattern)!r} did not match")

    span = match.group(1)
    if wrap:
        span = f"{wrap[0]}{span}{wrap[1]}"
    try:
        return json.loads(span)
    except json.JSONDecodeError as e:
        raise ParseError(f"Embedded literal is not valid JSON: {e}") from e


def slug_from_url(url: str) -> str:
    p = urlparse(url)
    return p.path.strip("/").split("/")[-1]


def absolute_url(base: str, url: str) -> str:
    if urlparse(url).scheme in {"http", "https"}:
        return url
    return urljoin(base.rstrip("/") + "/", url)
