from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class ExtractionError(Exception):
    """Base class for everything that can go wrong between the proxy and a typed record."""


class FetchError(ExtractionError):
    """The proxy or the network failed to deliver a page."""


class ParseError(ExtractionError):
    """A document, envelope or embedded literal could not be decoded."""


class NotFoundError(ExtractionError):
    """An expected selector or script marker is absent from the page."""


class EnvelopeError(FetchError, ParseError):
    """The proxy answered, but not with a readable ``{"contents": ...}`` envelope."""


@dataclass(slots=True)
class Extraction(Generic[T]):
    """Outcome of one extraction.

    ``Extraction.ok(value)`` carries data (possibly an empty list), while
    ``Extraction.err(exc)`` carries the failure kind. Callers decide per
    extractor whether an error degrades to a default or is raised.
    """

    value: T | None = None
    error: ExtractionError | None = None

    @classmethod
    def ok(cls, value: T) -> "Extraction[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ExtractionError) -> "Extraction[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.is_ok and not self.value

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value
