"""Content search models.

- SearchQuery holds one or more lowercase terms and the match mode.
- SearchResult collects matching paths plus per-file read errors.

Atlas searches use a single term matched as a substring; skeleton searches
accept several terms that must all be present (logical AND, any order).
"""

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchMode(str, Enum):
    """How the query terms are combined."""

    SUBSTRING = "substring"
    ALL_TERMS = "all_terms"


class SearchQuery(BaseModel):
    """A normalized, non-empty search query."""

    model_config = ConfigDict(frozen=True)

    terms: Tuple[str, ...]
    mode: SearchMode = SearchMode.SUBSTRING

    @field_validator("terms")
    @classmethod
    def normalize_terms(cls, terms: Tuple[str, ...]) -> Tuple[str, ...]:
        """Lowercase terms and reject empty queries."""
        normalized = tuple(term.lower() for term in terms if term)
        if not normalized:
            raise ValueError("Search query must contain at least one term")
        return normalized

    @classmethod
    def single(cls, text: str) -> "SearchQuery":
        """Build a single-term substring query; surrounding whitespace is ignored."""
        return cls(terms=(text.strip(),), mode=SearchMode.SUBSTRING)

    @classmethod
    def all_of(cls, terms: Iterable[str]) -> "SearchQuery":
        """Build an AND query from *terms*, splitting on whitespace."""
        words: List[str] = []
        for term in terms:
            words.extend(term.split())
        return cls(terms=tuple(words), mode=SearchMode.ALL_TERMS)

    def matches(self, text: str) -> bool:
        """Return True if lowercased *text* satisfies the query."""
        haystack = text.lower()
        if self.mode == SearchMode.SUBSTRING:
            return self.terms[0] in haystack
        return all(term in haystack for term in self.terms)


class SearchResult(BaseModel):
    """Outcome of a content search over a directory."""

    root: Path
    query: SearchQuery
    matches: List[Path] = Field(default_factory=list)
    """Matching files; order is not significant."""

    errors: List[Tuple[Path, str]] = Field(default_factory=list)
    """Files that could not be read, with the reason."""

    scanned: int = 0
    """Number of candidate files examined."""

    lossy: int = 0
    """Number of candidates that needed lossy decoding."""
