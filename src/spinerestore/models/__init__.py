"""Domain models for the spinerestore application."""

from spinerestore.models.core import (
    BatchResult,
    Dimensions,
    FileEntry,
    FileOutcome,
    OutcomeStatus,
    TypeTag,
)
from spinerestore.models.plan import RenamePlan
from spinerestore.models.search import SearchMode, SearchQuery, SearchResult

__all__ = [
    "BatchResult",
    "Dimensions",
    "FileEntry",
    "FileOutcome",
    "OutcomeStatus",
    "RenamePlan",
    "SearchMode",
    "SearchQuery",
    "SearchResult",
    "TypeTag",
]
