"""Core engine components for lexical search."""

from .engine import search, search_sync
from .index import FieldIndex, SearchIndex, create_index, create_index_sync
from .exceptions import (
    LexicalSearchError,
    ValidationError,
    IndexBuildError,
    SearchError
)

__all__ = [
    "search",
    "search_sync",
    "create_index",
    "create_index_sync",
    "SearchIndex",
    "FieldIndex",
    "LexicalSearchError",
    "ValidationError",
    "IndexBuildError",
    "SearchError"
]
