"""
Lexical Search Utility for Structured Records

BM25 full-text ranking over arbitrary nested records, with field boosting,
one-edit fuzzy matching, thresholds, property sorting and result limits.
Used by connectors to rank records fetched from third-party APIs.
"""

from .core.index import SearchIndex, create_index, create_index_sync
from .core.engine import search, search_sync
from .core.exceptions import LexicalSearchError, ValidationError
from .models.options import SearchOptions, SortBy, SortOrder
from .models.result import SearchResult
from .api.service import LexicalSearchService

__version__ = "1.0.0"

__all__ = [
    "create_index",
    "create_index_sync",
    "search",
    "search_sync",
    "SearchIndex",
    "SearchOptions",
    "SortBy",
    "SortOrder",
    "SearchResult",
    "LexicalSearchService",
    "LexicalSearchError",
    "ValidationError",
]
