"""Data models for lexical search system."""

from .options import SearchOptions, SearchOptionsModel, SortBy, SortOrder
from .result import SearchResult

__all__ = ["SearchOptions", "SearchOptionsModel", "SortBy", "SortOrder", "SearchResult"]
