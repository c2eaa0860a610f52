"""Custom exceptions for lexical search system."""


class LexicalSearchError(Exception):
    """Base exception for lexical search operations."""
    pass


class ValidationError(LexicalSearchError):
    """Exception raised when caller input has the wrong shape."""
    pass


class IndexBuildError(LexicalSearchError):
    """Exception raised while building a search index."""
    pass


class SearchError(LexicalSearchError):
    """Exception raised during search operations."""
    pass
