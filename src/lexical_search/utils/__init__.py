"""Utility modules for lexical search."""

from .text_processing import TextProcessor
from .flatten import discover_string_fields, get_nested_value, resolve_field_text
from .validators import validate_items, validate_query
from .logging_config import setup_logging

__all__ = [
    "TextProcessor",
    "discover_string_fields",
    "get_nested_value",
    "resolve_field_text",
    "validate_items",
    "validate_query",
    "setup_logging"
]
