"""Logging setup for the lexical_search package.

The library only ever logs under the ``lexical_search`` logger tree.
``setup_logging`` attaches a single handler there and leaves the root logger
to the host application (typically a connector server with its own config).
"""

import logging
import sys
from typing import Any, Mapping, MutableMapping, Optional, Sequence, TextIO, Tuple

PACKAGE_LOGGER = "lexical_search"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Queries are user text; only a prefix goes into log lines
MAX_LOGGED_QUERY = 50


class _PackageHandler(logging.StreamHandler):
    """Stream handler installed by setup_logging (replaced on reconfigure)."""


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
    propagate: bool = False
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the handler it installed before, so services
    created one after another do not stack duplicate handlers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        stream: Output stream, stdout by default
        propagate: Also pass records to the root logger's handlers

    Returns:
        The configured ``lexical_search`` logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    package_logger.propagate = propagate

    for handler in list(package_logger.handlers):
        if isinstance(handler, _PackageHandler):
            package_logger.removeHandler(handler)

    handler = _PackageHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    package_logger.debug(f"Logging configured with level: {level}")
    return package_logger


def clip_query(query: Optional[str]) -> str:
    if not query:
        return ""
    if len(query) <= MAX_LOGGED_QUERY:
        return query
    return query[:MAX_LOGGED_QUERY] + "..."


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that appends ``key=value`` search context to messages.

    ``for_items``, ``for_index`` and ``for_query`` attach the context the
    service reports on: record counts, indexed fields and the query.
    """

    def __init__(self, name: str, context: Optional[Mapping[str, Any]] = None):
        super().__init__(logging.getLogger(name), dict(context or {}))

    def with_context(self, **kwargs: Any) -> "StructuredLogger":
        """Return a logger carrying additional context."""
        return StructuredLogger(self.logger.name, {**self.extra, **kwargs})

    def for_items(self, items: Sequence[Any]) -> "StructuredLogger":
        return self.with_context(items=len(items))

    def for_index(self, index: Any) -> "StructuredLogger":
        return self.with_context(
            items=index.document_count,
            fields=len(index.field_indexes)
        )

    def for_query(self, query: Optional[str]) -> "StructuredLogger":
        return self.with_context(query=repr(clip_query(query)))

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs

        context = " ".join(f"{key}={value}" for key, value in self.extra.items())
        return f"{msg} [{context}]", kwargs
