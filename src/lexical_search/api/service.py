"""High-level API service for lexical search."""

import asyncio
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

from ..core.engine import search
from ..core.exceptions import IndexBuildError, LexicalSearchError, SearchError, ValidationError
from ..core.index import SearchIndex, T, create_index
from ..models.options import SearchOptions
from ..models.result import SearchResult
from ..utils.logging_config import StructuredLogger, setup_logging
from ..utils.validators import coerce_options

logger = logging.getLogger(__name__)


class LexicalSearchService:
    """
    Connector-facing interface for lexical search.

    Owns a worker pool for index builds and searches, applies default
    options, keeps usage statistics and wraps unexpected failures in
    LexicalSearchError subclasses.
    """

    def __init__(
        self,
        default_options: Any = None,
        max_workers: int = 4,
        log_level: str = "INFO",
        configure_logging: bool = True
    ):
        """
        Initialize lexical search service.

        Args:
            default_options: Options applied under every create_index call
            max_workers: Number of worker threads
            log_level: Logging level
            configure_logging: Whether to install the logging configuration
        """
        if configure_logging:
            setup_logging(level=log_level)

        self.default_options = coerce_options(default_options)
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        self.log = StructuredLogger(__name__)

        self._stats = {
            'total_indexes': 0,
            'total_documents': 0,
            'total_searches': 0,
            'avg_search_time': 0.0
        }
        self._closed = False

        logger.info("Lexical search service initialized")

    async def create_index(self, items: Sequence[T], options: Any = None) -> SearchIndex[T]:
        """
        Build a search index over freshly fetched records.

        Args:
            items: Records to index
            options: Options merged over the service defaults

        Raises:
            ValidationError: If items or options have the wrong shape
            IndexBuildError: If building fails for any other reason
        """
        self._check_open()
        merged = self.default_options.merged_with(coerce_options(options))

        try:
            index = await create_index(items, merged, executor=self.executor)
        except ValidationError:
            raise
        except Exception as e:
            self.log.for_items(items).error(f"Failed to build index: {str(e)}")
            raise IndexBuildError(f"Failed to build index: {str(e)}")

        self._stats['total_indexes'] += 1
        self._stats['total_documents'] += index.document_count
        self.log.for_index(index).debug("Built index")
        return index

    async def search(
        self,
        index: SearchIndex[T],
        query: str,
        options: Any = None
    ) -> List[SearchResult[T]]:
        """
        Search an index.

        Args:
            index: Index from create_index
            query: Query text
            options: Per-query overrides

        Raises:
            ValidationError: If query or options have the wrong shape
            SearchError: If the search fails for any other reason
        """
        self._check_open()
        start_time = asyncio.get_running_loop().time()

        try:
            results = await search(index, query, options, executor=self.executor)
        except ValidationError:
            raise
        except Exception as e:
            self.log.for_query(query).error(f"Search failed: {str(e)}")
            raise SearchError(f"Search failed: {str(e)}")

        search_time = asyncio.get_running_loop().time() - start_time
        self._update_search_stats(search_time)

        self.log.for_query(query).with_context(results=len(results)).debug(
            f"Search completed in {search_time:.3f}s"
        )
        return results

    async def search_items(
        self,
        items: Sequence[T],
        query: str,
        options: Any = None
    ) -> List[SearchResult[T]]:
        """
        One-shot search: build an index and query it once.

        Args:
            items: Records to search
            query: Query text
            options: Index and query options
        """
        index = await self.create_index(items, options)
        return await self.search(index, query)

    async def simple_search(self, items: Sequence[T], query: str, options: Any = None) -> List[T]:
        """Return just the matching items, best first."""
        results = await self.search_items(items, query, options)
        return [result.item for result in results]

    async def search_with_threshold(
        self,
        items: Sequence[T],
        query: str,
        min_score: float,
        options: Any = None
    ) -> List[SearchResult[T]]:
        """Search keeping only results scoring at least ``min_score``."""
        merged = coerce_options(options).merged_with(SearchOptions(threshold=min_score))
        return await self.search_items(items, query, merged)

    @staticmethod
    def best_match(results: Sequence[SearchResult[T]]) -> Optional[SearchResult[T]]:
        """Highest-scoring result, the earliest one on ties; None when empty."""
        best: Optional[SearchResult[T]] = None
        for result in results:
            if best is None or result.score > best.score:
                best = result
        return best

    @staticmethod
    def results_to_json(
        results: Sequence[SearchResult[Any]],
        query: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Serialize results for the MCP host.

        Args:
            results: Search results
            query: Query echoed back in the payload
            extra: Additional top-level keys

        Raises:
            LexicalSearchError: If an item cannot be serialized
        """
        payload: Dict[str, Any] = {}
        if query is not None:
            payload['query'] = query
        payload['total_matches'] = len(results)
        payload['results'] = [result.to_dict() for result in results]
        if extra:
            payload.update(extra)

        try:
            return json.dumps(payload, default=str)
        except ValueError as e:
            raise LexicalSearchError(f"Failed to serialize results: {str(e)}")

    def get_stats(self) -> Dict[str, Any]:
        """Get service statistics."""
        return {
            **self._stats,
            'default_options': self.default_options.to_dict(),
            'closed': self._closed
        }

    def _update_search_stats(self, search_time: float) -> None:
        self._stats['total_searches'] += 1

        total_searches = self._stats['total_searches']
        current_avg = self._stats['avg_search_time']
        self._stats['avg_search_time'] = (
            (current_avg * (total_searches - 1) + search_time) / total_searches
        )

    def _check_open(self) -> None:
        if self._closed:
            raise LexicalSearchError("Service is closed")

    async def close(self) -> None:
        """Shut down the worker pool."""
        if self._closed:
            return
        self.executor.shutdown(wait=True)
        self._closed = True
        logger.info("Lexical search service closed")

    @classmethod
    @asynccontextmanager
    async def create(cls, **kwargs) -> AsyncIterator['LexicalSearchService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            **kwargs: Service configuration

        Yields:
            Ready lexical search service
        """
        service = cls(**kwargs)

        try:
            yield service
        finally:
            await service.close()
