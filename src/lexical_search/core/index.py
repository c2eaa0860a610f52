"""Search index construction over arbitrary structured records."""

import asyncio
import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

import numpy as np
from sklearn.feature_extraction.text import CountVectorizer

from ..models.options import SearchOptions
from ..utils.flatten import extract_searchable_fields
from ..utils.text_processing import TextProcessor
from ..utils.validators import coerce_options, resolve_options, validate_items
from .scoring import expand_query_term

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Mapping[str, Any])


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class FieldIndex:
    """
    BM25 statistics for one field path across every document.

    Attributes:
        path: Dot-path of the field
        vocabulary: Term to column mapping
        term_counts: Sparse (documents x terms) count matrix, column-major
        doc_lengths: Token count of the field per document (0 = absent)
        doc_freq: Number of documents containing each term
        avg_length: Mean field length over documents that have the field
    """
    path: str
    vocabulary: Mapping[str, int]
    term_counts: Any
    doc_lengths: np.ndarray
    doc_freq: np.ndarray
    avg_length: float

    def term_frequencies(self, column: int) -> np.ndarray:
        """Dense term frequencies of one vocabulary column."""
        return self.term_counts[:, column].toarray().ravel().astype(np.float64)

    def match_columns(self, query_term: str) -> List[Tuple[int, float]]:
        """``(column, weight)`` of every indexed term the query term matches."""
        return [
            (self.vocabulary[term], weight)
            for term, weight in expand_query_term(query_term, self.vocabulary)
        ]


@dataclass(frozen=True, eq=False)
class SearchIndex(Generic[T]):
    """
    Immutable searchable view over a record collection.

    Attributes:
        items: Snapshot list of the caller's records, in the order given
        options: Options used at construction; defaults for queries
        field_indexes: Per-field BM25 statistics keyed by dot-path
        processor: Tokenizer shared with query parsing
    """
    items: List[T]
    options: SearchOptions
    field_indexes: Mapping[str, FieldIndex]
    processor: TextProcessor

    def __len__(self) -> int:
        return len(self.items)

    @property
    def document_count(self) -> int:
        return len(self.items)

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        return {
            "total_documents": self.document_count,
            "field_count": len(self.field_indexes),
            "vocabulary_size": sum(len(f.vocabulary) for f in self.field_indexes.values()),
            "fields": list(self.field_indexes),
            "case_sensitive": self.processor.case_sensitive
        }


def _build_field_index(
    path: str,
    texts: List[str],
    processor: TextProcessor
) -> Optional[FieldIndex]:
    """Count terms of one field; None when the field holds no tokens."""
    vectorizer = CountVectorizer(analyzer=processor.tokenize, dtype=np.int64)

    try:
        counts = vectorizer.fit_transform(texts)
    except ValueError as e:
        if "empty vocabulary" in str(e):
            logger.debug(f"Field '{path}' has no searchable terms, skipping")
            return None
        raise

    counts = counts.tocsc()
    doc_lengths = np.asarray(counts.sum(axis=1), dtype=np.float64).ravel()
    present = doc_lengths > 0
    avg_length = float(doc_lengths[present].mean()) if present.any() else 0.0

    # CountVectorizer stores no explicit zeros, so stored entries per column = df
    doc_freq = np.diff(counts.indptr)

    counts.data.setflags(write=False)

    return FieldIndex(
        path=path,
        vocabulary=MappingProxyType({term: int(col) for term, col in vectorizer.vocabulary_.items()}),
        term_counts=counts,
        doc_lengths=_read_only(doc_lengths),
        doc_freq=_read_only(doc_freq),
        avg_length=avg_length
    )


def create_index_sync(items: Sequence[T], options: Any = None) -> SearchIndex[T]:
    """
    Build a search index synchronously.

    Args:
        items: Records to index; never mutated
        options: SearchOptions or mapping; stored as query defaults

    Returns:
        Immutable search index

    Raises:
        ValidationError: If items or options have the wrong shape
    """
    start_time = time.perf_counter()

    validate_items(items)
    search_options = coerce_options(options)
    resolved = resolve_options(search_options)
    processor = TextProcessor(case_sensitive=resolved.case_sensitive)

    # Snapshot: the document count is fixed once the index is built
    records = list(items)
    field_paths = list(resolved.field_paths) if resolved.field_paths else None
    flattened = [extract_searchable_fields(item, field_paths) for item in records]

    # Field order follows first appearance so builds are reproducible
    paths: Dict[str, None] = {}
    for document_fields in flattened:
        for path in document_fields:
            paths.setdefault(path, None)

    field_indexes: Dict[str, FieldIndex] = {}
    for path in paths:
        texts = [document_fields.get(path, "") for document_fields in flattened]
        field_index = _build_field_index(path, texts, processor)
        if field_index is not None:
            field_indexes[path] = field_index

    index = SearchIndex(
        items=records,
        options=search_options,
        field_indexes=MappingProxyType(field_indexes),
        processor=processor
    )

    build_time = time.perf_counter() - start_time
    logger.debug(
        f"Indexed {len(records)} items across {len(field_indexes)} fields in {build_time:.3f}s"
    )
    return index


async def create_index(
    items: Sequence[T],
    options: Any = None,
    executor: Optional[Executor] = None
) -> SearchIndex[T]:
    """
    Build a search index without blocking the event loop.

    Args:
        items: Records to index
        options: SearchOptions or mapping
        executor: Executor to build on (loop default when None)

    Returns:
        Immutable search index
    """
    return await asyncio.get_running_loop().run_in_executor(
        executor, create_index_sync, items, options
    )
