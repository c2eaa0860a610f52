"""BM25 query engine over a prebuilt search index."""

import asyncio
import logging
import math
import time
from concurrent.futures import Executor
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from ..models.options import ResolvedOptions, SortBy
from ..models.result import SearchResult
from ..utils.flatten import PATH_SEPARATOR, get_nested_value
from ..utils.text_processing import TextProcessor
from ..utils.validators import coerce_options, resolve_options, validate_query
from .index import FieldIndex, SearchIndex, T
from .scoring import bm25_weights, inverse_document_frequency

logger = logging.getLogger(__name__)


def _unique(terms: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(terms))


def _list_all(index: SearchIndex[T]) -> List[SearchResult[T]]:
    """Every item with a zero score, in insertion order."""
    return [SearchResult(item=item, score=0.0) for item in index.items]


def _field_allowed(path: str, allowed: Optional[Tuple[str, ...]]) -> bool:
    if allowed is None:
        return True
    return any(path == prefix or path.startswith(prefix + PATH_SEPARATOR) for prefix in allowed)


def _score_documents(
    index: SearchIndex[T],
    query_terms: List[str],
    options: ResolvedOptions
) -> Tuple[np.ndarray, np.ndarray, Dict[int, Set[str]]]:
    """
    Accumulate boosted BM25 scores for every document.

    When a query term matches several indexed terms in one field of a
    document (exact, prefix or fuzzy), the strongest contribution counts.

    Returns:
        Scores per document, mask of documents hit by any term, and the
        query terms matched per hit document
    """
    total_docs = index.document_count
    scores = np.zeros(total_docs, dtype=np.float64)
    hit_mask = np.zeros(total_docs, dtype=bool)
    matched_terms: Dict[int, Set[str]] = {}

    for path, field_index in index.field_indexes.items():
        if not _field_allowed(path, options.field_paths):
            continue

        boost = options.boost_for(path)
        for term in query_terms:
            columns = field_index.match_columns(term)
            if not columns:
                continue

            term_hits, best = _score_term(field_index, columns, options)
            scores += boost * best
            hit_mask |= term_hits

            for doc_id in np.flatnonzero(term_hits).tolist():
                matched_terms.setdefault(doc_id, set()).add(term)

    return scores, hit_mask, matched_terms


def _score_term(
    field_index: FieldIndex,
    columns: List[Tuple[int, float]],
    options: ResolvedOptions
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Score one query term within one field.

    Prefix and fuzzy expansions are discounted against the exact term, and
    document frequency is counted over every document the query term hits,
    so a rare expansion cannot outweigh a common exact match.
    """
    total_docs = field_index.doc_lengths.shape[0]
    best = np.zeros(total_docs, dtype=np.float64)
    term_hits = np.zeros(total_docs, dtype=bool)

    for column, weight in columns:
        term_freq = field_index.term_frequencies(column)
        weights = weight * bm25_weights(
            term_freq,
            field_index.doc_lengths,
            field_index.avg_length,
            k1=options.k1,
            b=options.b
        )
        np.maximum(best, weights, out=best)
        term_hits |= term_freq > 0

    if len(columns) == 1:
        doc_freq = int(field_index.doc_freq[columns[0][0]])
    else:
        # Union of the expansions, so one document counts once
        doc_freq = int(term_hits.sum())

    idf = inverse_document_frequency(doc_freq, total_docs)
    return term_hits, idf * best


def _sort_key(value: Any) -> Tuple[int, Any]:
    """Total order over mixed property values: numbers, then strings, then the rest."""
    if isinstance(value, (bool, int)):
        return (0, value)
    if isinstance(value, float) and not math.isnan(value):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, str(value))


def _order_by_property(index: SearchIndex[T], doc_ids: List[int], sort_by: SortBy) -> List[int]:
    """
    Order documents by an item property.

    Ties keep insertion order; items missing the property go last in
    insertion order whatever the direction.
    """
    present: List[Tuple[Tuple[int, Any], int]] = []
    missing: List[int] = []

    for doc_id in doc_ids:
        value = get_nested_value(index.items[doc_id], sort_by.property)
        if value is None:
            missing.append(doc_id)
        else:
            present.append((_sort_key(value), doc_id))

    # list.sort stays stable with reverse=True
    present.sort(key=lambda pair: pair[0], reverse=sort_by.descending)
    return [doc_id for _, doc_id in present] + missing


def _order_by_score(doc_ids: np.ndarray, scores: np.ndarray) -> List[int]:
    """Descending score, ties by insertion order."""
    order = np.lexsort((doc_ids, -scores[doc_ids]))
    return doc_ids[order].tolist()


def search_sync(
    index: SearchIndex[T],
    query: str,
    options: Any = None
) -> List[SearchResult[T]]:
    """
    Rank the indexed items against a free-text query.

    Args:
        index: Index built by create_index
        query: Query text; empty or whitespace returns every item with score 0
        options: Overrides merged over the index options (override wins)

    Returns:
        Ranked search results, possibly empty

    Raises:
        ValidationError: If query or options have the wrong shape
    """
    start_time = time.perf_counter()

    validate_query(query)
    overrides = coerce_options(options)
    if overrides.case_sensitive is not None and overrides.case_sensitive != index.processor.case_sensitive:
        logger.warning("case_sensitive is fixed when the index is built; ignoring override")
        overrides = replace(overrides, case_sensitive=None)

    effective = resolve_options(index.options.merged_with(overrides))

    if TextProcessor.is_blank(query):
        return _list_all(index)

    query_terms = _unique(index.processor.tokenize(query))
    if not query_terms:
        logger.debug(f"Query '{query[:50]}' has no terms, listing all items")
        return _list_all(index)

    if index.document_count == 0:
        return []

    scores, hit_mask, matched_terms = _score_documents(index, query_terms, effective)

    candidates = np.flatnonzero(hit_mask)
    kept = candidates[scores[candidates] >= effective.threshold]

    if effective.sort_by is not None:
        ordered = _order_by_property(index, kept.tolist(), effective.sort_by)
    else:
        ordered = _order_by_score(kept, scores)

    if effective.max_results is not None:
        ordered = ordered[:effective.max_results]

    results = [
        SearchResult(
            item=index.items[doc_id],
            score=float(scores[doc_id]),
            matches=[term for term in query_terms if term in matched_terms.get(doc_id, ())]
        )
        for doc_id in ordered
    ]

    search_time = time.perf_counter() - start_time
    logger.debug(
        f"Search for '{query[:50]}' matched {len(candidates)} items, "
        f"returned {len(results)} in {search_time:.3f}s"
    )
    return results


async def search(
    index: SearchIndex[T],
    query: str,
    options: Any = None,
    executor: Optional[Executor] = None
) -> List[SearchResult[T]]:
    """
    Rank the indexed items against a query without blocking the event loop.

    Args:
        index: Index built by create_index
        query: Query text
        options: Overrides merged over the index options
        executor: Executor to search on (loop default when None)

    Returns:
        Ranked search results
    """
    return await asyncio.get_running_loop().run_in_executor(
        executor, search_sync, index, query, options
    )
