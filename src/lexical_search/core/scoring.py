"""BM25 weighting and fuzzy term matching."""

from typing import Iterable, List, Tuple

import numpy as np

# Fixed tolerance: one substitution, insertion or deletion
MAX_EDIT_DISTANCE = 1

# Prefix and fuzzy expansions count less than the exact term
EXPANSION_DISCOUNT = 0.8


def inverse_document_frequency(doc_freq, total_docs: int):
    """
    Okapi IDF with the +1 inside the log so weights never go negative.

    Args:
        doc_freq: Number of documents containing the term (scalar or array)
        total_docs: Number of documents in the index

    Returns:
        IDF, same shape as doc_freq
    """
    doc_freq = np.asarray(doc_freq, dtype=np.float64)
    return np.log1p((total_docs - doc_freq + 0.5) / (doc_freq + 0.5))


def bm25_weights(
    term_freq: np.ndarray,
    doc_lengths: np.ndarray,
    avg_length: float,
    k1: float,
    b: float
) -> np.ndarray:
    """
    BM25 term weight without IDF, for every document at once.

    Documents with zero term frequency weigh zero.
    """
    term_freq = np.asarray(term_freq, dtype=np.float64)
    if avg_length <= 0:
        return np.zeros_like(term_freq)

    norm = k1 * (1.0 - b + b * (doc_lengths / avg_length))
    denominator = term_freq + norm
    weights = np.divide(
        term_freq * (k1 + 1.0),
        denominator,
        out=np.zeros_like(term_freq),
        where=denominator > 0
    )
    return weights


def within_one_edit(a: str, b: str) -> bool:
    """
    Check whether two terms differ by at most one edit.

    Single pass after a length pre-filter; no distance matrix is built.
    """
    if a == b:
        return True

    len_a, len_b = len(a), len(b)
    if abs(len_a - len_b) > MAX_EDIT_DISTANCE:
        return False

    if len_a > len_b:
        a, b = b, a
        len_a, len_b = len_b, len_a

    i = j = 0
    edited = False
    while i < len_a and j < len_b:
        if a[i] == b[j]:
            i += 1
            j += 1
            continue
        if edited:
            return False
        edited = True
        if len_a == len_b:
            # substitution
            i += 1
        # otherwise skip the extra character of the longer term
        j += 1

    # Any trailing character left in the longer term is the single edit
    return True


def match_weight(query_term: str, indexed_term: str) -> float:
    """
    Weight of an indexed term as an answer to a query term.

    Exact terms weigh 1.0. Indexed terms that start with the query term, or
    lie within one edit of it, weigh EXPANSION_DISCOUNT. Anything else is 0.
    """
    if indexed_term == query_term:
        return 1.0
    if indexed_term.startswith(query_term) or within_one_edit(query_term, indexed_term):
        return EXPANSION_DISCOUNT
    return 0.0


def expand_query_term(query_term: str, vocabulary: Iterable[str]) -> List[Tuple[str, float]]:
    """Return ``(term, weight)`` for every vocabulary term matched, sorted by term."""
    expansions = []
    for term in vocabulary:
        weight = match_weight(query_term, term)
        if weight > 0:
            expansions.append((term, weight))
    return sorted(expansions)
