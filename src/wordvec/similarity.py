"""
Similarity Engine - rank stored words against a query vector.

Implements:
- Scoring of every stored row against a query (matrix-vector product)
- Bounded top-K selection without sorting the vocabulary
- Deterministic ordering: equal scores keep row order (earlier rows win)
- Similarity and analogy queries on top of an Embeddings store

Scores are plain inner products. They equal cosine similarities when the
store was loaded with normalization enabled.
"""

import bisect
from typing import Callable, Dict, Iterable, List, Sequence, Union

import numpy as np

from .core.exceptions import DimensionMismatchError, UnknownWordError
from .core.logging import get_logger
from .core.types import WordSimilarity


logger = get_logger(__name__)


Scorer = Callable[[np.ndarray, np.ndarray], np.ndarray]


def numpy_scores(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Score all rows with a single matrix-vector product.

    numpy dispatches this to the BLAS sgemv routine for float32 input.
    """
    return matrix @ query


def python_scores(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Score all rows with a manual dot-product loop.

    Slower than ``numpy_scores`` but has no dependency on the BLAS build.
    Summation order differs, so scores may differ in the last bits.
    """
    q = query.tolist()
    scores = np.empty(matrix.shape[0], dtype=np.float32)

    for idx, row in enumerate(matrix.tolist()):
        total = 0.0
        for a, b in zip(row, q):
            total += a * b
        scores[idx] = total

    return scores


SCORERS: Dict[str, Scorer] = {
    "numpy": numpy_scores,
    "python": python_scores,
}

DEFAULT_BACKEND = "numpy"


def resolve_scorer(backend: Union[str, Scorer]) -> Scorer:
    """
    Look up a scoring backend by name, or accept a scorer callable.

    Raises:
        ValueError: If the backend name is not known
    """
    if callable(backend):
        return backend

    try:
        return SCORERS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown scoring backend: {backend!r} "
            f"(expected one of: {', '.join(sorted(SCORERS))})"
        ) from None


def top_k(
    scores: Sequence[float],
    words: Sequence[str],
    limit: int,
    skip: Iterable[int] = (),
) -> List[WordSimilarity]:
    """
    Select the ``limit`` best scoring rows.

    Keeps a result list sorted by descending score. Each candidate is
    inserted after all entries with a score greater than or equal to its
    own, so ties are ordered by row index. Once the list is full, a
    candidate that does not beat the last entry is rejected in O(1).

    Args:
        scores: One score per row
        words: Row index to word mapping
        limit: Maximum number of results (<= 0 gives an empty list)
        skip: Row indices that are never returned

    Returns:
        At most ``limit`` results, best first
    """
    if limit <= 0:
        return []

    skips = set(skip)
    results: List[WordSimilarity] = []
    # Negated scores, ascending, parallel to results. Used for bisection.
    keys: List[float] = []

    if isinstance(scores, np.ndarray):
        scores = scores.tolist()

    for idx, sim in enumerate(scores):
        if idx in skips:
            continue

        if len(results) == limit and not sim > results[-1].similarity:
            continue

        # bisect_right keeps earlier rows ahead of equal scores, unlike a "first <=" search.
        pos = bisect.bisect_right(keys, -sim)
        if pos >= limit:
            continue

        keys.insert(pos, -sim)
        results.insert(pos, WordSimilarity(words[idx], sim))

        if len(results) > limit:
            keys.pop()
            results.pop()

    return results


def rank(store, query, limit: int, skip: Iterable[int] = ()) -> List[WordSimilarity]:
    """
    Rank all words of ``store`` by similarity to ``query``.

    Args:
        store: Embeddings to search
        query: Query vector of length ``store.embedding_size()``
        limit: Maximum number of results
        skip: Row indices to exclude

    Raises:
        DimensionMismatchError: If the query has the wrong length
    """
    query = np.asarray(query, dtype=np.float32)
    if query.ndim != 1 or query.shape[0] != store.embedding_size():
        raise DimensionMismatchError(store.embedding_size(), query.size)

    if limit <= 0 or store.size() == 0:
        return []

    scores = store.scorer(store.matrix, query)
    return top_k(scores, store.words, limit, skip)


def similarity(store, word: str, limit: int) -> List[WordSimilarity]:
    """
    Find the words most similar to ``word``.

    The query word itself is never returned.

    Raises:
        UnknownWordError: If ``word`` is not in the store
    """
    idx = store.word_index(word)
    if idx is None:
        raise UnknownWordError(word)

    logger.debug("Similarity query", extra={"query": word})
    return rank(store, store.embedding_at(idx), limit, skip=(idx,))


def analogy(store, word1: str, word2: str, word3: str, limit: int) -> List[WordSimilarity]:
    """
    Answer the analogy 'word1 is to word2 as word3 is to ?'.

    With e1, e2, e3 the embeddings of the query words, the words closest to
    ``(e2 - e1) + e3`` are returned. The query words are never returned.

    Raises:
        UnknownWordError: For the first query word that is not in the store
    """
    indices = []
    for word in (word1, word2, word3):
        idx = store.word_index(word)
        if idx is None:
            raise UnknownWordError(word)
        indices.append(idx)

    idx1, idx2, idx3 = indices
    query = (store.embedding_at(idx2) - store.embedding_at(idx1)) + store.embedding_at(idx3)

    logger.debug("Analogy query", extra={"query": f"{word1}:{word2}::{word3}:?"})
    return rank(store, query, limit, skip=indices)
