"""
Embeddings - in-memory word embedding store.

All embeddings live in a single float32 matrix, one row per word. A dict
maps words to row indices and a list maps row indices back to words, so
both directions are O(1) and rows have a stable, well-defined order that
is used for iteration and serialization.

Embeddings handed out by the store are read-only views into the matrix,
not copies. A ``put`` that adds a new word may move the matrix to a larger
buffer; views obtained before such a call still hold the old values and
no longer track the store.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from . import similarity as engine
from .core.exceptions import DimensionMismatchError, InvalidWordError
from .core.logging import get_logger
from .core.types import IterFunc, WordSimilarity


logger = get_logger(__name__)

DTYPE = np.float32

# Smallest number of rows allocated when the matrix has to grow.
MIN_CAPACITY = 16

# Whitespace stripped around word tokens when reading the binary format.
WORD_WHITESPACE = " \t\n\r\v\f"


def l2_normalize(embedding: np.ndarray) -> np.ndarray:
    """
    Normalize an embedding in place by its L2 norm.

    Zero vectors are left unchanged.
    """
    norm = np.sqrt(np.dot(embedding, embedding))
    if norm > 0:
        embedding /= norm
    return embedding


class Embeddings:
    """
    A set of word embeddings of a fixed size.

    Use ``Embeddings(embedding_size)`` with ``put`` to build a store
    incrementally, or ``wordvec.io.read_word2vec_binary`` to load one.
    """

    def __init__(self, embedding_size: int = 0, backend: Union[str, engine.Scorer] = engine.DEFAULT_BACKEND):
        """
        Create an empty store.

        Args:
            embedding_size: Length of every embedding in the store
            backend: Scoring backend name ('numpy' or 'python') or callable
        """
        if embedding_size < 0:
            raise ValueError(f"Embedding size must be >= 0, got: {embedding_size}")

        self._embed_size = int(embedding_size)
        self._matrix = np.zeros((0, self._embed_size), dtype=DTYPE)
        self._n_rows = 0
        self._indices: Dict[str, int] = {}
        self._words: List[str] = []
        self.scorer = engine.resolve_scorer(backend)

    def __repr__(self) -> str:
        return f"Embeddings(size={self.size()}, embedding_size={self._embed_size})"

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, word) -> bool:
        return word in self._indices

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._words))

    # =========================================================================
    # Accessors
    # =========================================================================

    def size(self) -> int:
        """Number of words in the store."""
        return len(self._words)

    def embedding_size(self) -> int:
        """Length of the embeddings."""
        return self._embed_size

    @property
    def words(self) -> Tuple[str, ...]:
        """Words in row order."""
        return tuple(self._words)

    @property
    def matrix(self) -> np.ndarray:
        """Read-only (size x embedding_size) view of the embedding matrix."""
        view = self._matrix[:self._n_rows]
        view.flags.writeable = False
        return view

    def set_backend(self, backend: Union[str, engine.Scorer]) -> None:
        """Set the scoring backend used by similarity queries."""
        self.scorer = engine.resolve_scorer(backend)

    # =========================================================================
    # Lookup
    # =========================================================================

    def embedding(self, word: str) -> Optional[np.ndarray]:
        """
        Return the embedding of ``word``, or None if the word is unknown.

        The result is a read-only view into the store.
        """
        idx = self._indices.get(word)
        if idx is None:
            return None
        return self.embedding_at(idx)

    def embedding_at(self, index: int) -> Optional[np.ndarray]:
        """Return the embedding in row ``index``, or None if out of range."""
        if not 0 <= index < self._n_rows:
            return None
        view = self._matrix[index]
        view.flags.writeable = False
        return view

    def word_index(self, word: str) -> Optional[int]:
        """Return the row index of ``word``, or None if the word is unknown."""
        return self._indices.get(word)

    def word_at(self, index: int) -> Optional[str]:
        """Return the word in row ``index``, or None if out of range."""
        if not 0 <= index < len(self._words):
            return None
        return self._words[index]

    # =========================================================================
    # Mutation
    # =========================================================================

    def put(self, word: str, embedding: Union[Sequence[float], np.ndarray]) -> None:
        """
        Add or replace the embedding of a word.

        A known word keeps its row and only its embedding is overwritten.
        An unknown word is appended as a new row.

        Raises:
            InvalidWordError: If the word contains a space or starts or ends
                with whitespace. The store is left unchanged.
            DimensionMismatchError: If the embedding has the wrong length.
                The store is left unchanged.
        """
        if " " in word or word.strip(WORD_WHITESPACE) != word:
            raise InvalidWordError(word)

        vector = np.asarray(embedding, dtype=DTYPE)
        if vector.ndim != 1 or vector.shape[0] != self._embed_size:
            raise DimensionMismatchError(self._embed_size, vector.size)

        idx = self._indices.get(word)
        if idx is not None:
            self._matrix[idx] = vector
            return

        if self._n_rows == self._matrix.shape[0]:
            self.reserve(max(MIN_CAPACITY, 2 * self._n_rows))

        self._matrix[self._n_rows] = vector
        self._indices[word] = self._n_rows
        self._words.append(word)
        self._n_rows += 1

    def reserve(self, capacity: int) -> None:
        """
        Make room for at least ``capacity`` rows without reallocation.

        Moves the matrix to a new buffer when it grows, which detaches
        previously returned views.
        """
        if capacity <= self._matrix.shape[0]:
            return

        logger.debug(
            f"Growing embedding matrix to {capacity} rows",
            extra={"words": self._n_rows, "embedding_size": self._embed_size},
        )
        matrix = np.zeros((capacity, self._embed_size), dtype=DTYPE)
        matrix[:self._n_rows] = self._matrix[:self._n_rows]
        self._matrix = matrix

    # =========================================================================
    # Iteration
    # =========================================================================

    def iterate(self, f: IterFunc) -> None:
        """
        Apply ``f`` to every (word, embedding) pair in row order.

        Iteration stops early when ``f`` returns False.
        """
        for word, embedding in self.items():
            if not f(word, embedding):
                break

    def items(self) -> Iterator[Tuple[str, np.ndarray]]:
        """Lazily yield (word, embedding) pairs in row order."""
        for idx in range(self._n_rows):
            yield self._words[idx], self.embedding_at(idx)

    # =========================================================================
    # Queries
    # =========================================================================

    def similarity(self, word: str, limit: int) -> List[WordSimilarity]:
        """
        Find words with embeddings similar to that of ``word``.

        Returns at most ``limit`` results ordered by descending similarity.
        The query word is never returned.

        Raises:
            UnknownWordError: If ``word`` is not in the store
        """
        return engine.similarity(self, word, limit)

    def analogy(self, word1: str, word2: str, word3: str, limit: int) -> List[WordSimilarity]:
        """
        Answer the analogy 'word1 is to word2 as word3 is to ?'.

        The query words are never returned.

        Raises:
            UnknownWordError: For the first query word that is not in the store
        """
        return engine.analogy(self, word1, word2, word3, limit)

    def similarity_to_vector(
        self,
        vector: Union[Sequence[float], np.ndarray],
        limit: int,
        skip: Sequence[int] = (),
    ) -> List[WordSimilarity]:
        """
        Find the words closest to an arbitrary query vector.

        Args:
            vector: Query vector of length ``embedding_size()``
            limit: Maximum number of results
            skip: Row indices to exclude

        Raises:
            DimensionMismatchError: If the vector has the wrong length
        """
        return engine.rank(self, vector, limit, skip=skip)
