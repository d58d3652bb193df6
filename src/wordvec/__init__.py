"""
wordvec - word embedding similarity and analogy queries.

Loads pre-trained embeddings from word2vec binary files into a compact
in-memory store and answers nearest-neighbour and analogy queries.

Key components:
- embeddings.py: Embeddings store (one float32 matrix plus word indices)
- similarity.py: Scoring backends and bounded top-K ranking
- io/: word2vec binary reader/writer and text export
- core/: Types, exceptions, and logging utilities
- config.py, cli.py: Configuration and command-line tools

Example:
    >>> from wordvec import Embeddings
    >>> store = Embeddings(2)
    >>> store.put("apple", [1.0, 0.0])
    >>> store.put("pear", [0.8, 0.1])
    >>> store.similarity("apple", 1)[0].word
    'pear'
"""

from .core import (
    ConfigError,
    DimensionMismatch,
    DimensionMismatchError,
    FormatError,
    IterFunc,
    InvalidWordError,
    TruncatedInputError,
    UnknownWordError,
    WordSimilarity,
    WordVecError,
)
from .embeddings import Embeddings, l2_normalize
from .io import load, read_word2vec_binary, save, write_text, write_word2vec_binary

__version__ = "0.1.0"

__all__ = [
    "Embeddings",
    "l2_normalize",
    "WordSimilarity",
    "IterFunc",
    "load",
    "save",
    "read_word2vec_binary",
    "write_word2vec_binary",
    "write_text",
    "WordVecError",
    "FormatError",
    "TruncatedInputError",
    "DimensionMismatchError",
    "DimensionMismatch",
    "InvalidWordError",
    "UnknownWordError",
    "ConfigError",
]
