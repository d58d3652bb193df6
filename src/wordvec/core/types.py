"""
Core data types for the wordvec package.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np


# Visitor for Embeddings.iterate(). Return False to stop the iteration.
IterFunc = Callable[[str, np.ndarray], bool]


@dataclass(frozen=True)
class WordSimilarity:
    """
    Similarity of a stored word to a query vector.

    Attributes:
        word: The stored word
        similarity: Dot product of the word's embedding and the query.
            This is the cosine similarity when both are unit vectors.
    """
    word: str
    similarity: float

    def __iter__(self):
        # Allows ``word, score = result``.
        yield self.word
        yield self.similarity

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {"word": self.word, "similarity": self.similarity}
