"""
File formats for word embeddings.
"""

from .word2vec import (
    load,
    read_word2vec_binary,
    save,
    write_text,
    write_word2vec_binary,
)

__all__ = [
    "load",
    "read_word2vec_binary",
    "save",
    "write_text",
    "write_word2vec_binary",
]
