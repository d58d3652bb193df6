"""
Core subpackage for wordvec.

Contains types, exceptions, and logging utilities.
"""

from .types import IterFunc, WordSimilarity
from .exceptions import (
    WordVecError,
    FormatError,
    TruncatedInputError,
    DimensionMismatchError,
    DimensionMismatch,
    InvalidWordError,
    UnknownWordError,
    ConfigError,
)

__all__ = [
    # Types
    "IterFunc",
    "WordSimilarity",
    # Exceptions
    "WordVecError",
    "FormatError",
    "TruncatedInputError",
    "DimensionMismatchError",
    "DimensionMismatch",
    "InvalidWordError",
    "UnknownWordError",
    "ConfigError",
]
