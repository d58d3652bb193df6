"""
Custom exceptions for the wordvec package.
"""


class WordVecError(Exception):
    """Base exception for all wordvec errors."""
    pass


class FormatError(WordVecError):
    """
    Error parsing a word2vec binary file.

    Raised when:
    - The header does not start with two decimal integers
    - A word token cannot be represented
    """
    pass


class TruncatedInputError(WordVecError, EOFError):
    """
    The input stream ended before all declared data was read.

    Raised when a word token is cut off or when fewer than
    ``embedding_size`` floats are available for a record.
    """

    def __init__(self, message: str, expected: int = None, actual: int = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DimensionMismatchError(WordVecError, ValueError):
    """
    A vector does not have the store's embedding size.

    The store is never modified when this is raised.
    """

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected embedding size: {expected}, got: {actual}")
        self.expected = expected
        self.actual = actual


# Shorter name used throughout the docs.
DimensionMismatch = DimensionMismatchError


class InvalidWordError(WordVecError, ValueError):
    """
    A word cannot be stored in the word2vec binary format.

    Words may not contain a space, and may not start or end with
    whitespace. The store is never modified when this is raised.
    """

    def __init__(self, word: str):
        super().__init__(f"Invalid word: {word!r} (contains a space or surrounding whitespace)")
        self.word = word


class UnknownWordError(WordVecError, KeyError):
    """A query referenced a word that is not in the store."""

    def __init__(self, word: str):
        super().__init__(word)
        self.word = word

    def __str__(self) -> str:
        return f"Unknown word: {self.word}"


class ConfigError(WordVecError):
    """
    Error in wordvec configuration.

    Raised when:
    - Configuration file is missing or not a mapping
    - Configuration values are out of valid range
    """
    pass
