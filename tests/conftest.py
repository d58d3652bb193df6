"""
Shared test fixtures and configuration for pytest.
"""

import io
import struct
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from wordvec import Embeddings


def encode_word2vec(records, embedding_size=None, header=None) -> bytes:
    """
    Build a word2vec binary file in memory.

    Args:
        records: List of (word, vector) pairs
        embedding_size: Size written to the header (default: first vector length)
        header: Raw header bytes, overriding the computed header
    """
    if embedding_size is None:
        embedding_size = len(records[0][1]) if records else 0
    if header is None:
        header = f"{len(records)} {embedding_size}\n".encode("ascii")

    buf = bytearray(header)
    for word, vector in records:
        word_bytes = word if isinstance(word, bytes) else word.encode("utf-8")
        buf += word_bytes + b" "
        buf += struct.pack(f"<{len(vector)}f", *vector)
    return bytes(buf)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fruit_store() -> Embeddings:
    """Small unnormalized store with known dot products."""
    store = Embeddings(2)
    store.put("apple", [1.0, 0.0])
    store.put("pear", [0.8, 0.1])
    store.put("banana", [0.2, 1.0])
    return store


@pytest.fixture
def royalty_records():
    """Records where king - man + woman lands on queen."""
    return [
        ("man", [1.0, 0.0, 0.0]),
        ("woman", [1.0, 1.0, 0.0]),
        ("king", [1.0, 0.0, 1.0]),
        ("queen", [1.0, 1.0, 1.0]),
        ("apple", [0.0, 0.0, -1.0]),
    ]


@pytest.fixture
def royalty_store(royalty_records) -> Embeddings:
    store = Embeddings(3)
    for word, vector in royalty_records:
        store.put(word, vector)
    return store


@pytest.fixture
def fruit_binary() -> bytes:
    return encode_word2vec([
        ("apple", [1.0, 0.0]),
        ("pear", [0.8, 0.1]),
        ("banana", [0.2, 1.0]),
    ])


@pytest.fixture
def fruit_stream(fruit_binary) -> io.BytesIO:
    return io.BytesIO(fruit_binary)


@pytest.fixture
def fruit_file(tmp_path, fruit_binary) -> Path:
    path = tmp_path / "fruit.bin"
    path.write_bytes(fruit_binary)
    return path


@pytest.fixture
def encode():
    """The encode_word2vec helper, for tests that build their own files."""
    return encode_word2vec
