"""
Reading and writing embeddings in the word2vec binary format.

File layout:

    <word_count> <embedding_size>\\n
    <word> <float32 LE> ... <float32 LE><word> <float32 LE> ...

The header holds two ASCII decimal integers. Each record is a word token
ended by a single space, followed by ``embedding_size`` little-endian
float32 values. Records are not framed; the vector length is positional.

Words are decoded as UTF-8 with ``surrogateescape``, so tokens that are not
valid UTF-8 still round-trip byte for byte.
"""

from pathlib import Path
from typing import BinaryIO, TextIO, Union

import numpy as np

from ..core.exceptions import FormatError, TruncatedInputError
from ..core.logging import get_logger
from ..embeddings import DTYPE, Embeddings, l2_normalize


logger = get_logger(__name__)

WIRE_DTYPE = np.dtype("<f4")
WORD_ENCODING = "utf-8"
WORD_ERRORS = "surrogateescape"
WHITESPACE = b" \t\n\r\v\f"

# Upper bound for the up-front allocation based on the header word count.
MAX_PREALLOCATE_BYTES = 256 * 1024 * 1024


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    """Read ``n`` bytes, or fewer only if the stream is exhausted."""
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _read_header_int(stream: BinaryIO, name: str) -> int:
    """Read one whitespace-delimited decimal integer from the header."""
    ch = stream.read(1)
    while ch and ch in WHITESPACE:
        ch = stream.read(1)

    digits = bytearray()
    while ch and ch.isdigit():
        digits += ch
        ch = stream.read(1)

    if not digits:
        raise FormatError(f"Cannot read {name} from header: expected a decimal integer")
    if ch and ch not in WHITESPACE:
        raise FormatError(f"Cannot read {name} from header: unexpected byte {ch!r}")

    return int(digits)


def _read_word(stream: BinaryIO) -> str:
    """Read a word token up to and including its space terminator."""
    buf = bytearray()
    while True:
        ch = stream.read(1)
        if not ch:
            raise TruncatedInputError(
                f"Unexpected end of input while reading word: {bytes(buf)!r}"
            )
        if ch == b" ":
            break
        buf += ch

    return bytes(buf).strip(WHITESPACE).decode(WORD_ENCODING, WORD_ERRORS)


def read_word2vec_binary(
    stream: BinaryIO,
    normalize: bool = True,
    backend: str = "numpy",
) -> Embeddings:
    """
    Read word embeddings from a word2vec binary stream.

    A word that occurs more than once keeps the row of its first occurrence;
    the embedding of its last occurrence is stored in that row.

    Args:
        stream: Binary stream positioned at the header
        normalize: Normalize every embedding to unit L2 norm
        backend: Scoring backend for the returned store

    Returns:
        Embeddings in file order

    Raises:
        FormatError: If the header is not two decimal integers
        TruncatedInputError: If the stream ends before all records are read
    """
    n_words = _read_header_int(stream, "word count")
    embed_size = _read_header_int(stream, "embedding size")

    embeddings = Embeddings(embed_size, backend=backend)
    n_bytes = embed_size * WIRE_DTYPE.itemsize
    embeddings.reserve(min(n_words, MAX_PREALLOCATE_BYTES // max(n_bytes, 1)))

    for idx in range(n_words):
        word = _read_word(stream)

        data = _read_exact(stream, n_bytes)
        if len(data) < n_bytes:
            raise TruncatedInputError(
                f"Unexpected end of input in embedding {idx} ({word!r}): "
                f"expected {n_bytes} bytes, got {len(data)}",
                expected=n_bytes,
                actual=len(data),
            )

        embedding = np.frombuffer(data, dtype=WIRE_DTYPE).astype(DTYPE)
        if normalize:
            l2_normalize(embedding)

        if word in embeddings:
            logger.debug(f"Duplicate word {word!r} at record {idx}, replacing embedding")

        embeddings.put(word, embedding)

    logger.debug(
        "Loaded embeddings",
        extra={"words": embeddings.size(), "embedding_size": embed_size},
    )
    return embeddings


def write_word2vec_binary(embeddings: Embeddings, stream: BinaryIO) -> None:
    """
    Write embeddings in the word2vec binary format, in row order.

    Nothing is written when the store is empty or the embedding size is 0.
    """
    if embeddings.size() == 0 or embeddings.embedding_size() == 0:
        return

    header = f"{embeddings.size()} {embeddings.embedding_size()}\n"
    stream.write(header.encode("ascii"))

    for word, embedding in embeddings.items():
        stream.write(word.encode(WORD_ENCODING, WORD_ERRORS) + b" ")
        stream.write(embedding.astype(WIRE_DTYPE, copy=False).tobytes())


def write_text(
    embeddings: Embeddings,
    stream: TextIO,
    precision: int = 6,
    header: bool = False,
) -> None:
    """
    Write embeddings as text, one ``word f1 f2 ... fD`` line per word.

    Args:
        embeddings: Embeddings to write
        stream: Text stream
        precision: Number of decimals for each component
        header: Start with a ``<word_count> <embedding_size>`` line
    """
    if header:
        stream.write(f"{embeddings.size()} {embeddings.embedding_size()}\n")

    def write_line(word: str, embedding: np.ndarray) -> bool:
        values = " ".join(f"{value:.{precision}f}" for value in embedding.tolist())
        stream.write(f"{word} {values}\n")
        return True

    embeddings.iterate(write_line)


def load(path: Union[str, Path], normalize: bool = True, backend: str = "numpy") -> Embeddings:
    """Read embeddings from a word2vec binary file."""
    path = Path(path)
    logger.debug("Reading embeddings", extra={"path": str(path)})
    with open(path, "rb") as f:
        return read_word2vec_binary(f, normalize=normalize, backend=backend)


def save(embeddings: Embeddings, path: Union[str, Path]) -> None:
    """Write embeddings to a word2vec binary file."""
    with open(path, "wb") as f:
        write_word2vec_binary(embeddings, f)
