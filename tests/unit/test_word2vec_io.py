"""
Unit tests for the word2vec binary reader and writer.

Tests for:
- Header parsing and format errors
- Truncated input
- Normalization on load
- Duplicate words
- Serialization order and round trips
- Text export
"""

import io
import struct

import numpy as np
import pytest

from wordvec import (
    Embeddings,
    FormatError,
    TruncatedInputError,
    load,
    read_word2vec_binary,
    save,
    write_text,
    write_word2vec_binary,
)


class TestRead:
    """Tests for read_word2vec_binary."""

    def test_reads_words_in_file_order(self, fruit_stream):
        store = read_word2vec_binary(fruit_stream, normalize=False)

        assert store.size() == 3
        assert store.embedding_size() == 2
        assert store.words == ("apple", "pear", "banana")
        np.testing.assert_allclose(store.embedding("banana"), [0.2, 1.0], rtol=1e-6)

    def test_fruit_similarity_after_load(self, fruit_stream):
        store = read_word2vec_binary(fruit_stream, normalize=False)
        results = store.similarity("apple", 2)

        assert [r.word for r in results] == ["pear", "banana"]
        assert results[0].similarity == pytest.approx(0.8, abs=1e-6)

    def test_normalize(self, encode):
        data = encode([("a", [3.0, 4.0]), ("b", [0.0, -2.0]), ("c", [1.0, 1.0])])
        store = read_word2vec_binary(io.BytesIO(data), normalize=True)

        np.testing.assert_allclose(store.embedding("a"), [0.6, 0.8], rtol=1e-6)
        for _, embedding in store.items():
            assert np.linalg.norm(embedding) == pytest.approx(1.0, abs=1e-6)

    def test_normalize_default(self, fruit_stream):
        store = read_word2vec_binary(fruit_stream)

        for _, embedding in store.items():
            assert np.linalg.norm(embedding) == pytest.approx(1.0, abs=1e-6)

    def test_normalize_zero_vector(self, encode):
        """Test that zero vectors stay zero when normalizing."""
        data = encode([("zero", [0.0, 0.0]), ("one", [1.0, 0.0])])
        store = read_word2vec_binary(io.BytesIO(data), normalize=True)

        np.testing.assert_array_equal(store.embedding("zero"), [0.0, 0.0])

    def test_header_whitespace(self, encode):
        """Test that the header integers may be separated by any whitespace."""
        records = [("a", [1.0, 2.0])]
        data = encode(records, header=b"  1\t2\n")
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        assert store.words == ("a",)
        np.testing.assert_array_equal(store.embedding("a"), [1.0, 2.0])

    def test_newline_after_vectors(self):
        """Test files that end each record with a newline, as word2vec writes them."""
        data = (
            b"2 1\n"
            + b"a " + struct.pack("<f", 1.0) + b"\n"
            + b"b " + struct.pack("<f", 2.0) + b"\n"
        )
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        assert store.words == ("a", "b")
        np.testing.assert_array_equal(store.embedding("b"), [2.0])

    def test_little_endian(self):
        data = b"1 1\nx " + bytes([0x00, 0x00, 0x80, 0x3F])
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        assert store.embedding("x")[0] == 1.0

    def test_non_utf8_word(self, encode):
        data = encode([(b"caf\xe9", [1.0])])
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        assert store.size() == 1
        assert store.words[0].encode("utf-8", "surrogateescape") == b"caf\xe9"

    def test_empty_file_with_header(self):
        store = read_word2vec_binary(io.BytesIO(b"0 5\n"), normalize=False)

        assert store.size() == 0
        assert store.embedding_size() == 5

    def test_backend(self, fruit_stream):
        store = read_word2vec_binary(fruit_stream, normalize=False, backend="python")

        assert [r.word for r in store.similarity("apple", 2)] == ["pear", "banana"]


class TestReadErrors:
    """Tests for malformed and truncated input."""

    @pytest.mark.parametrize("header", [b"", b"abc 2\n", b"3\n", b"3 x\n", b"-1 2\n", b"3.5 2\n"])
    def test_bad_header(self, header):
        with pytest.raises(FormatError):
            read_word2vec_binary(io.BytesIO(header + b"a " + b"\x00" * 8), normalize=False)

    def test_truncated_vector(self, encode):
        data = encode([("a", [1.0, 2.0]), ("b", [3.0, 4.0])])
        with pytest.raises(TruncatedInputError) as exc_info:
            read_word2vec_binary(io.BytesIO(data[:-3]), normalize=False)

        assert exc_info.value.expected == 8
        assert exc_info.value.actual == 5

    def test_fewer_records_than_header(self, encode):
        data = encode([("a", [1.0, 2.0])], header=b"2 2\n")
        with pytest.raises(TruncatedInputError):
            read_word2vec_binary(io.BytesIO(data), normalize=False)

    def test_truncated_word(self):
        with pytest.raises(TruncatedInputError):
            read_word2vec_binary(io.BytesIO(b"1 2\nappl"), normalize=False)

    def test_truncated_is_eof_error(self):
        with pytest.raises(EOFError):
            read_word2vec_binary(io.BytesIO(b"1 2\n"), normalize=False)


class TestDuplicates:
    """Tests for words that occur more than once in a file."""

    def test_last_embedding_wins_first_row(self, encode):
        """Test that a repeated word keeps its first row and its last embedding."""
        data = encode([
            ("a", [1.0, 0.0]),
            ("b", [0.0, 1.0]),
            ("a", [0.5, 0.5]),
        ])
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        assert store.size() == 2
        assert store.words == ("a", "b")
        assert store.word_index("a") == 0
        np.testing.assert_array_equal(store.embedding("a"), [0.5, 0.5])

    def test_duplicates_keep_indices_bijective(self, encode):
        data = encode([("x", [1.0]), ("x", [2.0]), ("y", [3.0]), ("x", [4.0])])
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)

        for idx in range(store.size()):
            assert store.word_index(store.word_at(idx)) == idx
        np.testing.assert_array_equal(store.embedding("x"), [4.0])


class TestWrite:
    """Tests for write_word2vec_binary."""

    def test_exact_bytes(self, fruit_binary, fruit_stream):
        """Test that writing a loaded file reproduces it byte for byte."""
        store = read_word2vec_binary(fruit_stream, normalize=False)
        out = io.BytesIO()
        write_word2vec_binary(store, out)

        assert out.getvalue() == fruit_binary

    def test_insertion_order(self):
        """Test that rows are written in insertion order, not sorted."""
        store = Embeddings(1)
        for word in ["zebra", "apple", "mango"]:
            store.put(word, [1.0])
        out = io.BytesIO()
        write_word2vec_binary(store, out)

        loaded = read_word2vec_binary(io.BytesIO(out.getvalue()), normalize=False)
        assert loaded.words == ("zebra", "apple", "mango")

    def test_round_trip_bit_exact(self):
        rng = np.random.RandomState(3)
        store = Embeddings(16)
        for i in range(40):
            store.put(f"word{i}", rng.standard_normal(16).astype(np.float32))

        out = io.BytesIO()
        write_word2vec_binary(store, out)
        loaded = read_word2vec_binary(io.BytesIO(out.getvalue()), normalize=False)

        assert loaded.words == store.words
        assert loaded.matrix.tobytes() == store.matrix.tobytes()

    def test_round_trip_non_utf8_word(self, encode):
        data = encode([(b"\xff\xfe", [1.0])])
        store = read_word2vec_binary(io.BytesIO(data), normalize=False)
        out = io.BytesIO()
        write_word2vec_binary(store, out)

        assert out.getvalue() == data

    def test_round_trip_unusual_words(self):
        """Test that inner whitespace and non-ASCII words survive write and read."""
        store = Embeddings(2)
        for word in ["a\tb", "c\nd", "caf\u00e9", "\u6771\u4eac", "\U0001f600"]:
            store.put(word, [1.0, -1.0])

        out = io.BytesIO()
        write_word2vec_binary(store, out)
        loaded = read_word2vec_binary(io.BytesIO(out.getvalue()), normalize=False)

        assert loaded.words == store.words
        for word in store.words:
            assert loaded.word_index(word) == store.word_index(word)
        assert loaded.matrix.tobytes() == store.matrix.tobytes()

    def test_empty_store_writes_nothing(self):
        out = io.BytesIO()
        write_word2vec_binary(Embeddings(3), out)

        assert out.getvalue() == b""

    def test_zero_embedding_size_writes_nothing(self):
        store = Embeddings(0)
        store.put("a", [])
        out = io.BytesIO()
        write_word2vec_binary(store, out)

        assert out.getvalue() == b""

    def test_save_and_load(self, tmp_path, fruit_store):
        path = tmp_path / "out.bin"
        save(fruit_store, path)
        loaded = load(path, normalize=False)

        assert loaded.words == fruit_store.words
        np.testing.assert_array_equal(loaded.matrix, fruit_store.matrix)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load(tmp_path / "missing.bin")


class TestWriteText:
    """Tests for the text export."""

    def test_lines(self, fruit_store):
        out = io.StringIO()
        write_text(fruit_store, out)

        assert out.getvalue().splitlines() == [
            "apple 1.000000 0.000000",
            "pear 0.800000 0.100000",
            "banana 0.200000 1.000000",
        ]

    def test_header_and_precision(self, fruit_store):
        out = io.StringIO()
        write_text(fruit_store, out, precision=2, header=True)

        lines = out.getvalue().splitlines()
        assert lines[0] == "3 2"
        assert lines[2] == "pear 0.80 0.10"

    def test_empty_store(self):
        out = io.StringIO()
        write_text(Embeddings(2), out)

        assert out.getvalue() == ""
