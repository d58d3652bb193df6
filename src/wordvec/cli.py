#!/usr/bin/env python3
"""
Command-line tools for word embeddings.

Usage:
    wordvec --help
    wordvec similarity vectors.bin < words.txt
    wordvec analogy vectors.bin < analogies.txt
    wordvec bin2text vectors.bin -o vectors.txt
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .config import WordVecConfig
from .core.exceptions import WordVecError, UnknownWordError
from .core.logging import configure_logging
from .core.types import WordSimilarity
from .embeddings import Embeddings
from .io import load, write_text


logger = logging.getLogger(__name__)


def print_results(results: List[WordSimilarity]) -> None:
    for result in results:
        # str() gives the shortest float32 repr; format() would widen to float64.
        print(f"{result.word} {str(np.float32(result.similarity))}")


def load_embeddings(args: argparse.Namespace, config: WordVecConfig) -> Optional[Embeddings]:
    """Load the vectors file named on the command line, or None on failure."""
    normalize = config.normalize if args.normalize is None else args.normalize
    backend = args.backend or config.backend

    try:
        embeddings = load(args.vectors, normalize=normalize, backend=backend)
    except OSError as e:
        logger.error(f"Cannot open file: {e}")
        return None
    except WordVecError as e:
        logger.error(f"Cannot read vectors from {args.vectors}: {e}")
        return None

    logger.info(
        f"Loaded {embeddings.size()} embeddings",
        extra={"path": args.vectors, "embedding_size": embeddings.embedding_size()},
    )
    return embeddings


def cmd_similarity(args: argparse.Namespace, config: WordVecConfig) -> int:
    """Print the words most similar to each word read from stdin."""
    embeddings = load_embeddings(args, config)
    if embeddings is None:
        return 1

    limit = config.limit if args.limit is None else args.limit

    for line in sys.stdin:
        for word in line.split():
            try:
                results = embeddings.similarity(word, limit)
            except UnknownWordError as e:
                print(str(e), file=sys.stderr)
                return 1

            print_results(results)

    return 0


def cmd_analogy(args: argparse.Namespace, config: WordVecConfig) -> int:
    """Answer one 'a b c' analogy per stdin line."""
    embeddings = load_embeddings(args, config)
    if embeddings is None:
        return 1

    limit = config.limit if args.limit is None else args.limit

    for line in sys.stdin:
        line = line.rstrip("\r\n")
        if not line:
            continue

        parts = line.split(" ")
        if len(parts) != 3:
            print(f"Skipping line that does not have three words: {line}", file=sys.stderr)
            continue

        try:
            results = embeddings.analogy(parts[0], parts[1], parts[2], limit)
        except UnknownWordError as e:
            print(str(e), file=sys.stderr)
            continue

        print_results(results)

    return 0


def cmd_bin2text(args: argparse.Namespace, config: WordVecConfig) -> int:
    """Convert a binary vectors file to the text format."""
    embeddings = load_embeddings(args, config)
    if embeddings is None:
        return 1

    precision = config.precision if args.precision is None else args.precision

    if args.output:
        with open(args.output, "w", encoding="utf-8", errors="surrogateescape") as f:
            write_text(embeddings, f, precision=precision, header=args.header)
        logger.info(f"Text vectors written to {args.output}")
    else:
        write_text(embeddings, sys.stdout, precision=precision, header=args.header)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordvec",
        description="Word embedding similarity and analogy queries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--log-json", action="store_true", help="Write JSON log lines")
    parser.add_argument("--config", help="YAML configuration file")

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("vectors", help="word2vec binary vectors file")
    common.add_argument(
        "--no-normalize", dest="normalize", action="store_const", const=False, default=None,
        help="Do not normalize embeddings to unit length",
    )
    common.add_argument("--backend", choices=["numpy", "python"], help="Scoring backend")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # similarity command
    similarity_parser = subparsers.add_parser(
        "similarity", parents=[common], help="Find similar words for words read from stdin"
    )
    similarity_parser.add_argument("-n", "--limit", type=int, help="Number of results per query")
    similarity_parser.set_defaults(func=cmd_similarity)

    # analogy command
    analogy_parser = subparsers.add_parser(
        "analogy", parents=[common], help="Answer 'a b c' analogies read from stdin"
    )
    analogy_parser.add_argument("-n", "--limit", type=int, help="Number of results per query")
    analogy_parser.set_defaults(func=cmd_analogy)

    # bin2text command
    bin2text_parser = subparsers.add_parser(
        "bin2text", parents=[common], help="Convert binary vectors to text"
    )
    bin2text_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    bin2text_parser.add_argument("--header", action="store_true", help="Write a count/size header line")
    bin2text_parser.add_argument("--precision", type=int, help="Decimals per component")
    bin2text_parser.set_defaults(func=cmd_bin2text)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        structured=args.log_json,
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = WordVecConfig(args.config)
    except WordVecError as e:
        logger.error(str(e))
        return 1

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
