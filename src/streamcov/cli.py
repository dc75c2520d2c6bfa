"""
Command line interface for streamcov.

Streams the rows of a sample file through a CovarianceMatrix consumer and
reports the resulting covariance estimate.
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from . import __version__
from .covariance_matrix import CovarianceMatrix
from .io_utils import iter_chunks, load_samples, save_matrix
from .logging_config import setup_logging
from .producer import Producer, feed_concurrently


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _split_batches(samples: np.ndarray, n_batches: int) -> list[np.ndarray]:
    """Split a sample matrix into contiguous row batches, one per thread."""
    n_batches = min(n_batches, max(samples.shape[0], 1))
    return [np.asarray(batch) for batch in np.array_split(samples, n_batches)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamcov",
        description="Running covariance matrix of a stream of samples",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Covariance of the rows of a CSV file
  streamcov chain.csv

  # Feed the samples from 4 producer threads and save the result
  streamcov chain.npy --threads 4 --output covariance.npy

  # Also print the running mean
  streamcov chain.txt --show-mean
        """,
    )

    parser.add_argument("input", help="Sample file (.npy, .csv, .txt, .dat), one sample per row")

    parser.add_argument(
        "-o", "--output", help="Write the covariance matrix to this file (.npy or text)"
    )

    parser.add_argument(
        "-t",
        "--threads",
        type=_positive_int,
        default=1,
        help="Number of producer threads feeding the accumulator (default: 1)",
    )

    parser.add_argument(
        "--dtype",
        choices=["float32", "float64"],
        default="float64",
        help="Floating point type of the accumulator (default: float64)",
    )

    parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=100_000,
        help="Rows read at a time in single-threaded mode (default: 100000)",
    )

    parser.add_argument(
        "--log-file", help="Also write log messages to this file"
    )

    parser.add_argument(
        "--show-mean", action="store_true", help="Also print the running mean"
    )

    parser.add_argument(
        "--version", action="version", version=f"streamcov {__version__}"
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    return parser


def run(args: argparse.Namespace) -> CovarianceMatrix:
    """Load the samples named by ``args`` and stream them into a new accumulator."""
    samples = load_samples(args.input)
    accumulator = CovarianceMatrix(dtype=np.dtype(args.dtype))

    if args.threads > 1:
        feed_concurrently(accumulator, _split_batches(samples, args.threads))
    else:
        producer = Producer(name="file").connect(accumulator)
        for chunk in iter_chunks(samples, args.chunk_size):
            producer.sample(chunk)

    return accumulator


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.INFO if args.verbose else logging.WARNING, args.log_file)

    input_path = Path(args.input)

    if args.verbose:
        print(f"streamcov {__version__}")
        print(f"Input: {input_path}")
        print(f"Threads: {args.threads}")
        print(f"Dtype: {args.dtype}")

    try:
        accumulator = run(args)
        state = accumulator.state()

        print(f"Samples: {state.n_samples}")
        print(f"Dimension: {accumulator.dimension or 0}")
        if args.show_mean and state.mean is not None:
            print("Mean:")
            print(np.array2string(state.mean, precision=6))
        print("Covariance:")
        print(np.array2string(state.covariance, precision=6))

        if args.output:
            save_matrix(args.output, state.covariance)
            print(f"Saved covariance matrix to '{args.output}'")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
