import logging
import warnings
from collections.abc import Iterator
from pathlib import Path

import numpy as np
import psutil

from .errors import SampleFileError

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".csv", ".txt", ".dat"}


def get_available_memory_mb():
    return psutil.virtual_memory().available / (1024 * 1024)


def load_samples(file_path) -> np.ndarray:
    """
    Load a sample matrix of shape (N, n), one sample per row.

    .npy files larger than half of the available RAM are memory mapped
    instead of read, so they can be streamed chunk by chunk. Text files
    (.csv comma separated, .txt/.dat whitespace separated) are always read.
    1-D data is returned as a single column, in float64 unless memory
    mapped. Empty files raise SampleFileError.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix == ".npy":
        size_mb = path.stat().st_size / (1024 * 1024)
        available_ram_mb = get_available_memory_mb()

        # Safety Threshold: Use max 50% of AVAILABLE RAM
        threshold_mb = available_ram_mb * 0.5

        logger.info(f"Sample file: {path.name} (~{size_mb:.2f} MB)")
        logger.info(f"Available RAM: {available_ram_mb:.2f} MB (Threshold: {threshold_mb:.2f} MB)")

        if size_mb > threshold_mb:
            logger.warning("Sample file too large for RAM. Using a read-only memory map...")
            data = np.load(path, mmap_mode="r")
        else:
            data = np.load(path)
    elif suffix in TEXT_SUFFIXES:
        delimiter = "," if suffix == ".csv" else None
        with warnings.catch_warnings():
            # An empty file is reported below as a SampleFileError
            warnings.filterwarnings("ignore", message=".*input contained no data.*")
            data = np.loadtxt(path, delimiter=delimiter, comments="#", dtype=np.float64, ndmin=2)
    else:
        raise SampleFileError(
            f"Unsupported sample file type '{path.suffix}'. "
            f"Use .npy or one of {sorted(TEXT_SUFFIXES)}"
        )

    if data.ndim == 1:
        data = data.reshape(-1, 1)
    elif data.ndim != 2:
        raise SampleFileError(
            f"Sample file must hold a 1-D or 2-D array, got shape {data.shape}"
        )

    if np.iscomplexobj(data):
        raise SampleFileError(f"Sample file holds complex values: {file_path}")

    if data.size == 0:
        raise SampleFileError(f"Sample file contains no samples: {file_path}")

    # Memory maps stay on disk; the accumulator converts each row itself.
    if not isinstance(data, np.memmap):
        data = data.astype(np.float64, copy=False)

    logger.info(f"Loaded {data.shape[0]} samples of dimension {data.shape[1]}")
    return data


def iter_chunks(samples: np.ndarray, chunk_size: int = 100_000) -> Iterator[np.ndarray]:
    """
    Yield consecutive row blocks of a sample matrix.

    Slicing a memmap only reads the requested rows from disk.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    for i in range(0, samples.shape[0], chunk_size):
        yield np.asarray(samples[i : i + chunk_size])


def save_matrix(file_path, matrix: np.ndarray) -> Path:
    """Save a matrix as .npy, or as text for any other suffix."""
    path = Path(file_path)
    if path.suffix.lower() == ".npy":
        np.save(path, matrix)
    else:
        delimiter = "," if path.suffix.lower() == ".csv" else " "
        np.savetxt(path, np.atleast_2d(matrix), delimiter=delimiter)
    logger.info(f"Saved matrix of shape {matrix.shape} to {path}")
    return path
