"""
Running covariance matrix of a stream of samples.

Computes the covariance estimate incrementally (streaming), one sample at a
time, so that arbitrarily long sample sequences can be summarized without
keeping them in memory.
"""

import logging
import threading
from dataclasses import dataclass

import numpy as np

from .consumer import AuxiliaryData, Consumer
from .errors import DimensionMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccumulatorState:
    """Snapshot of a CovarianceMatrix: sample count, running mean, covariance."""

    n_samples: int
    mean: np.ndarray | None
    covariance: np.ndarray


class CovarianceMatrix(Consumer):
    """
    Consumer that keeps the running covariance matrix of all samples seen.

    After k samples x_1 ... x_k with running mean m_{k-1} (the mean of the
    first k-1 samples), the estimate is updated as

        delta = x_k - m_{k-1}
        C_k   = C_{k-1} + outer(delta, delta) / k
        m_k   = m_{k-1} + delta / k

    Note that both the covariance contribution and the mean step use the mean
    *before* the update. This is not the two-delta Welford recursion, which
    would use outer(x_k - m_{k-1}, x_k - m_k); results are reproducible for
    this recursion only.

    Threading model:
        consume(), get() and state() may be called concurrently from any
        number of threads. A single lock serializes them, so every reader sees
        the state between two complete updates. Concurrent producers are
        linearized in a schedule-dependent order, and because the update
        depends on sample order the final matrix may differ between runs for
        the same set of samples. Only n_samples is order-independent.

    Args:
        dtype: Floating point type used for the mean and covariance.
    """

    def __init__(self, dtype=np.float64):
        super().__init__("CovarianceMatrix")
        self.dtype = self._validate_dtype(dtype)

        self._lock = threading.Lock()
        self._n_samples = 0
        self._mean: np.ndarray | None = None
        self._covariance = np.zeros((0, 0), dtype=self.dtype)

    def consume(self, sample, aux_data: AuxiliaryData | None = None) -> None:
        """
        Update the covariance matrix with one sample.

        Args:
            sample: 1-D array-like (or scalar, treated as a length-1 vector)
            aux_data: Auxiliary data about the sample. Ignored.

        Raises:
            DimensionMismatchError: If the sample length differs from the
                length of the first sample consumed. The state is unchanged.
            ValueError: If the sample is None, complex valued or has more
                than one axis.
        """
        sample = self._as_sample(sample, self.dtype)

        with self._lock:
            # A single sample has zero variance.
            if self._n_samples == 0:
                n = sample.shape[0]
                self._covariance = np.zeros((n, n), dtype=self.dtype)
                self._mean = sample
                self._n_samples = 1
                logger.debug(f"Covariance accumulator initialized with dimension {n}")
                return

            if sample.shape[0] != self._mean.shape[0]:
                raise DimensionMismatchError(self._mean.shape[0], sample.shape[0])

            k = self._n_samples + 1

            delta = sample - self._mean
            self._covariance += np.outer(delta, delta) / k

            update = sample - self._mean
            update /= k
            self._mean += update

            self._n_samples = k

    def get(self) -> np.ndarray:
        """
        Return the covariance matrix computed from the samples seen so far.

        Returns:
            numpy.ndarray: Copy of the (n, n) matrix, or an empty (0, 0)
            matrix if no sample has been consumed yet.
        """
        with self._lock:
            return self._covariance.copy()

    def state(self) -> AccumulatorState:
        """Return a consistent copy of count, mean and covariance."""
        with self._lock:
            return AccumulatorState(
                n_samples=self._n_samples,
                mean=None if self._mean is None else self._mean.copy(),
                covariance=self._covariance.copy(),
            )

    @property
    def n_samples(self) -> int:
        with self._lock:
            return self._n_samples

    @property
    def dimension(self) -> int | None:
        """Sample dimension, or None before the first sample."""
        with self._lock:
            return None if self._mean is None else self._mean.shape[0]

    def __repr__(self):
        return f"{self.name}(dtype={self.dtype}, n_samples={self.n_samples})"
