"""
Running mean of a stream of samples.
"""

import logging
import threading

import numpy as np

from .consumer import AuxiliaryData, Consumer
from .errors import DimensionMismatchError

logger = logging.getLogger(__name__)


class MeanValue(Consumer):
    """
    Consumer that keeps the running mean m_k = m_{k-1} + (x_k - m_{k-1}) / k.

    Uses the same locking and dimension rules as CovarianceMatrix.
    """

    def __init__(self, dtype=np.float64):
        super().__init__("MeanValue")
        self.dtype = self._validate_dtype(dtype)

        self._lock = threading.Lock()
        self._n_samples = 0
        self._mean = np.zeros(0, dtype=self.dtype)

    def consume(self, sample, aux_data: AuxiliaryData | None = None) -> None:
        sample = self._as_sample(sample, self.dtype)

        with self._lock:
            if self._n_samples == 0:
                self._mean = sample
                self._n_samples = 1
                logger.debug(f"Mean accumulator initialized with dimension {sample.shape[0]}")
                return

            if sample.shape[0] != self._mean.shape[0]:
                raise DimensionMismatchError(self._mean.shape[0], sample.shape[0])

            self._n_samples += 1
            update = sample - self._mean
            update /= self._n_samples
            self._mean += update

    def get(self) -> np.ndarray:
        """Return a copy of the running mean (empty before the first sample)."""
        with self._lock:
            return self._mean.copy()

    @property
    def n_samples(self) -> int:
        with self._lock:
            return self._n_samples

    def __repr__(self):
        return f"{self.name}(dtype={self.dtype}, n_samples={self.n_samples})"
