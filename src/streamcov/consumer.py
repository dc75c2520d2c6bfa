"""
Base class for objects that receive samples from a producer.
"""

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

# Free-form metadata that may travel with a sample (e.g. acceptance flags
# from an MCMC chain). Consumers are free to ignore it.
AuxiliaryData = dict[str, Any]


class Consumer(ABC):
    """Abstract base class for all sample consumers."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def consume(self, sample, aux_data: AuxiliaryData | None = None) -> None:
        """Process one sample."""
        pass

    @staticmethod
    def _as_sample(sample, dtype) -> np.ndarray:
        """Convert an incoming sample to a fresh 1-D array of ``dtype``."""
        if sample is None:
            raise ValueError("Sample cannot be None")

        if np.iscomplexobj(sample):
            raise ValueError("Sample must be real valued, got complex values")

        try:
            array = np.array(sample, dtype=dtype, copy=True)
        except TypeError as e:
            raise ValueError(f"Sample cannot be converted to {np.dtype(dtype)}: {e}") from e

        if array.ndim == 0:
            array = array.reshape(1)
        elif array.ndim != 1:
            raise ValueError(
                f"Sample must be a scalar or a 1-D vector, got shape {array.shape}"
            )
        return array

    @staticmethod
    def _validate_dtype(dtype) -> np.dtype:
        """Accept only floating point scalar types."""
        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.floating):
            raise ValueError(
                f"dtype must be a floating point type, got {dtype}"
            )
        return dtype
