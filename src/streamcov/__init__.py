"""
streamcov - Running covariance matrix of a stream of samples

Thread-safe accumulators that summarize Monte Carlo / MCMC output on the fly,
without storing the samples.
"""

__version__ = "0.1.0"

from .consumer import AuxiliaryData as AuxiliaryData
from .consumer import Consumer as Consumer
from .covariance_matrix import AccumulatorState as AccumulatorState
from .covariance_matrix import CovarianceMatrix as CovarianceMatrix
from .errors import DimensionMismatchError as DimensionMismatchError
from .errors import SampleFileError as SampleFileError
from .errors import StreamCovError as StreamCovError
from .mean_value import MeanValue as MeanValue
from .producer import Producer as Producer
from .producer import feed_concurrently as feed_concurrently


def covariance_of(samples, dtype=None):
    """
    Stream the rows of ``samples`` through a new CovarianceMatrix.

    Args:
        samples: Iterable of samples (e.g. a 2-D array, one sample per row)
        dtype: Accumulator dtype (default float64)

    Returns:
        numpy.ndarray: The resulting covariance matrix
    """
    accumulator = CovarianceMatrix() if dtype is None else CovarianceMatrix(dtype)
    Producer().connect(accumulator).sample(samples)
    return accumulator.get()


__all__ = [
    # Consumers
    "Consumer",
    "CovarianceMatrix",
    "MeanValue",
    "AccumulatorState",
    "AuxiliaryData",
    # Producers
    "Producer",
    "feed_concurrently",
    # Errors
    "StreamCovError",
    "DimensionMismatchError",
    "SampleFileError",
    # Helpers
    "covariance_of",
]
