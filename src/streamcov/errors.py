"""
Exception types raised by streamcov.

All errors derive from StreamCovError and from ValueError, so callers that
already guard numeric input with ``except ValueError`` keep working.
"""


class StreamCovError(Exception):
    """Base class for all streamcov errors."""


class DimensionMismatchError(StreamCovError, ValueError):
    """A sample's length differs from the dimension fixed by the first sample."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Sample has dimension {actual}, but this consumer was "
            f"initialized with samples of dimension {expected}"
        )


class SampleFileError(StreamCovError, ValueError):
    """A sample file could not be interpreted as a (N, n) sample matrix."""
