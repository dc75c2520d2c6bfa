"""
Producers push samples into connected consumers.

A sampler (MCMC chain, Monte Carlo loop, file reader, ...) owns a Producer and
calls emit() for every sample it generates. Several producers may feed the
same consumer from different threads.
"""

import logging
import threading
from collections.abc import Iterable, Sequence

from .consumer import AuxiliaryData, Consumer

logger = logging.getLogger(__name__)


class Producer:
    """Fan-out point that forwards samples to every connected consumer."""

    def __init__(self, name: str = "Producer"):
        self.name = name
        self._consumers: list[Consumer] = []

    def connect(self, consumer: Consumer) -> "Producer":
        """Connect a consumer. Returns self so calls can be chained."""
        if consumer not in self._consumers:
            self._consumers.append(consumer)
        return self

    def disconnect(self, consumer: Consumer) -> None:
        """Disconnect a consumer (no-op if it is not connected)."""
        if consumer in self._consumers:
            self._consumers.remove(consumer)

    @property
    def consumers(self) -> list[Consumer]:
        return list(self._consumers)

    def emit(self, sample, aux_data: AuxiliaryData | None = None) -> None:
        """Send one sample to all consumers, in connection order."""
        for consumer in self._consumers:
            consumer.consume(sample, aux_data)

    def sample(self, samples: Iterable, aux_data: AuxiliaryData | None = None) -> int:
        """
        Emit every sample of an iterable (or every row of a 2-D array).

        Returns:
            int: Number of samples emitted
        """
        count = 0
        for sample in samples:
            self.emit(sample, aux_data)
            count += 1
        logger.debug(f"{self.name}: emitted {count} samples")
        return count


def feed_concurrently(consumer: Consumer, batches: Sequence[Iterable]) -> int:
    """
    Feed a consumer from several threads, one Producer per batch.

    The consumer sees the samples in a schedule-dependent interleaving of the
    batches; within a batch the order is preserved.

    Args:
        consumer: Thread-safe consumer receiving all samples
        batches: One iterable of samples per producer thread

    Returns:
        int: Total number of samples emitted

    Raises:
        Exception: The first error raised by any producer thread, re-raised
            after all threads have finished.
    """
    counts = [0] * len(batches)
    errors: list[BaseException] = []
    errors_lock = threading.Lock()

    def thread_wrapper(index: int, batch: Iterable):
        producer = Producer(name=f"Producer-{index}").connect(consumer)
        try:
            counts[index] = producer.sample(batch)
        except Exception as e:
            with errors_lock:
                errors.append(e)

    threads = [
        threading.Thread(target=thread_wrapper, args=(i, batch), daemon=True)
        for i, batch in enumerate(batches)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        logger.error(f"{len(errors)} of {len(threads)} producer threads failed")
        raise errors[0]

    total = sum(counts)
    logger.info(f"Fed {total} samples from {len(threads)} producer threads")
    return total
