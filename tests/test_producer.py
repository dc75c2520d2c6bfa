import numpy as np
import pytest

from streamcov import (
    Consumer,
    CovarianceMatrix,
    DimensionMismatchError,
    MeanValue,
    Producer,
    covariance_of,
    feed_concurrently,
)


class RecordingConsumer(Consumer):
    """Consumer that keeps every sample and aux_data it receives."""

    def __init__(self):
        super().__init__("Recorder")
        self.received = []

    def consume(self, sample, aux_data=None):
        self.received.append((np.asarray(sample).copy(), aux_data))


class TestProducer:
    def setup_method(self):
        self.samples = np.array([[1.0, 2.0], [3.0, 4.0], [0.0, -1.0]])

    def test_fan_out(self):
        covariance = CovarianceMatrix()
        mean = MeanValue()
        producer = Producer().connect(covariance).connect(mean)

        count = producer.sample(self.samples)

        assert count == 3
        assert covariance.n_samples == 3
        assert mean.n_samples == 3
        np.testing.assert_allclose(mean.get(), self.samples.mean(axis=0))

    def test_connect_twice_is_noop(self):
        recorder = RecordingConsumer()
        producer = Producer().connect(recorder).connect(recorder)
        producer.emit([1.0])

        assert len(producer.consumers) == 1
        assert len(recorder.received) == 1

    def test_disconnect(self):
        recorder = RecordingConsumer()
        producer = Producer().connect(recorder)
        producer.emit([1.0])
        producer.disconnect(recorder)
        producer.emit([2.0])
        producer.disconnect(recorder)

        assert len(recorder.received) == 1

    def test_aux_data_forwarded(self):
        recorder = RecordingConsumer()
        Producer().connect(recorder).emit([1.0], {"accepted": True})

        assert recorder.received[0][1] == {"accepted": True}

    def test_covariance_of(self):
        result = covariance_of([[1.0], [3.0], [5.0]])
        np.testing.assert_array_equal(result, [[5.0]])

    def test_covariance_of_dtype(self):
        result = covariance_of([[1.0], [3.0]], dtype=np.float32)
        assert result.dtype == np.float32


class TestFeedConcurrently:
    def test_total_count(self):
        rng = np.random.default_rng(6)
        batches = [rng.normal(size=(50, 2)) for _ in range(4)]
        accumulator = CovarianceMatrix()

        total = feed_concurrently(accumulator, batches)

        assert total == 200
        assert accumulator.n_samples == 200
        np.testing.assert_allclose(
            accumulator.state().mean, np.concatenate(batches).mean(axis=0)
        )

    def test_batch_order_is_preserved(self):
        recorder = RecordingConsumer()
        batches = [[[float(i)] for i in range(10)], [[float(i)] for i in range(100, 110)]]

        feed_concurrently(recorder, batches)

        values = [float(sample[0]) for sample, _ in recorder.received]
        assert [v for v in values if v < 100] == list(range(10))
        assert [v for v in values if v >= 100] == list(range(100, 110))

    def test_error_propagates(self):
        accumulator = CovarianceMatrix()
        accumulator.consume([0.0, 0.0])
        batches = [[[1.0, 2.0]], [[1.0, 2.0, 3.0]]]

        with pytest.raises(DimensionMismatchError):
            feed_concurrently(accumulator, batches)
