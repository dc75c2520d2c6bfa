import threading

import numpy as np
import pytest

from streamcov import DimensionMismatchError, MeanValue


class TestMeanValue:
    def test_empty(self):
        mean = MeanValue()
        assert mean.get().shape == (0,)
        assert mean.n_samples == 0

    def test_matches_numpy_mean(self):
        samples = np.random.default_rng(5).normal(size=(100, 3))
        mean = MeanValue()
        for sample in samples:
            mean.consume(sample)

        np.testing.assert_allclose(mean.get(), samples.mean(axis=0))
        assert mean.n_samples == 100

    def test_worked_example(self):
        mean = MeanValue()
        for value in (1.0, 3.0, 5.0):
            mean.consume(value)

        np.testing.assert_array_equal(mean.get(), [3.0])

    def test_dimension_mismatch(self):
        mean = MeanValue()
        mean.consume([1.0, 2.0])

        with pytest.raises(DimensionMismatchError):
            mean.consume([1.0])

        np.testing.assert_array_equal(mean.get(), [1.0, 2.0])
        assert mean.n_samples == 1

    def test_rejects_none(self):
        mean = MeanValue()

        with pytest.raises(ValueError):
            mean.consume(None)

        assert mean.n_samples == 0
        assert mean.get().shape == (0,)

    def test_concurrent_count_and_mean(self):
        rng = np.random.default_rng(8)
        batches = [rng.normal(size=(200, 3)) for _ in range(8)]
        mean = MeanValue()
        barrier = threading.Barrier(len(batches))

        def worker(batch):
            barrier.wait()
            for sample in batch:
                mean.consume(sample)

        threads = [threading.Thread(target=worker, args=(b,)) for b in batches]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert mean.n_samples == 1600
        np.testing.assert_allclose(
            mean.get(), np.concatenate(batches).mean(axis=0), atol=1e-9
        )
