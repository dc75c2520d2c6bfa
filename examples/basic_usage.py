"""
Basic usage examples for streamcov.

Demonstrates the main functionality and typical workflows.
"""

import numpy as np

from streamcov import CovarianceMatrix, MeanValue, Producer, feed_concurrently


def random_walk_chain(n_samples: int, seed: int = 0) -> np.ndarray:
    """Create a toy Metropolis chain targeting a correlated 2-D Gaussian."""
    rng = np.random.default_rng(seed)
    precision = np.linalg.inv(np.array([[1.0, 0.8], [0.8, 2.0]]))

    def log_density(x):
        return -0.5 * x @ precision @ x

    current = np.zeros(2)
    chain = np.empty((n_samples, 2))
    for i in range(n_samples):
        proposal = current + rng.normal(scale=0.5, size=2)
        if np.log(rng.uniform()) < log_density(proposal) - log_density(current):
            current = proposal
        chain[i] = current
    return chain


def example_single_producer():
    """Summarize a chain while it is being generated."""
    print("=== Single producer ===")

    covariance = CovarianceMatrix()
    mean = MeanValue()
    producer = Producer(name="metropolis").connect(covariance).connect(mean)

    producer.sample(random_walk_chain(5000))

    print(f"Samples: {covariance.n_samples}")
    print(f"Mean: {mean.get()}")
    print(f"Covariance:\n{covariance.get()}")


def example_multiple_producers():
    """Several chains feed one accumulator from separate threads."""
    print("\n=== Multiple producers ===")

    covariance = CovarianceMatrix()
    chains = [random_walk_chain(2000, seed=s) for s in range(4)]

    total = feed_concurrently(covariance, chains)

    # The order in which the chains interleave is up to the scheduler, so
    # the matrix below can differ slightly between runs.
    print(f"Samples: {total}")
    print(f"Covariance:\n{covariance.get()}")


if __name__ == "__main__":
    example_single_producer()
    example_multiple_producers()
