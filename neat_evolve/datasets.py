"""
Small classification problems and an error-based scoring function.

All generators return ``(X, y)`` with ``X`` of shape ``(n_samples, n_inputs)``
and ``y`` of shape ``(n_samples, 1)``.
"""

from typing import Tuple

import numpy as np

from .network import Brain


def xor_cases(bias: bool = True) -> Tuple[np.ndarray, np.ndarray]:
    """The four XOR cases, optionally prefixed with a constant bias input of 1."""
    X = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float64)
    y = np.array([[0], [1], [1], [0]], dtype=np.float64)
    if bias:
        X = np.hstack([np.ones((len(X), 1)), X])
    return X, y


def generate_xor(n_samples: int = 200) -> Tuple[np.ndarray, np.ndarray]:
    """Noisy XOR quadrants.

    Args:
        n_samples: Number of samples to generate

    Returns:
        X: Input points with shape (n_samples, 2)
        y: Binary labels with shape (n_samples, 1)
    """
    rng = np.random.RandomState(42)

    quadrants = [
        ((-0.9, -0.1), (-0.9, -0.1), 0),  # (-,-) -> 0
        ((-0.9, -0.1), (0.1, 0.9), 1),  # (-,+) -> 1
        ((0.1, 0.9), (-0.9, -0.1), 1),  # (+,-) -> 1
        ((0.1, 0.9), (0.1, 0.9), 0),  # (+,+) -> 0
    ]

    X = []
    y = []
    per_quadrant = n_samples // 4
    for x_range, y_range, label in quadrants:
        for _ in range(per_quadrant):
            X.append([rng.uniform(*x_range), rng.uniform(*y_range)])
            y.append(label)

    X = np.array(X, dtype=np.float64)
    y = np.array(y, dtype=np.float64).reshape(-1, 1)

    indices = rng.permutation(len(X))
    return X[indices], y[indices]


def generate_two_circles(
    n_samples: int = 200, noise: float = 0.05, factor: float = 0.4
) -> Tuple[np.ndarray, np.ndarray]:
    """Two concentric circles; the inner one is labelled 1."""
    rng = np.random.RandomState(42)

    n_samples_out = n_samples // 2
    n_samples_in = n_samples - n_samples_out

    linspace = np.linspace(0, 2 * np.pi, n_samples_out)
    outer_circle = np.vstack([1.5 * np.cos(linspace), 1.5 * np.sin(linspace)]).T

    linspace = np.linspace(0, 2 * np.pi, n_samples_in)
    inner_circle = np.vstack([factor * np.cos(linspace), factor * np.sin(linspace)]).T

    X = np.vstack([outer_circle, inner_circle])
    X += rng.normal(scale=noise, size=X.shape)

    y = np.hstack([np.zeros(n_samples_out), np.ones(n_samples_in)]).reshape(-1, 1)

    indices = rng.permutation(len(X))
    return X[indices], y[indices]


class ErrorFitness:
    """Scores a brain by ``(len(X) - total absolute error) ** 2``.

    Each sample is evaluated from a fresh state. Instances are picklable, so
    they can be used with parallel evaluation.
    """

    def __init__(self, X: np.ndarray, y: np.ndarray):
        self.X = np.asarray(X, dtype=np.float64)
        self.y = np.asarray(y, dtype=np.float64).reshape(len(self.X), -1)

    def error(self, brain: Brain) -> float:
        predictions = brain.predict(self.X)
        return float(np.sum(np.abs(self.y - predictions)))

    def __call__(self, brain: Brain) -> float:
        return (len(self.X) - self.error(brain)) ** 2
