"""
Distance metrics for nearest-neighbor search.

Every metric takes two feature vectors of the same length and returns a
non-negative float, with ``metric(a, a) == 0``. Lower values mean more
similar vectors. Metrics do not check that the lengths match; callers
guarantee it.

Any callable with the signature ``(a, b) -> float`` can be used in place
of the metrics defined here.
"""

from typing import Callable, Optional, Sequence, Union

import numpy as np

from .exceptions import InvalidArgumentError

Vector = Union[np.ndarray, Sequence[float]]
DistanceMetric = Callable[[Vector, Vector], float]


def euclidean_distance(a: Vector, b: Vector) -> float:
    """
    Euclidean (L2) distance.

    Formula: sqrt(sum((a_i - b_i)^2))

    Example:
        >>> euclidean_distance([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
        5.196152422706632
    """
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.sqrt(np.sum(diff ** 2)))


def manhattan_distance(a: Vector, b: Vector) -> float:
    """
    Manhattan (L1) distance, the sum of absolute coordinate differences.

    Example:
        >>> manhattan_distance([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
        9.0
    """
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.sum(np.abs(diff)))


def chebyshev_distance(a: Vector, b: Vector) -> float:
    """Chebyshev (L-infinity) distance, the largest absolute coordinate difference."""
    diff = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float))
    if diff.size == 0:
        return 0.0
    return float(np.max(diff))


def _validate_p(p) -> float:
    if isinstance(p, bool) or not isinstance(p, (int, float, np.integer, np.floating)):
        raise InvalidArgumentError(f"p must be a number >= 1, got {p!r}")
    if not p >= 1:
        raise InvalidArgumentError(f"p must be >= 1, got {p}")
    return float(p)


def minkowski_distance(a: Vector, b: Vector, p: float = 2.0) -> float:
    """
    Minkowski distance of order ``p``.

    Formula: (sum(|a_i - b_i|^p))^(1/p)

    ``p=1`` gives the Manhattan distance and ``p=2`` the Euclidean
    distance. As ``p`` grows the result approaches the Chebyshev distance.

    Args:
        a: First feature vector.
        b: Second feature vector.
        p: Order of the distance, must be >= 1.

    Raises:
        InvalidArgumentError: If p < 1.
    """
    p = _validate_p(p)
    diff = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float))
    return float(np.sum(diff ** p) ** (1.0 / p))


class Minkowski:
    """
    Minkowski metric with its order bound at construction.

    Instances are plain callables, so they can be passed to the classifier
    like the module-level metric functions::

        KNNClassifier(k=5, metric=Minkowski(3))
    """

    def __init__(self, p: float = 2.0) -> None:
        self.p = _validate_p(p)

    def __call__(self, a: Vector, b: Vector) -> float:
        return minkowski_distance(a, b, self.p)

    def __repr__(self) -> str:
        return f"Minkowski(p={self.p:g})"


METRICS = {
    "euclidean": euclidean_distance,
    "manhattan": manhattan_distance,
    "chebyshev": chebyshev_distance,
}


def get_metric(name: str, p: Optional[float] = None) -> DistanceMetric:
    """
    Resolve a metric by name.

    ``"minkowski"`` returns a :class:`Minkowski` bound to ``p`` (default 2).
    ``p`` is ignored for the other metrics.

    Raises:
        InvalidArgumentError: If the name is unknown or p is invalid.
    """
    key = name.lower()
    if key == "minkowski":
        return Minkowski(2.0 if p is None else p)
    try:
        return METRICS[key]
    except KeyError:
        choices = ", ".join(sorted(list(METRICS) + ["minkowski"]))
        raise InvalidArgumentError(
            f"Unknown metric '{name}'. Must be one of: {choices}"
        ) from None
