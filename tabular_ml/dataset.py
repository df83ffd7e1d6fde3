"""
In-memory tabular dataset with partitioning and rescaling.

A SampleTable holds a rectangular block of float features and one integer
label per row. It owns its arrays: the constructor copies its inputs and
every derived table (train/test split) is an independent deep copy, so
mutating one split never affects another.
"""

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from . import config
from .exceptions import InvalidArgumentError
from .logger import get_logger

logger = get_logger(__name__)

ArrayLike = Union[np.ndarray, Sequence]


def _as_features(features: ArrayLike) -> np.ndarray:
    try:
        X = np.array(features, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            "features must be a rectangular block of numeric values"
        ) from e

    if X.size == 0 and X.ndim <= 2:
        n_rows = X.shape[0] if X.ndim >= 1 else 0
        if n_rows > 0:
            raise InvalidArgumentError(
                f"features must have at least one column, got {n_rows} empty rows"
            )
        return X.reshape(0, 0)

    if X.ndim != 2:
        raise InvalidArgumentError(f"features must be a 2D array, got {X.ndim}D array")
    if not np.all(np.isfinite(X)):
        raise InvalidArgumentError("features contain NaN or Inf values")
    return X


# Float labels at or beyond 2**63 do not fit in int64
LABEL_LIMIT = 2.0 ** 63


def _as_labels(labels: ArrayLike) -> np.ndarray:
    y = np.array(labels)
    if y.ndim != 1:
        raise InvalidArgumentError(f"labels must be a 1D array, got {y.ndim}D array")
    if y.size == 0:
        return y.astype(np.int64)
    if y.dtype.kind == "i":
        return y.astype(np.int64)
    if y.dtype.kind == "u":
        if y.max() > np.iinfo(np.int64).max:
            raise InvalidArgumentError("labels must fit in a 64-bit signed integer")
        return y.astype(np.int64)
    # Whole-valued floats such as 1.0 are accepted as integer labels
    if y.dtype.kind == "f" and np.all(np.isfinite(y)) and np.all(y == np.floor(y)):
        if np.any(np.abs(y) >= LABEL_LIMIT):
            raise InvalidArgumentError("labels must fit in a 64-bit signed integer")
        return y.astype(np.int64)
    raise InvalidArgumentError("labels must be integers")


def _validate_test_ratio(test_ratio) -> float:
    if isinstance(test_ratio, bool) or not isinstance(
        test_ratio, (int, float, np.integer, np.floating)
    ):
        raise InvalidArgumentError(f"test_ratio must be a number, got {test_ratio!r}")
    if not 0.0 < test_ratio < 1.0:
        raise InvalidArgumentError(
            f"test_ratio must be strictly between 0 and 1, got {test_ratio}"
        )
    return float(test_ratio)


def _validate_seed(seed) -> int:
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise InvalidArgumentError(f"seed must be a non-negative integer, got {seed!r}")
    return int(seed)


def seeded_permutation(n: int, seed: int) -> np.ndarray:
    """
    Return a reproducible permutation of ``range(n)``.

    Runs a Fisher-Yates shuffle driven by a PCG64 generator seeded with
    ``seed``, so a given (n, seed) pair always produces the same order.
    """
    rng = np.random.default_rng(seed)
    indices = np.arange(n)
    for i in range(n - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        indices[i], indices[j] = indices[j], indices[i]
    return indices


class SampleTable:
    """
    Ordered feature rows paired 1:1 with integer labels.

    Attributes:
        features (np.ndarray): Float feature matrix, shape (n_samples, n_features).
        labels (np.ndarray): Integer labels, shape (n_samples,).
        label_names (tuple or None): Original label values indexed by label id,
            when the labels were interned from strings.
    """

    def __init__(
        self,
        features: ArrayLike,
        labels: ArrayLike,
        label_names: Optional[Sequence] = None,
    ) -> None:
        """
        Build a table from rows and labels. Both are copied.

        Raises:
            InvalidArgumentError: If the rows are ragged, contain NaN/Inf,
                labels are not integers, or the lengths differ.
        """
        X = _as_features(features)
        y = _as_labels(labels)

        if X.shape[0] != y.shape[0]:
            raise InvalidArgumentError(
                f"features and labels must have the same number of samples. "
                f"Got features: {X.shape[0]}, labels: {y.shape[0]}"
            )

        self._features = X
        self._labels = y
        self.label_names = tuple(label_names) if label_names is not None else None

    @property
    def features(self) -> np.ndarray:
        return self._features

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    @property
    def n_features(self) -> int:
        return self._features.shape[1] if len(self) else 0

    def __len__(self) -> int:
        return self._features.shape[0]

    def __repr__(self) -> str:
        return f"SampleTable(n_samples={len(self)}, n_features={self.n_features})"

    def _take(self, indices: np.ndarray) -> "SampleTable":
        return SampleTable(
            self._features[indices],
            self._labels[indices],
            label_names=self.label_names,
        )

    def split(
        self,
        test_ratio: float = config.DEFAULT_TEST_RATIO,
        seed: int = config.DEFAULT_SEED,
    ) -> Tuple["SampleTable", "SampleTable"]:
        """
        Partition the table into a training table and a held-out table.

        The row order is a seeded Fisher-Yates permutation. The held-out
        table gets ``floor(n * test_ratio)`` rows, the training table the
        rest, each in permuted order. Every row lands in exactly one of the
        two tables and both are independent copies.

        Args:
            test_ratio: Fraction of rows held out, strictly between 0 and 1.
            seed: Non-negative seed; equal seeds give identical splits.

        Returns:
            (train, test) tuple of SampleTable.

        Raises:
            InvalidArgumentError: If test_ratio is outside (0, 1) or the seed
                is not a non-negative integer.
        """
        test_ratio = _validate_test_ratio(test_ratio)
        seed = _validate_seed(seed)

        n = len(self)
        test_size = int(math.floor(n * test_ratio))
        train_size = n - test_size

        order = seeded_permutation(n, seed)
        train = self._take(order[:train_size])
        test = self._take(order[train_size:])

        logger.debug(
            "Split %d rows into train=%d test=%d (test_ratio=%s, seed=%d)",
            n, len(train), len(test), test_ratio, seed,
        )
        return train, test

    def normalize(self) -> None:
        """
        Min-max scale every column to [0, 1] in place.

        Constant columns are left unchanged. Labels are not touched.
        """
        if len(self) == 0:
            return

        X = self._features
        col_min = X.min(axis=0)
        col_range = X.max(axis=0) - col_min
        scaled = col_range > 0

        X[:, scaled] = (X[:, scaled] - col_min[scaled]) / col_range[scaled]
        logger.debug("Normalized %d of %d columns", int(scaled.sum()), X.shape[1])

    def standardize(self) -> None:
        """
        Rescale every column to zero mean and unit sample standard deviation, in place.

        The standard deviation uses n - 1 in the denominator. Columns with
        zero deviation are left unchanged, and so is a table with fewer
        than two rows, where the sample deviation is undefined.
        """
        if len(self) < 2:
            return

        X = self._features
        mean = X.mean(axis=0)
        std = X.std(axis=0, ddof=1)
        scaled = std > 0

        X[:, scaled] = (X[:, scaled] - mean[scaled]) / std[scaled]
        logger.debug("Standardized %d of %d columns", int(scaled.sum()), X.shape[1])


def split(
    table: SampleTable,
    test_ratio: float = config.DEFAULT_TEST_RATIO,
    seed: int = config.DEFAULT_SEED,
) -> Tuple[SampleTable, SampleTable]:
    """Functional form of :meth:`SampleTable.split`."""
    return table.split(test_ratio, seed)


def normalize(table: SampleTable) -> None:
    table.normalize()


def standardize(table: SampleTable) -> None:
    table.standardize()
