"""
K-Nearest Neighbors (KNN) Classifier

A lazy learner: fit stores a copy of the training table, and all the work
happens at prediction time. For each query the k closest training rows
under a pluggable distance metric vote on the label.
"""

import heapq
from collections import Counter
from typing import Tuple, Union

import numpy as np

from . import config
from .dataset import SampleTable
from .distance import DistanceMetric, euclidean_distance
from .exceptions import InvalidArgumentError, InvalidStateError
from .logger import get_logger
from .metrics import accuracy

logger = get_logger(__name__)


class KNNClassifier:
    """
    K-Nearest Neighbors classifier for multi-class classification.

    Attributes:
        k (int): Number of neighbors consulted per prediction.
        metric (callable): Distance metric ``(a, b) -> float``.
        X_train (np.ndarray): Copy of the training features, None before fit.
        y_train (np.ndarray): Copy of the training labels, None before fit.
    """

    def __init__(
        self,
        k: int = config.DEFAULT_K,
        metric: DistanceMetric = euclidean_distance,
    ) -> None:
        """
        Initialize the KNN classifier.

        Args:
            k (int): Number of neighbors to consider. Must be a positive integer.
            metric (callable): Distance metric, euclidean_distance by default.

        Raises:
            InvalidArgumentError: If k is not a positive integer or metric is
                not callable.
        """
        if isinstance(k, bool):
            raise InvalidArgumentError(f"k must be a positive integer, got boolean {k}")
        if not isinstance(k, (int, np.integer)) or k <= 0:
            raise InvalidArgumentError(f"k must be a positive integer, got {k}")
        if not callable(metric):
            raise InvalidArgumentError(f"metric must be callable, got {metric!r}")

        self.k: int = int(k)
        self.metric: DistanceMetric = metric
        self.X_train: Union[np.ndarray, None] = None
        self.y_train: Union[np.ndarray, None] = None

    def __repr__(self) -> str:
        name = getattr(self.metric, "__name__", repr(self.metric))
        return f"KNNClassifier(k={self.k}, metric={name})"

    def fit(self, table: SampleTable) -> "KNNClassifier":
        """
        Store a copy of the training table.

        Any previous training data is replaced. k is not checked against the
        number of rows here; that happens at prediction time.

        Args:
            table (SampleTable): Training rows and labels.

        Returns:
            KNNClassifier: self, for chaining.
        """
        self.X_train = table.features.copy()
        self.y_train = table.labels.copy()
        logger.debug("Fitted %r on %d rows", self, self.X_train.shape[0])
        return self

    def _check_ready(self) -> None:
        if self.X_train is None or self.y_train is None:
            raise InvalidStateError(
                "Model must be fitted before making predictions. Call fit() first."
            )

    def _check_can_predict(self) -> None:
        self._check_ready()
        n_train = self.X_train.shape[0]
        if n_train == 0:
            raise InvalidStateError("Cannot predict: the classifier was fitted on an empty table")
        if self.k > n_train:
            raise InvalidArgumentError(
                f"k ({self.k}) cannot exceed the number of training samples ({n_train})"
            )

    def _validate_query(self, sample: np.ndarray) -> np.ndarray:
        try:
            sample = np.asarray(sample, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError("query must contain only numeric values") from e
        if sample.ndim not in (1, 2):
            raise InvalidArgumentError(f"query must be a 1D or 2D array, got {sample.ndim}D array")

        n_features_train = self.X_train.shape[1]
        n_features_query = sample.shape[-1]
        empty_batch = sample.ndim == 2 and sample.shape[0] == 0
        if not empty_batch and n_features_query != n_features_train:
            raise InvalidArgumentError(
                f"Feature dimension mismatch: query has {n_features_query} features, "
                f"but training data has {n_features_train} features"
            )
        if not np.all(np.isfinite(sample)):
            raise InvalidArgumentError("query contains NaN or Inf values")
        return sample

    def _nearest(self, sample: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        distances = np.array([self.metric(sample, row) for row in self.X_train], dtype=np.float64)
        # nsmallest is stable: equal distances keep training order
        indices = heapq.nsmallest(self.k, range(len(distances)), key=distances.__getitem__)
        indices = np.asarray(indices, dtype=np.intp)
        return distances[indices], indices

    def _majority_vote(self, neighbor_indices: np.ndarray) -> int:
        """
        Most frequent label among the neighbors.

        Ties go to the smallest label value.
        """
        label_counts = Counter(self.y_train[neighbor_indices].tolist())
        max_count = max(label_counts.values())
        tied_classes = [label for label, count in label_counts.items() if count == max_count]
        return int(min(tied_classes))

    def kneighbors(self, sample) -> Tuple[np.ndarray, np.ndarray]:
        """
        Find the k nearest training rows of a single query.

        Args:
            sample: 1D feature vector.

        Returns:
            (distances, indices) of the selected rows, closest first. Rows at
            equal distance are ordered by their position in the training data.

        Raises:
            InvalidStateError: If not fitted or fitted on an empty table.
            InvalidArgumentError: If k exceeds the training size or the query
                is malformed.
        """
        self._check_can_predict()
        sample = self._validate_query(sample)
        if sample.ndim != 1:
            raise InvalidArgumentError(f"kneighbors expects a 1D query, got {sample.ndim}D array")
        return self._nearest(sample)

    def _predict_one(self, sample: np.ndarray) -> int:
        _, indices = self._nearest(sample)
        return self._majority_vote(indices)

    def predict(self, samples) -> Union[int, np.ndarray]:
        """
        Predict class labels.

        A 1D query is one sample and yields a single int label. A 2D query
        is a batch and yields a 1D array of labels in input order; each row
        is predicted independently.

        Args:
            samples: Feature vector of shape (n_features,) or batch of shape
                (n_samples, n_features).

        Raises:
            InvalidStateError: If not fitted or fitted on an empty table.
            InvalidArgumentError: If k exceeds the training size, the query
                width differs from the training width, or it contains NaN/Inf.
        """
        self._check_can_predict()
        samples = self._validate_query(samples)

        if samples.ndim == 1:
            return self._predict_one(samples)
        return np.array([self._predict_one(row) for row in samples], dtype=np.int64)

    def score(self, table: SampleTable) -> float:
        """
        Classification accuracy on a labeled table.

        accuracy = (number of correct predictions) / (total predictions)

        Returns:
            float: Accuracy between 0 and 1; 0.0 for an empty table.

        Raises:
            InvalidStateError: If the model has not been fitted.
        """
        self._check_ready()
        if len(table) == 0:
            return 0.0

        predictions = self.predict(table.features)
        return accuracy(table.labels, predictions)
