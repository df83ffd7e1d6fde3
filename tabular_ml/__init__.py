"""
tabular_ml

Supervised learning on in-memory tabular data: seeded train/test
partitioning, per-column rescaling, and a k-nearest-neighbors classifier
with pluggable distance metrics.
"""

from .dataset import SampleTable, normalize, split, standardize
from .distance import (
    Minkowski,
    chebyshev_distance,
    euclidean_distance,
    get_metric,
    manhattan_distance,
    minkowski_distance,
)
from .exceptions import InvalidArgumentError, InvalidStateError, TabularMLError
from .ingest import load_csv
from .knn_classifier import KNNClassifier
from .linear_regression import LinearRegression

__version__ = "0.1.0"

__all__ = [
    'SampleTable',
    'split',
    'normalize',
    'standardize',
    'load_csv',
    'KNNClassifier',
    'LinearRegression',
    'Minkowski',
    'euclidean_distance',
    'manhattan_distance',
    'chebyshev_distance',
    'minkowski_distance',
    'get_metric',
    'TabularMLError',
    'InvalidArgumentError',
    'InvalidStateError',
]
