"""
Evaluation metrics for regression and classification.

All functions are stateless and take the true values first, predictions
second. Inputs may be lists or numpy arrays of the same length.
"""

from typing import Optional

import numpy as np

from .exceptions import InvalidArgumentError


def _paired(y_true, y_pred, dtype=None):
    y_true = np.asarray(y_true, dtype=dtype)
    y_pred = np.asarray(y_pred, dtype=dtype)
    if y_true.ndim != 1 or y_pred.ndim != 1:
        raise InvalidArgumentError("y_true and y_pred must be 1D arrays")
    if y_true.shape[0] != y_pred.shape[0]:
        raise InvalidArgumentError(
            f"y_true and y_pred must have the same length. "
            f"Got y_true: {y_true.shape[0]}, y_pred: {y_pred.shape[0]}"
        )
    return y_true, y_pred


def _paired_regression(y_true, y_pred):
    y_true, y_pred = _paired(y_true, y_pred, dtype=np.float64)
    if y_true.size == 0:
        raise InvalidArgumentError("regression metrics are undefined for empty input")
    return y_true, y_pred


# ==================== REGRESSION METRICS ====================

def mean_squared_error(y_true, y_pred) -> float:
    """MSE = (1/n) * sum((y_true - y_pred)^2)"""
    y_true, y_pred = _paired_regression(y_true, y_pred)
    return float(np.mean((y_true - y_pred) ** 2))


def root_mean_squared_error(y_true, y_pred) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def mean_absolute_error(y_true, y_pred) -> float:
    """MAE = (1/n) * sum(|y_true - y_pred|)"""
    y_true, y_pred = _paired_regression(y_true, y_pred)
    return float(np.mean(np.abs(y_true - y_pred)))


def r2_score(y_true, y_pred) -> float:
    """
    Coefficient of determination.

    R^2 = 1 - SS_res / SS_tot. 1.0 is a perfect fit, 0.0 matches always
    predicting the mean, negative values are worse than the mean. When
    y_true is constant SS_tot is zero; the score is then 1.0 for a perfect
    prediction and 0.0 otherwise.
    """
    y_true, y_pred = _paired_regression(y_true, y_pred)
    ss_res = float(np.sum((y_true - y_pred) ** 2))
    ss_tot = float(np.sum((y_true - y_true.mean()) ** 2))
    if ss_tot == 0.0:
        return 1.0 if ss_res == 0.0 else 0.0
    return 1.0 - ss_res / ss_tot


# ==================== CLASSIFICATION METRICS ====================

def accuracy(y_true, y_pred) -> float:
    """
    Fraction of positions where the prediction equals the true label.

    Returns 0.0 for empty input.
    """
    y_true, y_pred = _paired(y_true, y_pred)
    total = y_true.shape[0]
    if total == 0:
        return 0.0
    return float(np.sum(y_true == y_pred)) / total


def confusion_matrix(y_true, y_pred, n_classes: Optional[int] = None) -> np.ndarray:
    """
    Count matrix of true vs predicted labels.

    ``matrix[i][j]`` is the number of samples whose true label is ``i`` and
    predicted label is ``j``. For binary labels this reads
    ``[[TN, FP], [FN, TP]]``.

    Args:
        y_true: True integer labels.
        y_pred: Predicted integer labels.
        n_classes: Matrix size. Defaults to the largest label seen plus one.

    Raises:
        InvalidArgumentError: On negative labels or labels >= n_classes.
    """
    y_true, y_pred = _paired(y_true, y_pred)
    y_true = y_true.astype(np.int64)
    y_pred = y_pred.astype(np.int64)

    if y_true.size and (y_true.min() < 0 or y_pred.min() < 0):
        raise InvalidArgumentError("labels must be non-negative")

    if n_classes is None:
        n_classes = int(max(y_true.max(), y_pred.max())) + 1 if y_true.size else 0
    elif y_true.size and max(y_true.max(), y_pred.max()) >= n_classes:
        raise InvalidArgumentError(f"labels must be smaller than n_classes ({n_classes})")

    matrix = np.zeros((n_classes, n_classes), dtype=np.int64)
    np.add.at(matrix, (y_true, y_pred), 1)
    return matrix


def _counts(y_true, y_pred, target_class):
    y_true, y_pred = _paired(y_true, y_pred)
    tp = int(np.sum((y_pred == target_class) & (y_true == target_class)))
    fp = int(np.sum((y_pred == target_class) & (y_true != target_class)))
    fn = int(np.sum((y_pred != target_class) & (y_true == target_class)))
    return tp, fp, fn


def precision(y_true, y_pred, target_class: int) -> float:
    """TP / (TP + FP); 0.0 when the class is never predicted."""
    tp, fp, _ = _counts(y_true, y_pred, target_class)
    return tp / (tp + fp) if tp + fp else 0.0


def recall(y_true, y_pred, target_class: int) -> float:
    """TP / (TP + FN); 0.0 when the class never occurs."""
    tp, _, fn = _counts(y_true, y_pred, target_class)
    return tp / (tp + fn) if tp + fn else 0.0


def f1_score(y_true, y_pred, target_class: int) -> float:
    """Harmonic mean of precision and recall; 0.0 when both are zero."""
    p = precision(y_true, y_pred, target_class)
    r = recall(y_true, y_pred, target_class)
    return 2 * p * r / (p + r) if p + r else 0.0
