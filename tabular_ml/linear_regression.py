"""
Multiple Linear Regression

Fits ``y = X @ weights + bias`` either in closed form (least squares) or
with batch gradient descent on the mean squared error.
"""

import numpy as np

from . import config
from .exceptions import InvalidArgumentError, InvalidStateError
from .logger import get_logger

logger = get_logger(__name__)

METHODS = ("normal", "gradient")


class LinearRegression:
    """
    Linear regression over one or more features.

    Parameters
    ----------
    learning_rate : float, default=0.01
        Step size for gradient descent updates. Unused by ``method="normal"``.
    n_iterations : int, default=1000
        Number of gradient descent iterations. Unused by ``method="normal"``.
    method : {"normal", "gradient"}, default="normal"
        ``"normal"`` solves the least squares problem directly,
        ``"gradient"`` runs batch gradient descent.
    verbose : bool, default=False
        If True, log the loss every 100 iterations at INFO level.

    Attributes
    ----------
    weights : ndarray of shape (n_features,) or None
        Learned coefficients, None before fit.
    bias : float
        Learned intercept.
    history : list
        Loss values recorded during gradient descent.

    Examples
    --------
    >>> import numpy as np
    >>> X = np.array([[1.0], [2.0], [3.0], [4.0]])
    >>> y = np.array([3.0, 5.0, 7.0, 9.0])
    >>> model = LinearRegression().fit(X, y)
    >>> round(model.predict([5.0]), 6)
    11.0
    """

    def __init__(self, learning_rate=0.01, n_iterations=1000, method="normal", verbose=False):
        if method not in METHODS:
            raise InvalidArgumentError(
                f"Unknown method '{method}'. Must be 'normal' or 'gradient'."
            )
        if isinstance(learning_rate, bool) or not learning_rate > 0:
            raise InvalidArgumentError(f"learning_rate must be positive, got {learning_rate}")
        if isinstance(n_iterations, bool) or not isinstance(n_iterations, (int, np.integer)) \
                or n_iterations <= 0:
            raise InvalidArgumentError(
                f"n_iterations must be a positive integer, got {n_iterations}"
            )

        self.learning_rate = float(learning_rate)
        self.n_iterations = int(n_iterations)
        self.method = method
        self.verbose = verbose

        self.weights = None
        self.bias = 0.0
        self.history = []

    def _validate_input(self, X, y):
        """
        Convert inputs to float arrays and check their shapes.

        A 1D X is treated as a single feature column.

        Raises
        ------
        InvalidArgumentError
            If X or y are empty, have the wrong rank, or differ in length.
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)

        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if X.ndim != 2:
            raise InvalidArgumentError(f"X must be a 1D or 2D array, got {X.ndim}D array")
        if y.ndim != 1:
            raise InvalidArgumentError(f"y must be a 1D array, got {y.ndim}D array")

        if X.shape[0] == 0 or X.shape[1] == 0:
            raise InvalidArgumentError("Input array X cannot be empty.")
        if y.size == 0:
            raise InvalidArgumentError("Target array y cannot be empty.")

        if X.shape[0] != y.shape[0]:
            raise InvalidArgumentError(
                f"X and y must have the same length. "
                f"Got X with length {X.shape[0]} and y with length {y.shape[0]}."
            )
        return X, y

    def fit(self, X, y):
        """
        Learn weights and bias from training data.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features) or (n_samples,)
        y : array-like of shape (n_samples,)

        Returns
        -------
        self : LinearRegression
        """
        X, y = self._validate_input(X, y)

        self.history = []
        if self.method == "normal":
            self._fit_normal_equation(X, y)
        else:
            self._fit_gradient_descent(X, y)

        logger.debug(
            "Fitted %s regression on %d samples, %d features",
            self.method, X.shape[0], X.shape[1],
        )
        return self

    def _fit_normal_equation(self, X, y):
        # Append a column of ones so the bias is solved together with the weights
        design = np.hstack([X, np.ones((X.shape[0], 1))])
        solution, *_ = np.linalg.lstsq(design, y, rcond=None)
        self.weights = solution[:-1]
        self.bias = float(solution[-1])

    def _fit_gradient_descent(self, X, y):
        n_samples, n_features = X.shape
        self.weights = np.zeros(n_features)
        self.bias = 0.0

        for i in range(self.n_iterations):
            error = X @ self.weights + self.bias - y

            dw = (2 / n_samples) * (X.T @ error)
            db = (2 / n_samples) * np.sum(error)

            self.weights = self.weights - self.learning_rate * dw
            self.bias = self.bias - self.learning_rate * db

            if i % config.LOSS_LOG_INTERVAL == 0:
                self._record_loss(i, X, y)

        if self.n_iterations % config.LOSS_LOG_INTERVAL != 0:
            self._record_loss(self.n_iterations, X, y)

        self.bias = float(self.bias)

    def _record_loss(self, iteration, X, y):
        loss = self.cost(X, y)
        self.history.append(loss)
        if self.verbose:
            logger.info("Iteration %d: Loss = %.6f", iteration, loss)

    def _check_fitted(self):
        if self.weights is None:
            raise InvalidStateError("Model must be fitted before making predictions. Call fit() first.")

    def predict(self, X):
        """
        Predict targets.

        A 1D input is a single sample and returns a float; a 2D input returns
        an array with one prediction per row.
        """
        self._check_fitted()
        X = np.asarray(X, dtype=float)
        single = X.ndim == 1
        X2 = X.reshape(1, -1) if single else X

        if X2.ndim != 2:
            raise InvalidArgumentError(f"X must be a 1D or 2D array, got {X.ndim}D array")
        if X2.shape[1] != self.weights.shape[0]:
            raise InvalidArgumentError(
                f"Feature dimension mismatch: X has {X2.shape[1]} features, "
                f"but the model was fitted on {self.weights.shape[0]} features"
            )

        y_pred = X2 @ self.weights + self.bias
        return float(y_pred[0]) if single else y_pred

    def cost(self, X, y):
        """Mean squared error of the current model on (X, y)."""
        X, y = self._validate_input(X, y)
        self._check_fitted()
        y_pred = X @ self.weights + self.bias
        return float(np.mean((y - y_pred) ** 2))
