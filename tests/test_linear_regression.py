"""
Test suite for LinearRegression.

Tests cover:
- Closed form and gradient descent fits
- Loss history
- Input validation and error conditions
"""

import logging

import numpy as np
import pytest

from tabular_ml import InvalidArgumentError, InvalidStateError, LinearRegression


@pytest.fixture
def line():
    X = np.array([[1.0], [2.0], [3.0], [4.0]])
    y = 2.0 * X[:, 0] + 1.0
    return X, y


@pytest.fixture
def plane():
    rng = np.random.default_rng(0)
    X = rng.uniform(-1.0, 1.0, size=(50, 3))
    y = X @ np.array([1.5, -2.0, 0.5]) + 3.0
    return X, y


class TestNormalEquation:
    def test_recovers_line(self, line):
        X, y = line
        model = LinearRegression().fit(X, y)
        np.testing.assert_allclose(model.weights, [2.0])
        assert model.bias == pytest.approx(1.0)

    def test_recovers_plane(self, plane):
        X, y = plane
        model = LinearRegression(method="normal").fit(X, y)
        np.testing.assert_allclose(model.weights, [1.5, -2.0, 0.5], atol=1e-9)
        assert model.bias == pytest.approx(3.0)

    def test_one_dimensional_x(self):
        model = LinearRegression().fit([0.0, 1.0, 2.0], [1.0, 3.0, 5.0])
        assert model.predict([3.0]) == pytest.approx(7.0)

    def test_no_history(self, line):
        X, y = line
        assert LinearRegression().fit(X, y).history == []


class TestGradientDescent:
    def test_converges_to_line(self, line):
        X, y = line
        model = LinearRegression(learning_rate=0.05, n_iterations=5000, method="gradient")
        model.fit(X, y)
        np.testing.assert_allclose(model.weights, [2.0], atol=1e-3)
        assert model.bias == pytest.approx(1.0, abs=1e-3)

    def test_agrees_with_normal_equation(self, plane):
        X, y = plane
        gd = LinearRegression(learning_rate=0.1, n_iterations=3000, method="gradient").fit(X, y)
        ne = LinearRegression(method="normal").fit(X, y)
        np.testing.assert_allclose(gd.weights, ne.weights, atol=1e-3)
        assert gd.bias == pytest.approx(ne.bias, abs=1e-3)

    def test_history_records_every_interval_and_final_loss(self, line):
        X, y = line
        model = LinearRegression(learning_rate=0.05, n_iterations=250, method="gradient")
        model.fit(X, y)
        # iterations 0, 100, 200 and the final one
        assert len(model.history) == 4
        assert model.history == sorted(model.history, reverse=True)
        assert model.history[-1] == pytest.approx(model.cost(X, y))

    def test_refit_resets_history(self, line):
        X, y = line
        model = LinearRegression(learning_rate=0.05, n_iterations=250, method="gradient")
        model.fit(X, y)
        model.fit(X, y)
        assert len(model.history) == 4

    def test_verbose_logs_loss(self, line, caplog):
        X, y = line
        model = LinearRegression(learning_rate=0.05, n_iterations=150, method="gradient",
                                 verbose=True)
        with caplog.at_level(logging.INFO, logger="tabular_ml"):
            model.fit(X, y)
        assert "Iteration 0: Loss" in caplog.text
        assert "Iteration 150: Loss" in caplog.text

    def test_quiet_by_default(self, line, caplog):
        X, y = line
        with caplog.at_level(logging.INFO, logger="tabular_ml"):
            LinearRegression(n_iterations=150, method="gradient").fit(X, y)
        assert "Loss" not in caplog.text


class TestPredict:
    def test_single_sample_returns_float(self, line):
        X, y = line
        model = LinearRegression().fit(X, y)
        result = model.predict([5.0])
        assert isinstance(result, float)
        assert result == pytest.approx(11.0)

    def test_batch_returns_array(self, plane):
        X, y = plane
        model = LinearRegression().fit(X, y)
        predictions = model.predict(X[:5])
        assert predictions.shape == (5,)
        np.testing.assert_allclose(predictions, y[:5])

    def test_cost_is_zero_on_exact_fit(self, line):
        X, y = line
        model = LinearRegression().fit(X, y)
        assert model.cost(X, y) == pytest.approx(0.0, abs=1e-12)


class TestErrors:
    def test_unknown_method(self):
        with pytest.raises(InvalidArgumentError, match="Unknown method"):
            LinearRegression(method="sgd")

    @pytest.mark.parametrize("learning_rate", [0, -0.1, True])
    def test_learning_rate_positive(self, learning_rate):
        with pytest.raises(InvalidArgumentError, match="learning_rate"):
            LinearRegression(learning_rate=learning_rate)

    @pytest.mark.parametrize("n_iterations", [0, -5, 10.0, False])
    def test_n_iterations_positive_integer(self, n_iterations):
        with pytest.raises(InvalidArgumentError, match="n_iterations"):
            LinearRegression(n_iterations=n_iterations)

    def test_predict_before_fit(self):
        with pytest.raises(InvalidStateError, match="Model must be fitted"):
            LinearRegression().predict([[1.0]])

    def test_empty_input(self):
        with pytest.raises(InvalidArgumentError, match="cannot be empty"):
            LinearRegression().fit(np.empty((0, 2)), [])

    def test_length_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="same length"):
            LinearRegression().fit([[1.0], [2.0]], [1.0])

    def test_y_must_be_1d(self):
        with pytest.raises(InvalidArgumentError, match="y must be a 1D array"):
            LinearRegression().fit([[1.0], [2.0]], [[1.0], [2.0]])

    def test_feature_dimension_mismatch(self, plane):
        X, y = plane
        model = LinearRegression().fit(X, y)
        with pytest.raises(InvalidArgumentError, match="Feature dimension mismatch"):
            model.predict([[1.0, 2.0]])
