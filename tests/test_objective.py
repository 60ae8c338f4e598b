"""
test_objective.py
-----------------

Tests for the NegativeLogLikelihood objective.
"""

import math

import jax
import numpy as np
import pytest

from psyfit.data import TrialData
from psyfit.errors import DimensionMismatchError, InvalidParameterDomainError
from psyfit.inference import NegativeLogLikelihood
from psyfit.model import ParameterBounds


class TestNegativeLogLikelihood:
    def test_matches_model_log_likelihood(self, stationary, small_dataset):
        objective = NegativeLogLikelihood(stationary, small_dataset)
        theta = [1.0, math.log(4.0), 0.05]
        np.testing.assert_allclose(
            objective(theta),
            -stationary.log_likelihood_from_data(theta, small_dataset),
        )
        assert objective.n_trials == len(small_dataset)

    def test_counts_evaluations(self, stationary, tiny_dataset):
        objective = NegativeLogLikelihood(stationary, tiny_dataset)
        objective([0.0, 1.0, 0.1])
        objective.value_and_grad([0.0, 1.0, 0.1])
        assert objective.n_evals == 2

    def test_accepts_row_vector(self, stationary, tiny_dataset):
        objective = NegativeLogLikelihood(stationary, tiny_dataset)
        np.testing.assert_allclose(
            objective(np.array([[0.0, 1.0, 0.1]])), objective([0.0, 1.0, 0.1])
        )

    def test_gradient_matches_jax(self, stationary, small_dataset):
        objective = NegativeLogLikelihood(stationary, small_dataset)
        theta = np.array([1.0, math.log(4.0), 0.05])
        value, grad = objective.value_and_grad(theta)
        expected = np.asarray(jax.grad(objective.loss_fn)(theta))
        np.testing.assert_allclose(value, objective(theta))
        np.testing.assert_allclose(grad, expected, rtol=1e-10)

    def test_out_of_bounds_raises(self, stationary, tiny_dataset):
        objective = NegativeLogLikelihood(stationary, tiny_dataset)
        with pytest.raises(InvalidParameterDomainError):
            objective([0.0, 1.0, -0.1])

    def test_wrong_length_raises(self, stationary, tiny_dataset):
        objective = NegativeLogLikelihood(stationary, tiny_dataset)
        with pytest.raises(DimensionMismatchError):
            objective([0.0, 1.0])

    def test_bounds_dimension_mismatch(self, stationary, tiny_dataset):
        bounds = ParameterBounds(lb=[0, 0], ub=[1, 1], plb=[0, 0], pub=[1, 1])
        with pytest.raises(DimensionMismatchError):
            NegativeLogLikelihood(stationary, tiny_dataset, bounds)

    def test_degenerate_is_plus_inf(self, stationary):
        data = TrialData(np.array([25.0, -25.0]), np.array([1, 2]))
        objective = NegativeLogLikelihood(stationary, data)
        theta = [0.0, math.log(0.1), 0.0]
        assert objective(theta) == math.inf

        value, grad = objective.value_and_grad(theta)
        assert value == math.inf
        np.testing.assert_array_equal(grad, np.zeros(3))

    def test_empty_data_is_zero(self, stationary):
        objective = NegativeLogLikelihood(stationary, TrialData())
        assert objective([0.0, 1.0, 0.1]) == 0.0
