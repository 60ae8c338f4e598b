"""
test_psychometric_models.py
---------------------------

Tests for the stationary and non-stationary psychometric models:
- lapse range, response symmetry, monotonicity
- nesting of the stationary model in the non-stationary one
- regime-weight schedules
- parameter validation and degenerate likelihoods
"""

import math

import jax.random as jr
import numpy as np
import pytest

from psyfit.data import TrialData
from psyfit.errors import DimensionMismatchError, InvalidParameterDomainError
from psyfit.model import (
    NonStationaryPsychometric,
    ParameterBounds,
    StationaryPsychometric,
    convert_params,
)


class TestStationary:
    """p(x) = lambda/2 + (1 - lambda) Phi((x - mu) / sigma)."""

    def test_default_bounds(self, stationary):
        assert stationary.n_params == 3
        assert stationary.bounds.names == ("mu", "log_sigma", "lapse")
        np.testing.assert_allclose(stationary.bounds.ub[1], math.log(60.0))

    def test_value_at_mean_is_one_half(self, stationary):
        p = stationary.predict([3.0, math.log(4.0), 0.2], [3.0])
        np.testing.assert_allclose(p, [0.5])

    def test_lapse_range(self, stationary):
        lapse = 0.1
        stimuli = np.linspace(-1000.0, 1000.0, 2001)
        p = stationary.predict([0.0, math.log(2.0), lapse], stimuli)
        assert np.all(p >= lapse / 2 - 1e-12)
        assert np.all(p <= 1 - lapse / 2 + 1e-12)
        np.testing.assert_allclose(p[0], lapse / 2, atol=1e-12)
        np.testing.assert_allclose(p[-1], 1 - lapse / 2, atol=1e-12)

    def test_monotone_in_stimulus(self, stationary):
        stimuli = np.linspace(-30.0, 30.0, 301)
        p = stationary.predict([1.0, math.log(5.0), 0.05], stimuli)
        assert np.all(np.diff(p) >= 0)

    def test_response_symmetry(self, stationary):
        stimuli = np.linspace(-20.0, 20.0, 41)
        params = [1.0, math.log(5.0), 0.05]
        p_left = stationary.prob(params, TrialData(stimuli, np.ones(41, dtype=int)))
        p_right = stationary.prob(
            params, TrialData(stimuli, np.full(41, 2, dtype=int))
        )
        np.testing.assert_allclose(p_left + p_right, 1.0, atol=1e-12)

    def test_log_likelihood_matches_probabilities(self, stationary, tiny_dataset):
        params = [0.5, math.log(3.0), 0.02]
        ll = stationary.log_likelihood_from_data(params, tiny_dataset)
        expected = np.sum(np.log(stationary.prob(params, tiny_dataset)))
        np.testing.assert_allclose(ll, expected)

    def test_wrong_dimension(self, stationary):
        with pytest.raises(DimensionMismatchError):
            stationary.predict([0.0, 1.0, 0.1, 0.1], [0.0])

    def test_out_of_domain(self, stationary):
        with pytest.raises(InvalidParameterDomainError, match="lapse"):
            stationary.predict([0.0, 1.0, 1.5], [0.0])
        with pytest.raises(InvalidParameterDomainError, match="log_sigma"):
            stationary.predict([0.0, math.log(100.0), 0.1], [0.0])

    def test_degenerate_likelihood_is_minus_inf(self, stationary):
        # no lapses and the narrowest spread: a "left" response far right of
        # mu has probability 0
        params = [0.0, math.log(0.1), 0.0]
        data = TrialData(np.array([25.0]), np.array([1]))
        assert stationary.log_likelihood_from_data(params, data) == -math.inf

    def test_custom_bounds_dimension(self):
        bounds = ParameterBounds(lb=[0, 0], ub=[1, 1], plb=[0, 0], pub=[1, 1])
        with pytest.raises(DimensionMismatchError):
            StationaryPsychometric(bounds=bounds)

    def test_init_params_in_plausible_box(self, stationary):
        x = stationary.init_params(jr.PRNGKey(0))
        b = stationary.bounds
        assert np.all(x >= b.plb) and np.all(x <= b.pub)


class TestNonStationary:
    """Two spreads mixed by per-trial regime weights."""

    def test_default_bounds(self, nonstationary):
        assert nonstationary.n_params == 4
        assert nonstationary.bounds.names == (
            "mu",
            "log_sigma1",
            "log_sigma2",
            "lapse",
        )

    def test_nesting(self, stationary, nonstationary, small_dataset):
        """sigma1 == sigma2 reproduces the stationary likelihood exactly."""
        theta = np.array([1.5, math.log(6.0), 0.04])
        ll_stat = stationary.log_likelihood_from_data(theta, small_dataset)
        ll_ns = nonstationary.log_likelihood_from_data(
            NonStationaryPsychometric.from_stationary(theta), small_dataset
        )
        np.testing.assert_allclose(ll_ns, ll_stat, rtol=1e-12)

    def test_nesting_step_schedule(self, stationary, small_dataset):
        model = NonStationaryPsychometric(schedule="step", change_point=0.3)
        theta = np.array([-2.0, math.log(3.0), 0.08])
        np.testing.assert_allclose(
            model.log_likelihood_from_data(
                convert_params(theta, stationary, model), small_dataset
            ),
            stationary.log_likelihood_from_data(theta, small_dataset),
            rtol=1e-12,
        )

    def test_linear_regime_weights(self, nonstationary):
        w = np.asarray(nonstationary.regime_weights(5))
        np.testing.assert_allclose(w, [0.0, 0.25, 0.5, 0.75, 1.0])
        assert np.asarray(nonstationary.regime_weights(1)).tolist() == [0.0]

    def test_step_regime_weights(self):
        model = NonStationaryPsychometric(schedule="step", change_point=0.5)
        w = np.asarray(model.regime_weights(10))
        np.testing.assert_array_equal(w, [0] * 5 + [1] * 5)

    def test_unknown_schedule(self):
        with pytest.raises(ValueError, match="Unknown schedule"):
            NonStationaryPsychometric(schedule="cosine")

    def test_invalid_change_point(self):
        with pytest.raises(ValueError, match="change_point"):
            NonStationaryPsychometric(schedule="step", change_point=1.5)

    def test_spread_changes_across_session(self, nonstationary):
        # same stimulus, early vs late trial: early uses sigma1, late sigma2
        params = [0.0, math.log(1.0), math.log(20.0), 0.0]
        p = nonstationary.predict(
            params, np.full(101, 5.0), regime_weights=nonstationary.regime_weights(101)
        )
        assert p[0] > p[-1]
        assert np.all(np.diff(p) <= 1e-12)

    def test_explicit_regime_weights(self, nonstationary):
        params = [0.0, math.log(1.0), math.log(20.0), 0.0]
        p_first = nonstationary.predict(params, [5.0, 5.0], regime_weights=[0.0, 0.0])
        p_second = nonstationary.predict(
            params, [5.0, 5.0], regime_weights=[1.0, 1.0]
        )
        stat = StationaryPsychometric()
        np.testing.assert_allclose(
            p_first, stat.predict([0.0, math.log(1.0), 0.0], [5.0, 5.0])
        )
        np.testing.assert_allclose(
            p_second, stat.predict([0.0, math.log(20.0), 0.0], [5.0, 5.0])
        )

    def test_predict_requires_regime_weights(self, nonstationary):
        params = [0.0, math.log(1.0), math.log(20.0), 0.0]
        with pytest.raises(ValueError, match="regime_weights"):
            nonstationary.predict(params, [5.0])

    def test_prediction_independent_of_grid_position(self, nonstationary):
        params = [0.0, math.log(1.0), math.log(20.0), 0.0]
        alone = nonstationary.predict(params, [5.0], regime_weights=[0.5])
        in_grid = nonstationary.predict(
            params, [-5.0, 0.0, 5.0], regime_weights=[0.5, 0.5, 0.5]
        )
        np.testing.assert_allclose(alone[0], in_grid[2])

    def test_regime_weights_length_mismatch(self, stationary, nonstationary):
        params = [0.0, math.log(1.0), math.log(20.0), 0.0]
        with pytest.raises(DimensionMismatchError, match="regime_weights"):
            nonstationary.predict(params, [-5.0, 0.0, 5.0], regime_weights=[1.0])
        with pytest.raises(DimensionMismatchError, match="regime_weights"):
            stationary.predict(
                [0.0, math.log(2.0), 0.1], [0.0, 1.0], regime_weights=[0.0]
            )

    def test_lapse_range(self, nonstationary):
        lapse = 0.2
        stimuli = np.linspace(-500, 500, 501)
        p = nonstationary.predict(
            [0.0, math.log(2.0), math.log(8.0), lapse],
            stimuli,
            regime_weights=nonstationary.regime_weights(stimuli.shape[0]),
        )
        assert np.all(p >= lapse / 2 - 1e-12)
        assert np.all(p <= 1 - lapse / 2 + 1e-12)


class TestConvertParams:
    def test_stationary_to_nonstationary(self, stationary, nonstationary):
        theta = np.array([1.0, 2.0, 0.05])
        np.testing.assert_array_equal(
            convert_params(theta, stationary, nonstationary), [1.0, 2.0, 2.0, 0.05]
        )

    def test_nonstationary_to_stationary(self, stationary, nonstationary):
        theta = np.array([1.0, 2.0, 1.5, 0.05])
        np.testing.assert_array_equal(
            convert_params(theta, nonstationary, stationary), [1.0, 2.0, 0.05]
        )

    def test_same_space(self, stationary):
        theta = np.array([1.0, 2.0, 0.05])
        np.testing.assert_array_equal(
            convert_params(theta, stationary, StationaryPsychometric()), theta
        )


class TestSimulate:
    def test_responses_follow_model(self, stationary):
        params = np.array([0.0, math.log(5.0), 0.1])
        stimuli = np.full(20_000, 3.0)
        data = stationary.simulate(params, stimuli, jr.PRNGKey(0))
        p = stationary.predict(params, [3.0])[0]
        assert abs(data.n_positive / len(data) - p) < 0.02

    def test_same_key_same_data(self, stationary):
        params = np.array([0.0, math.log(5.0), 0.1])
        stimuli = np.linspace(-10, 10, 100)
        a = stationary.simulate(params, stimuli, jr.PRNGKey(3))
        b = stationary.simulate(params, stimuli, jr.PRNGKey(3))
        np.testing.assert_array_equal(a.responses, b.responses)

    def test_nonstationary_follows_schedule(self, nonstationary):
        params = np.array([0.0, math.log(1.0), math.log(50.0), 0.0])
        data = nonstationary.simulate(params, np.full(20_000, 5.0), jr.PRNGKey(1))
        responses = np.asarray(data.responses)
        early = np.mean(responses[:1000] == 2)
        late = np.mean(responses[-1000:] == 2)
        assert early > 0.95
        assert late < early - 0.3
