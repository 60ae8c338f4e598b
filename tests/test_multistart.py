"""
test_multistart.py
------------------

Tests for MultiStartFitter (best of several random restarts).
"""

import math

import jax.random as jr
import numpy as np
import pytest

from psyfit.inference import MultiStartFitter, NelderMeadFitter

pytestmark = pytest.mark.filterwarnings("ignore::psyfit.errors.ConvergenceWarning")


class TestMultiStartFitter:
    def test_returns_minimum_over_runs(self, stationary, small_dataset):
        fitter = MultiStartFitter("nelder-mead", n_starts=4)
        result = fitter.fit(stationary, small_dataset, key=jr.PRNGKey(0))
        assert len(fitter.runs) == 4
        assert result.nll == min(r.nll for r in fitter.runs)

    def test_starts_are_distinct(self, stationary, small_dataset):
        fitter = MultiStartFitter(NelderMeadFitter(), n_starts=3)
        fitter.fit(stationary, small_dataset, key=jr.PRNGKey(1))
        starts = np.stack([r.x0 for r in fitter.runs])
        assert len({tuple(s) for s in starts}) == 3

    def test_user_x0_used_first(self, stationary, small_dataset):
        x0 = np.array([0.0, math.log(3.0), 0.05])
        fitter = MultiStartFitter(n_starts=2)
        fitter.fit(stationary, small_dataset, x0=x0, key=jr.PRNGKey(2))
        np.testing.assert_array_equal(fitter.runs[0].x0, x0)

    def test_deterministic(self, stationary, small_dataset):
        a = MultiStartFitter(n_starts=2).fit(stationary, small_dataset, key=3)
        b = MultiStartFitter(n_starts=2).fit(stationary, small_dataset, key=3)
        np.testing.assert_array_equal(a.params, b.params)

    def test_fitter_config(self):
        fitter = MultiStartFitter("nelder-mead", fitter_config={"max_iter": 50})
        assert fitter.fitter.max_iter == 50
        assert fitter.name == "multistart(nelder-mead)"

    def test_invalid_n_starts(self):
        with pytest.raises(ValueError, match="n_starts"):
            MultiStartFitter(n_starts=0)

    def test_config_with_instance(self):
        with pytest.raises(ValueError, match="Cannot pass fitter_config"):
            MultiStartFitter(NelderMeadFitter(), fitter_config={"max_iter": 5})

    def test_unknown_fitter(self):
        with pytest.raises(ValueError, match="Unknown inference"):
            MultiStartFitter("simplex")
