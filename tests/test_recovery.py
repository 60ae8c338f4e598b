"""
test_recovery.py
----------------

Tests for model recovery (fit every subject under every candidate model).
"""

import numpy as np
import pytest

from psyfit.comparison import GroupBMSResult
from psyfit.inference import (
    MultiStartFitter,
    NelderMeadFitter,
    ProjectedGradientFitter,
)
from psyfit.model import NonStationaryPsychometric, StationaryPsychometric
from psyfit.model.psychometric import convert_params
from psyfit.simulation import (
    PopulationConfig,
    run_model_recovery,
    simulate_mixed_population,
)

pytestmark = pytest.mark.filterwarnings("ignore::psyfit.errors.ConvergenceWarning")


@pytest.fixture(scope="module")
def candidates():
    return {
        "stationary": StationaryPsychometric(),
        "nonstationary": NonStationaryPsychometric(),
    }


@pytest.fixture(scope="module")
def population(candidates):
    return simulate_mixed_population(
        {
            "stationary": (candidates["stationary"], None, 3),
            "nonstationary": (candidates["nonstationary"], None, 2),
        },
        key=0,
        config=PopulationConfig(n_trials=1000),
    )


@pytest.fixture(scope="module")
def recovery(population, candidates):
    return run_model_recovery(population, candidates, fitter="nelder-mead")


class TestRunModelRecovery:
    def test_shapes(self, recovery):
        assert recovery.nll.shape == (5, 2)
        np.testing.assert_array_equal(recovery.n_params, [3, 4])
        np.testing.assert_array_equal(recovery.n_trials, [1000] * 5)
        assert recovery.model_names == ("stationary", "nonstationary")
        assert recovery.true_labels == ("stationary",) * 3 + ("nonstationary",) * 2
        assert len(recovery.fits) == 5
        assert all(len(row) == 2 for row in recovery.fits)

    def test_warm_start_from_true_params(self, recovery, population, candidates):
        for subject, row in zip(population, recovery.fits):
            for fit, model in zip(row, candidates.values()):
                expected = convert_params(subject.true_params, subject.model, model)
                np.testing.assert_allclose(fit.x0, expected)

    def test_nll_matches_fits(self, recovery):
        for i, row in enumerate(recovery.fits):
            for j, fit in enumerate(row):
                assert recovery.nll[i, j] == fit.nll

    def test_rescaled_criteria(self, recovery):
        np.testing.assert_allclose(
            recovery.aic_rescaled, -recovery.nll - np.array([3, 4])[None, :]
        )
        np.testing.assert_allclose(
            recovery.bic_rescaled,
            -recovery.nll - 0.5 * np.array([3, 4])[None, :] * np.log(1000),
        )

    def test_selection(self, recovery):
        picks = recovery.selected("bic")
        assert len(picks) == 5
        assert set(picks) <= {"stationary", "nonstationary"}
        assert 0.0 <= recovery.accuracy("bic") <= 1.0

    def test_group_bms(self, recovery):
        result = recovery.group_bms("aic")
        assert isinstance(result, GroupBMSResult)
        assert result.model_names == recovery.model_names
        # prior counts 1/K per model plus one count per subject
        assert result.alpha.sum() == pytest.approx(1.0 + 5.0)

    def test_parallel_matches_sequential(self, recovery, population, candidates):
        parallel = run_model_recovery(
            population, candidates, fitter=NelderMeadFitter(), n_jobs=2
        )
        np.testing.assert_allclose(parallel.nll, recovery.nll, rtol=1e-10)

    def test_parallel_multistart_matches_sequential(self, population, candidates):
        fitter = MultiStartFitter(n_starts=3)
        sequential = run_model_recovery(
            population, candidates, fitter=fitter, key=1, n_jobs=1
        )
        parallel = run_model_recovery(
            population, candidates, fitter=fitter, key=1, n_jobs=4
        )
        np.testing.assert_allclose(parallel.nll, sequential.nll, rtol=1e-10)
        for subject, row in zip(population, parallel.fits):
            for fit, model in zip(row, candidates.values()):
                assert fit.n_params == model.n_params
                assert fit.n_trials == len(subject.data)

    def test_parallel_optax_history(self, population, candidates):
        fitter = ProjectedGradientFitter(steps=50, track_history=True, log_every=5)
        parallel = run_model_recovery(
            population, candidates, fitter=fitter, key=2, n_jobs=4
        )
        assert np.all(np.isfinite(parallel.nll))
        steps, losses = fitter.get_history()
        assert len(steps) == len(losses)
        assert steps == sorted(steps)

    def test_empty_candidates(self, population):
        with pytest.raises(ValueError, match="candidate"):
            run_model_recovery(population, {})

    def test_config_with_instance(self, population, candidates):
        with pytest.raises(ValueError, match="Cannot pass fitter_config"):
            run_model_recovery(
                population,
                candidates,
                fitter=NelderMeadFitter(),
                fitter_config={"max_iter": 5},
            )
