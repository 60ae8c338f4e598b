"""
Shared fixtures for the psyfit tests.

- stationary / nonstationary : fresh model instances with default bounds.
- true_params : generating parameters (mu = 2, sigma = 5, lapse = 0.03).
- large_dataset / small_dataset : 10000- and 500-trial subjects simulated
  from true_params with fixed keys.
- tiny_dataset : five hand-written trials.
"""

import math

import numpy as np
import pytest

from psyfit.data import TrialData
from psyfit.model import NonStationaryPsychometric, StationaryPsychometric
from psyfit.simulation import PopulationConfig, simulate_subject


@pytest.fixture
def stationary():
    """Stationary model with the default bounds."""
    return StationaryPsychometric()


@pytest.fixture
def nonstationary():
    """Non-stationary model with the default (linear) schedule."""
    return NonStationaryPsychometric()


@pytest.fixture(scope="session")
def true_params():
    """Generating parameters (mu, ln sigma, lambda) used across tests."""
    return np.array([2.0, math.log(5.0), 0.03])


@pytest.fixture(scope="session")
def large_dataset(true_params):
    """10000 trials simulated from the stationary model."""
    subject = simulate_subject(
        StationaryPsychometric(),
        key=123,
        config=PopulationConfig(n_trials=10_000),
        params=true_params,
    )
    return subject.data


@pytest.fixture(scope="session")
def small_dataset(true_params):
    """500 trials simulated from the stationary model."""
    subject = simulate_subject(
        StationaryPsychometric(),
        key=7,
        config=PopulationConfig(n_trials=500),
        params=true_params,
    )
    return subject.data


@pytest.fixture
def tiny_dataset():
    """Hand-written dataset with both response categories."""
    return TrialData(
        np.array([-20.0, -5.0, 0.0, 5.0, 20.0]),
        np.array([1, 1, 2, 2, 2]),
    )
