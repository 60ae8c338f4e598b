"""
population.py
-------------

Synthetic subjects and populations for model recovery.

Each subject gets
- theta drawn uniformly from the model's plausible box,
- stimuli drawn uniformly from ``stimulus_range``,
- responses drawn from the model (2 with probability p(x), else 1).

Every subject consumes an independent subkey split from the caller's key,
so a population is reproducible from a single key.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import jax
import jax.random as jr
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds
from psyfit.utils.rng import ensure_key


@dataclass
class PopulationConfig:
    """
    Trial design shared by all simulated subjects.

    Parameters
    ----------
    n_trials : int, default=10000
        Trials per subject.
    stimulus_range : tuple[float, float], default=(-25, 25)
        Stimuli are drawn uniformly from [low, high).
    """

    n_trials: int = 10_000
    stimulus_range: tuple[float, float] = (-25.0, 25.0)

    def __post_init__(self):
        if int(self.n_trials) < 1:
            raise ValueError(f"n_trials must be positive, got {self.n_trials}")
        self.n_trials = int(self.n_trials)
        low, high = (float(v) for v in self.stimulus_range)
        if not low < high:
            raise ValueError(
                f"stimulus_range must satisfy low < high, got {self.stimulus_range}"
            )
        self.stimulus_range = (low, high)


@dataclass(frozen=True)
class SimulatedSubject:
    """
    One synthetic subject.

    Attributes
    ----------
    data : TrialData
    true_params : np.ndarray
        Generating parameters in the generating model's space.
    model : PsychometricModel
        Generating model.
    label : str
        Group label; defaults to the generating model's name.
    """

    data: TrialData
    true_params: np.ndarray
    model: PsychometricModel
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", self.model.name)


def simulate_subject(
    model: PsychometricModel,
    key: jax.Array | int | None,
    bounds: ParameterBounds | None = None,
    config: PopulationConfig | None = None,
    params=None,
) -> SimulatedSubject:
    """
    Simulate one subject.

    Parameters
    ----------
    model : PsychometricModel
        Generating model.
    key : jax.Array | int | None
        PRNG key (or integer seed).
    bounds : ParameterBounds | None
        Plausible box for theta; defaults to the model's bounds.
    config : PopulationConfig | None
        Trial design; defaults to PopulationConfig().
    params : array-like | None
        Fixed generating parameters instead of a random draw.

    Returns
    -------
    SimulatedSubject
    """
    bounds = bounds if bounds is not None else model.bounds
    config = config if config is not None else PopulationConfig()
    k_theta, k_stim, k_resp = jr.split(ensure_key(key), 3)

    if params is None:
        params = bounds.sample_plausible(k_theta)
    params = model.check_params(params)

    low, high = config.stimulus_range
    stimuli = np.asarray(
        jr.uniform(k_stim, (config.n_trials,), dtype=float, minval=low, maxval=high)
    )
    data = model.simulate(params, stimuli, k_resp)
    return SimulatedSubject(data=data, true_params=params, model=model)


def simulate_population(
    model: PsychometricModel,
    n_subjects: int,
    key: jax.Array | int | None,
    bounds: ParameterBounds | None = None,
    config: PopulationConfig | None = None,
) -> list[SimulatedSubject]:
    """
    Simulate ``n_subjects`` independent subjects from one model.

    Returns
    -------
    list[SimulatedSubject]
    """
    if n_subjects < 0:
        raise ValueError(f"n_subjects must be non-negative, got {n_subjects}")
    if n_subjects == 0:
        return []
    keys = jr.split(ensure_key(key), n_subjects)
    return [
        simulate_subject(model, keys[i], bounds=bounds, config=config)
        for i in range(n_subjects)
    ]


def simulate_mixed_population(
    groups: Mapping[str, tuple[PsychometricModel, ParameterBounds | None, int]],
    key: jax.Array | int | None,
    config: PopulationConfig | None = None,
) -> list[SimulatedSubject]:
    """
    Simulate a population drawn from several generating models.

    Parameters
    ----------
    groups : Mapping[str, (model, bounds, n_subjects)]
        One entry per generating model, keyed by the label given to its
        subjects, in the order subjects are listed.
    key : jax.Array | int | None
        PRNG key; each group gets its own subkey.
    config : PopulationConfig | None
        Trial design shared by all subjects.

    Returns
    -------
    list[SimulatedSubject]
        Subjects of the first group first, then the second, etc.

    Examples
    --------
    >>> stat, nonstat = StationaryPsychometric(), NonStationaryPsychometric()
    >>> population = simulate_mixed_population(
    ...     {"stationary": (stat, None, 16), "nonstationary": (nonstat, None, 8)},
    ...     key=0,
    ... )
    """
    if not groups:
        return []
    keys = jr.split(ensure_key(key), len(groups))
    population: list[SimulatedSubject] = []
    for group_key, (label, (model, bounds, n_subjects)) in zip(keys, groups.items()):
        subjects = simulate_population(
            model, n_subjects, group_key, bounds=bounds, config=config
        )
        population.extend(
            SimulatedSubject(s.data, s.true_params, s.model, label=label)
            for s in subjects
        )
    return population
