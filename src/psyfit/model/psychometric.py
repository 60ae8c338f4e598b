"""
psychometric.py
---------------

Cumulative-Gaussian psychometric functions with lapses.

- StationaryPsychometric : theta = (mu, ln sigma, lambda)
- NonStationaryPsychometric : theta = (mu, ln sigma1, ln sigma2, lambda)

Both map a stimulus x to

    psi(x) = Phi((x - mu) / sigma)
    p(x)   = lambda / 2 + (1 - lambda) * psi(x)

where p(x) is the probability of the positive ("right") response. Spreads
are parameterized on the log scale and exponentiated inside the model, so the
optimizer works on an unconstrained axis and sigma > 0 always holds.

The non-stationary model mixes two curves per trial,

    psi_t(x) = (1 - w_t) * Phi((x - mu) / sigma1) + w_t * Phi((x - mu) / sigma2),

with regime weights w_t fixed by the trial index (see ``schedule``). With
sigma1 == sigma2 the two curves coincide and the model reduces exactly to the
stationary one.
"""

from __future__ import annotations

import math

import jax.numpy as jnp
import numpy as np
from jax.scipy.stats import norm

from .base import PsychometricModel
from .bounds import ParameterBounds

SCHEDULES = ("linear", "step")


def _cumulative_gaussian(stimuli, mu, sigma):
    """Return (Phi(z), Phi(-z)) with z = (x - mu) / sigma."""
    z = (stimuli - mu) / sigma
    return norm.cdf(z), norm.cdf(-z)


class StationaryPsychometric(PsychometricModel):
    """
    Psychometric function with a single spread.

    Parameters
    ----------
    bounds : ParameterBounds | None
        Defaults to the tutorial bounds
        lb = (-30, ln 0.1, 0), ub = (30, ln 60, 1),
        plb = (-10, ln 1, 0.01), pub = (10, ln 10, 0.1).

    Examples
    --------
    >>> model = StationaryPsychometric()
    >>> model.predict([0.0, np.log(5.0), 0.02], [-10.0, 0.0, 10.0])
    """

    name = "stationary"
    param_names = ("mu", "log_sigma", "lapse")

    def default_bounds(self) -> ParameterBounds:
        return ParameterBounds(
            lb=[-30.0, math.log(0.1), 0.0],
            ub=[30.0, math.log(60.0), 1.0],
            plb=[-10.0, math.log(1.0), 0.01],
            pub=[10.0, math.log(10.0), 0.1],
            names=self.param_names,
        )

    def _psi(self, params, stimuli, regime_weights):
        mu, log_sigma = params[0], params[1]
        return _cumulative_gaussian(stimuli, mu, jnp.exp(log_sigma))


class NonStationaryPsychometric(PsychometricModel):
    """
    Psychometric function whose spread changes across the session.

    Parameters
    ----------
    schedule : {"linear", "step"}, default="linear"
        How trials are assigned to the two regimes:
        - "linear": w_t ramps from 0 on the first trial to 1 on the last,
          a gradual drift from sigma1 to sigma2.
        - "step": w_t = 0 before ``change_point * n_trials``, 1 afterwards.
    change_point : float, default=0.5
        Fraction of the session at which a "step" schedule switches.
    bounds : ParameterBounds | None
        Defaults to lb = (-30, ln 0.1, ln 0.1, 0), ub = (30, ln 60, ln 60, 1),
        plb = (-10, ln 1, ln 1, 0.01), pub = (10, ln 10, ln 10, 0.1).
    """

    name = "nonstationary"
    param_names = ("mu", "log_sigma1", "log_sigma2", "lapse")
    has_regimes = True

    def __init__(
        self,
        schedule: str = "linear",
        change_point: float = 0.5,
        *,
        bounds: ParameterBounds | None = None,
    ) -> None:
        if schedule not in SCHEDULES:
            raise ValueError(
                f"Unknown schedule: '{schedule}'. Available: {', '.join(SCHEDULES)}"
            )
        if not 0.0 <= change_point <= 1.0:
            raise ValueError(f"change_point must be in [0, 1], got {change_point}")
        self.schedule = schedule
        self.change_point = float(change_point)
        super().__init__(bounds=bounds)

    def default_bounds(self) -> ParameterBounds:
        return ParameterBounds(
            lb=[-30.0, math.log(0.1), math.log(0.1), 0.0],
            ub=[30.0, math.log(60.0), math.log(60.0), 1.0],
            plb=[-10.0, math.log(1.0), math.log(1.0), 0.01],
            pub=[10.0, math.log(10.0), math.log(10.0), 0.1],
            names=self.param_names,
        )

    def regime_weights(self, n_trials: int) -> jnp.ndarray:
        """
        Weight of the second regime for each trial index.

        Returns
        -------
        jnp.ndarray, shape (n_trials,)
            Values in [0, 1].
        """
        if self.schedule == "linear":
            if n_trials <= 1:
                return jnp.zeros(n_trials)
            return jnp.linspace(0.0, 1.0, n_trials)
        return (jnp.arange(n_trials) >= self.change_point * n_trials).astype(float)

    def _psi(self, params, stimuli, regime_weights):
        mu = params[0]
        psi1, psi1_c = _cumulative_gaussian(stimuli, mu, jnp.exp(params[1]))
        psi2, psi2_c = _cumulative_gaussian(stimuli, mu, jnp.exp(params[2]))
        w = regime_weights
        return (1.0 - w) * psi1 + w * psi2, (1.0 - w) * psi1_c + w * psi2_c

    # ------------------------------------------------------------------
    # Mapping to and from the nested stationary model
    # ------------------------------------------------------------------

    @staticmethod
    def from_stationary(params) -> np.ndarray:
        """(mu, ln sigma, lambda) -> (mu, ln sigma, ln sigma, lambda)."""
        x = np.asarray(params, dtype=float)
        return x[[0, 1, 1, 2]]

    @staticmethod
    def to_stationary(params) -> np.ndarray:
        """(mu, ln sigma1, ln sigma2, lambda) -> (mu, ln sigma1, lambda)."""
        x = np.asarray(params, dtype=float)
        return x[[0, 1, 3]]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(schedule={self.schedule!r}, "
            f"change_point={self.change_point})"
        )


def convert_params(
    params, source: PsychometricModel, target: PsychometricModel
) -> np.ndarray:
    """
    Map a parameter vector from ``source``'s space into ``target``'s.

    Stationary -> non-stationary duplicates the spread; the reverse keeps
    the first spread. Used to warm-start a fit of one model from the optimum
    (or the generating parameters) of the other.
    """
    x = np.asarray(params, dtype=float)
    if isinstance(source, NonStationaryPsychometric) and not isinstance(
        target, NonStationaryPsychometric
    ):
        return NonStationaryPsychometric.to_stationary(x)
    if isinstance(target, NonStationaryPsychometric) and not isinstance(
        source, NonStationaryPsychometric
    ):
        return NonStationaryPsychometric.from_stationary(x)
    return x
