"""
base.py
-------

Base class for psychometric likelihood models.

Provides:
- PsychometricModel.predict(params, stimuli) --> p(positive response)
- PsychometricModel.prob(params, data) --> probability of each observed response
- PsychometricModel.log_likelihood_from_data(params, data)
- PsychometricModel.simulate(params, stimuli, key) --> synthetic TrialData
- PsychometricModel.fit(X, y, inference=...) --> FitResult

Design
------
Subclasses only define the lapse-free psychometric curve ``psi`` (as the pair
psi(x), 1 - psi(x), each computed without cancellation) and their default
bounds. The lapse correction

    p(x) = lambda / 2 + (1 - lambda) * psi(x)

and everything downstream (likelihoods, simulation, fitting) lives here.

Public methods validate the parameter vector (length and hard bounds) and
return NumPy values. The underscore methods are pure ``jax.numpy`` functions
with no checks, safe to jit and differentiate; the objective and the
optimizers use those.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np

from psyfit.data.dataset import RESPONSE_NEGATIVE, RESPONSE_POSITIVE, TrialData
from psyfit.errors import DimensionMismatchError

from .bounds import ParameterBounds

if TYPE_CHECKING:
    from psyfit.inference.base import Fitter
    from psyfit.inference.result import FitResult


class PsychometricModel(ABC):
    """
    Abstract base class for psychometric likelihood models.

    Subclasses must implement:
    - default_bounds() --> ParameterBounds
    - _psi(params, stimuli, regime_weights) --> (psi, 1 - psi)

    Parameters
    ----------
    bounds : ParameterBounds | None
        Hard and plausible bounds. If None, uses default_bounds().

    Attributes
    ----------
    name : str
        Short identifier used as a key in comparison tables.
    param_names : tuple[str, ...]
        Ordered parameter names; the lapse rate is always last.
    has_regimes : bool
        True when predictions depend on per-trial regime weights.
    """

    name: str = "model"
    param_names: tuple[str, ...] = ()
    has_regimes: bool = False

    def __init__(self, *, bounds: ParameterBounds | None = None) -> None:
        bounds = bounds if bounds is not None else self.default_bounds()
        if bounds.dim != self.n_params:
            raise DimensionMismatchError(
                f"{self.name} has {self.n_params} parameters, bounds have {bounds.dim}"
            )
        self.bounds = bounds

    @property
    def n_params(self) -> int:
        """Number of free parameters k."""
        return len(self.param_names)

    # ------------------------------------------------------------------
    # Abstract methods (must be implemented by subclasses)
    # ------------------------------------------------------------------

    @abstractmethod
    def default_bounds(self) -> ParameterBounds:
        """Hard and plausible bounds used when none are given."""
        ...

    @abstractmethod
    def _psi(
        self, params: jnp.ndarray, stimuli: jnp.ndarray, regime_weights: jnp.ndarray
    ) -> tuple[jnp.ndarray, jnp.ndarray]:
        """
        Lapse-free probability of the positive and negative categories.

        Parameters
        ----------
        params : jnp.ndarray, shape (n_params,)
        stimuli : jnp.ndarray, shape (n_trials,)
        regime_weights : jnp.ndarray, shape (n_trials,)
            Per-trial regime weights (ignored by stationary models).

        Returns
        -------
        (psi, psi_complement) : tuple of jnp.ndarray
        """
        ...

    def regime_weights(self, n_trials: int) -> jnp.ndarray:
        """Per-trial regime weights; stationary models have none."""
        return jnp.zeros(n_trials)

    # ------------------------------------------------------------------
    # Unchecked JAX core (jit / grad friendly)
    # ------------------------------------------------------------------

    def _response_probs(
        self,
        params: jnp.ndarray,
        stimuli: jnp.ndarray,
        responses: jnp.ndarray,
        regime_weights: jnp.ndarray | None = None,
    ) -> jnp.ndarray:
        """Probability of each observed response (lapse-corrected)."""
        if regime_weights is None:
            regime_weights = self.regime_weights(stimuli.shape[0])
        psi, psi_c = self._psi(params, stimuli, regime_weights)
        lapse = params[-1]
        p_pos = 0.5 * lapse + (1.0 - lapse) * psi
        p_neg = 0.5 * lapse + (1.0 - lapse) * psi_c
        return jnp.where(responses == RESPONSE_POSITIVE, p_pos, p_neg)

    def _log_likelihood(
        self, params: jnp.ndarray, stimuli: jnp.ndarray, responses: jnp.ndarray
    ) -> jnp.ndarray:
        """Sum of log-probabilities; -inf if any trial has probability 0."""
        return jnp.sum(jnp.log(self._response_probs(params, stimuli, responses)))

    # ------------------------------------------------------------------
    # Checked public API
    # ------------------------------------------------------------------

    def check_params(self, params: Any) -> np.ndarray:
        """
        Validate a parameter vector against the model.

        Raises
        ------
        DimensionMismatchError
            If the length differs from n_params.
        InvalidParameterDomainError
            If any component lies outside the hard bounds.
        """
        x = np.asarray(params, dtype=float)
        if x.ndim != 1 or x.shape[0] != self.n_params:
            raise DimensionMismatchError(
                f"{self.name} expects {self.n_params} parameters "
                f"{self.param_names}, got shape {x.shape}"
            )
        return self.bounds.check(x)

    def predict(
        self,
        params: Any,
        stimuli: Any,
        regime_weights: Any | None = None,
    ) -> np.ndarray:
        """
        Probability of the positive response at each stimulus.

        Parameters
        ----------
        params : array-like, shape (n_params,)
        stimuli : array-like, shape (n,)
        regime_weights : array-like, shape (n,), optional
            Regime weight per stimulus. Required when ``has_regimes`` is
            True; for a trial sequence pass ``self.regime_weights(n)``.

        Returns
        -------
        np.ndarray, shape (n,)

        Raises
        ------
        ValueError
            If the model has regimes and no weights are given.
        DimensionMismatchError
            If the weights do not match the stimuli one to one.
        """
        x = jnp.asarray(self.check_params(params))
        s = jnp.atleast_1d(jnp.asarray(stimuli, dtype=float))
        if regime_weights is None:
            if self.has_regimes:
                raise ValueError(
                    f"{self.name} needs regime_weights to predict; "
                    "use regime_weights(n_trials) for a trial sequence"
                )
            w = jnp.zeros(s.shape)
        else:
            w = jnp.atleast_1d(jnp.asarray(regime_weights, dtype=float))
            if w.shape != s.shape:
                raise DimensionMismatchError(
                    f"regime_weights has shape {w.shape}, stimuli have shape {s.shape}"
                )
        r = jnp.full(s.shape, RESPONSE_POSITIVE)
        return np.asarray(self._response_probs(x, s, r, w))

    def prob(self, params: Any, data: TrialData) -> np.ndarray:
        """
        Probability of each observed response in ``data``.

        Returns
        -------
        np.ndarray, shape (n_trials,)
        """
        x = jnp.asarray(self.check_params(params))
        stimuli, responses = data.to_numpy()
        return np.asarray(
            self._response_probs(x, jnp.asarray(stimuli), jnp.asarray(responses))
        )

    def log_likelihood_from_data(self, params: Any, data: TrialData) -> float:
        """
        Compute log p(data | params).

        Returns
        -------
        float
            Log-likelihood; -inf when a trial has probability exactly 0.
        """
        x = jnp.asarray(self.check_params(params))
        stimuli, responses = data.to_numpy()
        return float(
            self._log_likelihood(x, jnp.asarray(stimuli), jnp.asarray(responses))
        )

    def init_params(
        self, key: jax.Array, bounds: ParameterBounds | None = None
    ) -> np.ndarray:
        """
        Draw a parameter vector uniformly from the plausible box.

        Parameters
        ----------
        key : jax.Array
            PRNG key
        bounds : ParameterBounds | None
            Box to sample from; defaults to the model's bounds.
        """
        bounds = bounds if bounds is not None else self.bounds
        return bounds.sample_plausible(key)

    def simulate(self, params: Any, stimuli: Any, key: jax.Array) -> TrialData:
        """
        Draw one binary response per stimulus.

        Response 2 is drawn with probability p(x), response 1 otherwise.

        Parameters
        ----------
        params : array-like, shape (n_params,)
        stimuli : array-like, shape (n_trials,)
            Trial sequence (order sets regime weights).
        key : jax.Array
            PRNG key

        Returns
        -------
        TrialData
        """
        stimuli = np.asarray(stimuli, dtype=float)
        p = self.predict(
            params, stimuli, regime_weights=self.regime_weights(stimuli.shape[0])
        )
        u = np.asarray(jr.uniform(key, stimuli.shape, dtype=float))
        responses = np.where(u <= p, RESPONSE_POSITIVE, RESPONSE_NEGATIVE)
        return TrialData(stimuli, responses)

    # ------------------------------------------------------------------
    # Fitting facade
    # ------------------------------------------------------------------

    def fit(
        self,
        X: Any,
        y: Any = None,
        *,
        inference: Fitter | str = "nelder-mead",
        inference_config: dict | None = None,
        bounds: ParameterBounds | None = None,
        x0: Any | None = None,
        key: jax.Array | None = None,
    ) -> FitResult:
        """
        Fit model to data by maximum likelihood.

        Parameters
        ----------
        X : array-like or TrialData
            Stimuli, shape (n_trials,), a (n_trials, 2) table, or TrialData.
        y : array-like, optional
            Responses in {1, 2}, shape (n_trials,).
        inference : Fitter | str, default="nelder-mead"
            Fitter instance or registry key ("nelder-mead", "l-bfgs-b",
            "optax", "bads").
        inference_config : dict | None
            Keyword arguments for string-based inference.
        bounds : ParameterBounds | None
            Overrides the model's bounds.
        x0 : array-like | None
            Starting point. If None, drawn from the plausible box with ``key``.
        key : jax.Array | None
            PRNG key for the starting point.

        Returns
        -------
        FitResult

        Examples
        --------
        >>> model.fit(data)
        >>> model.fit(stimuli, responses, inference="l-bfgs-b")
        >>> model.fit(data, inference="bads", inference_config={"display": "off"})
        """
        from psyfit.inference import FITTERS, Fitter

        is_string_inference = isinstance(inference, str)

        if is_string_inference:
            config = inference_config or {}
            inference_key: str = inference  # type: ignore[assignment]
            if inference_key not in FITTERS:
                available = ", ".join(FITTERS.keys())
                raise ValueError(
                    f"Unknown inference: '{inference}'. Available: {available}"
                )
            fitter: Fitter = FITTERS[inference_key](**config)
        elif isinstance(inference, Fitter):
            fitter = inference
        else:
            raise TypeError(
                f"inference must be Fitter or str, got {type(inference)}"
            )

        if inference_config is not None and not is_string_inference:
            raise ValueError("Cannot pass inference_config with Fitter instance")

        data = X if isinstance(X, TrialData) else TrialData.from_arrays(X, y)
        return fitter.fit(self, data, bounds=bounds, x0=x0, key=key)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, n_params={self.n_params})"
