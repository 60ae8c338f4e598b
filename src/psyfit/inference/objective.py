"""
objective.py
------------

Negative log-likelihood objective.

NegativeLogLikelihood holds (model, data, bounds) as fields and exposes one
evaluation operation, plus a jitted value-and-gradient for gradient-based
optimizers:

    NLL(theta) = - sum_t log p(r_t | x_t, theta)

Any trial with probability exactly 0 makes NLL = +inf; NaNs are mapped to
+inf too, so optimizers see a very bad point instead of an exception.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.errors import DimensionMismatchError
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds


class NegativeLogLikelihood:
    """
    Objective for maximum-likelihood fitting.

    Parameters
    ----------
    model : PsychometricModel
        Likelihood model.
    data : TrialData
        Observed trials.
    bounds : ParameterBounds | None
        Admissible box; evaluations outside it raise
        InvalidParameterDomainError. Defaults to the model's bounds.

    Attributes
    ----------
    n_evals : int
        Number of checked evaluations so far.

    Examples
    --------
    >>> objective = NegativeLogLikelihood(StationaryPsychometric(), data)
    >>> objective([0.0, np.log(5.0), 0.02])
    """

    def __init__(
        self,
        model: PsychometricModel,
        data: TrialData,
        bounds: ParameterBounds | None = None,
    ) -> None:
        bounds = bounds if bounds is not None else model.bounds
        if bounds.dim != model.n_params:
            raise DimensionMismatchError(
                f"{model.name} has {model.n_params} parameters, bounds have {bounds.dim}"
            )
        self.model = model
        self.data = data
        self.bounds = bounds
        self.n_evals = 0

        stimuli, responses = data.to_numpy()
        self._stimuli = jnp.asarray(stimuli)
        self._responses = jnp.asarray(responses)
        self._loss = jax.jit(self.loss_fn)
        self._value_and_grad = jax.jit(jax.value_and_grad(self.loss_fn))

    @property
    def n_trials(self) -> int:
        return len(self.data)

    def loss_fn(self, params: jnp.ndarray) -> jnp.ndarray:
        """Unchecked NLL as a pure JAX function (for jit, grad, hessian)."""
        return -self.model._log_likelihood(params, self._stimuli, self._responses)

    def _prepare(self, params) -> jnp.ndarray:
        x = np.asarray(params, dtype=float)
        if x.size == self.bounds.dim:
            x = x.reshape(-1)
        return jnp.asarray(self.bounds.check(x))

    def __call__(self, params) -> float:
        """
        Evaluate NLL at ``params``.

        Raises
        ------
        DimensionMismatchError, InvalidParameterDomainError
            If ``params`` has the wrong length or lies outside the bounds.
        """
        x = self._prepare(params)
        self.n_evals += 1
        value = float(self._loss(x))
        return value if not math.isnan(value) else math.inf

    def value_and_grad(self, params) -> tuple[float, np.ndarray]:
        """
        NLL and its gradient at ``params``.

        Non-finite values return (+inf, zeros).
        """
        x = self._prepare(params)
        self.n_evals += 1
        value, grad = self._value_and_grad(x)
        value = float(value)
        grad = np.asarray(grad, dtype=float)
        if not math.isfinite(value):
            return math.inf, np.zeros_like(grad)
        return value, np.where(np.isfinite(grad), grad, 0.0)
