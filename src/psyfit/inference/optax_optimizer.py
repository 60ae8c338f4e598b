"""
optax_optimizer.py
------------------

Projected gradient descent with Optax.

MVP implementation:
- Gradient descent on the negative log-likelihood.
- After each update the parameters are projected back onto [lb, ub] with
  ``optax.projections.projection_box``.
- Defaults to Adam, but any Optax optimizer can be passed in.

Connections
-----------
- Differentiates NegativeLogLikelihood.loss_fn with jax.value_and_grad.
- Returns an OptimizeOutcome; Fitter.fit turns it into a FitResult.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp
import numpy as np
import optax

from psyfit.model.bounds import ParameterBounds

from .base import Fitter, OptimizeOutcome
from .objective import NegativeLogLikelihood


class ProjectedGradientFitter(Fitter):
    """
    Projected gradient fitter.

    Parameters
    ----------
    steps : int, default=2000
        Maximum number of optimization steps.
    learning_rate : float, default=0.05
        Learning rate for the default optimizer (Adam).
    optimizer : optax.GradientTransformation, optional
        Optax optimizer to use.
    tol : float, default=1e-9
        Stop when the relative change of the loss between steps falls
        below ``tol``; reaching ``steps`` first counts as non-convergence.
    track_history : bool, optional
        When True, record loss history during fitting for plotting.
    log_every : int, optional
        Record every N steps (also records the last step).

    Notes
    -----
    - Loss function = negative log-likelihood.
    - Gradients computed with jax.grad; non-finite gradient entries are
      zeroed so a degenerate point does not poison the optimizer state.
    """

    name = "optax"

    def __init__(
        self,
        steps: int = 2000,
        learning_rate: float = 0.05,
        optimizer: optax.GradientTransformation | None = None,
        tol: float = 1e-9,
        *,
        track_history: bool = False,
        log_every: int = 10,
    ):
        self.steps = int(steps)
        self.optimizer = optimizer or optax.adam(learning_rate=learning_rate)
        self.tol = float(tol)
        self.track_history = track_history
        self.log_every = max(1, int(log_every))
        # Exposed after fit() when tracking is enabled
        self.loss_steps: list[int] = []
        self.loss_history: list[float] = []

    def minimize(
        self,
        objective: NegativeLogLikelihood,
        x0: np.ndarray,
        bounds: ParameterBounds,
    ) -> OptimizeOutcome:
        loss_fn = objective.loss_fn
        lower = jnp.asarray(bounds.lb)
        upper = jnp.asarray(bounds.ub)

        params = jnp.asarray(x0, dtype=float)
        opt_state = self.optimizer.init(params)

        @jax.jit
        def step(params, opt_state):
            loss, grads = jax.value_and_grad(loss_fn)(params)
            grads = jnp.where(jnp.isfinite(grads), grads, 0.0)
            updates, opt_state = self.optimizer.update(grads, opt_state, params)
            params = optax.apply_updates(params, updates)
            params = optax.projections.projection_box(params, lower, upper)
            return params, opt_state, loss

        loss_steps: list[int] = []
        loss_history: list[float] = []

        best_params, best_loss = params, math.inf
        prev_loss = math.inf
        converged = False
        n_steps = 0
        for i in range(self.steps):
            new_params, opt_state, loss = step(params, opt_state)
            loss = float(loss)
            n_steps = i + 1
            # loss is evaluated at the pre-update params
            if loss < best_loss:
                best_params, best_loss = params, loss
            if self.track_history and (
                (i % self.log_every == 0) or (i == self.steps - 1)
            ):
                loss_steps.append(i)
                loss_history.append(loss)
            if math.isfinite(loss) and abs(prev_loss - loss) <= self.tol * max(
                1.0, abs(loss)
            ):
                converged = True
                break
            prev_loss = loss
            params = new_params

        if self.track_history:
            self.loss_steps, self.loss_history = loss_steps, loss_history

        message = (
            f"converged after {n_steps} steps"
            if converged
            else f"reached step limit ({self.steps})"
        )
        return OptimizeOutcome(
            x=np.asarray(best_params, dtype=float),
            fun=best_loss,
            converged=converged,
            message=message,
            n_evals=n_steps,
        )

    def get_history(self) -> tuple[list[int], list[float]]:
        """Return (steps, losses) recorded during the last fit when tracking was enabled."""
        return self.loss_steps, self.loss_history
