"""
base.py
-------

Abstract base class for maximum-likelihood fitters.

All fitters implement ``minimize(objective, x0, bounds)``, the bounded local
optimizer contract

    minimize(f, x0 in [lb, ub], lb, ub) -> (x*, f(x*)),

and inherit ``fit(model, data)``, which draws or validates the starting
point, builds the objective, runs ``minimize`` and packages a FitResult.

All fitters (NelderMeadFitter, LBFGSBFitter, ProjectedGradientFitter,
BADSFitter, MultiStartFitter) subclass from this base.
"""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import jax
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.errors import ConvergenceWarning
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds
from psyfit.utils.rng import ensure_key

from .objective import NegativeLogLikelihood
from .result import FitResult


@dataclass
class OptimizeOutcome:
    """Raw output of one ``minimize`` call."""

    x: np.ndarray
    fun: float
    converged: bool
    message: str = ""
    n_evals: int = 0


class Fitter(ABC):
    """
    Abstract interface for maximum-likelihood fitters.

    Methods
    -------
    minimize(objective, x0, bounds) -> OptimizeOutcome
        Bounded local minimization of the objective.
    fit(model, data, bounds=None, x0=None, key=None) -> FitResult
        Fit model parameters to data.
    """

    name: str = "fitter"

    @abstractmethod
    def minimize(
        self,
        objective: NegativeLogLikelihood,
        x0: np.ndarray,
        bounds: ParameterBounds,
    ) -> OptimizeOutcome:
        """
        Minimize ``objective`` from ``x0`` within ``bounds``.

        Parameters
        ----------
        objective : NegativeLogLikelihood
            Objective to minimize.
        x0 : np.ndarray
            Starting point, inside [lb, ub].
        bounds : ParameterBounds
            Hard bounds (plausible bounds may guide the search).

        Returns
        -------
        OptimizeOutcome
        """
        ...

    def fit(
        self,
        model: PsychometricModel,
        data: TrialData,
        bounds: ParameterBounds | None = None,
        x0: Any | None = None,
        key: jax.Array | int | None = None,
    ) -> FitResult:
        """
        Fit model parameters to data.

        Parameters
        ----------
        model : PsychometricModel
            Model to fit.
        data : TrialData
            Observed trials.
        bounds : ParameterBounds | None
            Box constraints; defaults to the model's bounds.
        x0 : array-like | None
            Starting point. If None, drawn uniformly from the plausible box.
        key : jax.Array | int | None
            PRNG key (or integer seed) for the starting point.

        Returns
        -------
        FitResult
            theta*, NLL(theta*) and diagnostics.

        Raises
        ------
        InvalidParameterDomainError
            If x0 lies outside [lb, ub].
        """
        bounds = bounds if bounds is not None else model.bounds
        objective = NegativeLogLikelihood(model, data, bounds)

        if x0 is None:
            x0 = model.init_params(ensure_key(key), bounds)
        x0 = bounds.check(x0)

        outcome = self.minimize(objective, x0, bounds)

        # optimizers may step onto the bounds up to rounding
        x_best = bounds.clip(outcome.x)
        nll = objective(x_best)

        if not outcome.converged:
            warnings.warn(
                f"{self.name} did not converge fitting {model.name}: {outcome.message}",
                ConvergenceWarning,
                stacklevel=2,
            )

        return FitResult(
            params=x_best,
            nll=nll,
            n_params=model.n_params,
            n_trials=len(data),
            model_name=model.name,
            converged=outcome.converged,
            message=outcome.message,
            n_evals=outcome.n_evals,
            x0=x0,
        )
