"""
result.py
---------

Immutable result records returned by fitters and Bayesian inference engines.

- FitResult : maximum-likelihood point estimate + optimizer diagnostics
- BayesianFitResult : approximate posterior and log marginal likelihood
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from psyfit.comparison.criteria import ComparisonRecord


def _frozen_array(x) -> np.ndarray:
    arr = np.array(x, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class FitResult:
    """
    Maximum-likelihood fit of one model to one dataset.

    Attributes
    ----------
    params : np.ndarray
        Best-fit parameter vector theta* (read-only), within [lb, ub].
    nll : float
        Negative log-likelihood at theta*; +inf for a degenerate fit.
    n_params : int
        Parameter count k.
    n_trials : int
        Sample size n.
    model_name : str
        Name of the fitted model.
    converged : bool
        Optimizer's own convergence flag.
    message : str
        Optimizer termination message.
    n_evals : int
        Number of objective evaluations (or optimizer steps).
    x0 : np.ndarray | None
        Starting point of the run.
    """

    params: np.ndarray
    nll: float
    n_params: int
    n_trials: int
    model_name: str = ""
    converged: bool = True
    message: str = ""
    n_evals: int = 0
    x0: np.ndarray | None = None

    def __post_init__(self):
        object.__setattr__(self, "params", _frozen_array(self.params))
        object.__setattr__(self, "nll", float(self.nll))
        if self.x0 is not None:
            object.__setattr__(self, "x0", _frozen_array(self.x0))

    @property
    def log_likelihood(self) -> float:
        """LL = -NLL."""
        return -self.nll

    def criteria(self) -> ComparisonRecord:
        """Information criteria for this fit (see psyfit.comparison)."""
        from psyfit.comparison.criteria import information_criteria

        return information_criteria(self.nll, self.n_params, self.n_trials)


@dataclass(frozen=True)
class BayesianFitResult:
    """
    Approximate posterior from variational or Laplace inference.

    Attributes
    ----------
    log_marginal_likelihood : float
        ELBO (VBMC) or Laplace evidence approximation.
    log_marginal_likelihood_sd : float
        Uncertainty of the estimate (0 for Laplace).
    posterior_mean : np.ndarray
    posterior_cov : np.ndarray
    model_name : str
    n_params : int
    n_trials : int
    success : bool
        Whether the inference engine reports convergence.
    method : str
        "vbmc" or "laplace".
    extra : dict
        Engine-specific objects (e.g. the VBMC variational posterior).
    """

    log_marginal_likelihood: float
    log_marginal_likelihood_sd: float
    posterior_mean: np.ndarray
    posterior_cov: np.ndarray
    model_name: str
    n_params: int
    n_trials: int
    success: bool = True
    method: str = ""
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "posterior_mean", _frozen_array(self.posterior_mean))
        object.__setattr__(
            self, "posterior_cov", _frozen_array(np.atleast_2d(self.posterior_cov))
        )

    @property
    def posterior_sd(self) -> np.ndarray:
        """Marginal posterior standard deviations."""
        return np.sqrt(np.diag(self.posterior_cov))
