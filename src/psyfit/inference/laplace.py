"""
laplace.py
----------

Laplace approximation to the posterior.

Approximates the posterior with a Gaussian:
    N(mean = theta_MLE, covariance = H^-1 at theta_MLE)

where H is the Hessian of the NLL (computed with jax.hessian). With a
uniform prior on the hard box [lb, ub] the log marginal likelihood is
approximately

    log p(D) ~ -NLL(theta*) - sum log(ub - lb) + (d / 2) log(2 pi) - (1/2) log det H

A cheap alternative to VBMC for ranking models on the evidence scale.
The approximation degrades when theta* sits on a bound (e.g. lapse = 0).
"""

from __future__ import annotations

import math
import warnings

import jax
import jax.numpy as jnp
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.errors import ConvergenceWarning
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds

from .objective import NegativeLogLikelihood
from .result import BayesianFitResult, FitResult


class LaplaceApproximation:
    """
    Laplace approximation around a maximum-likelihood fit.

    Methods
    -------
    from_fit(model, data, fit_result, bounds=None) -> BayesianFitResult
        Construct a Gaussian approximation centered at theta*.
    """

    def from_fit(
        self,
        model: PsychometricModel,
        data: TrialData,
        fit_result: FitResult,
        bounds: ParameterBounds | None = None,
    ) -> BayesianFitResult:
        """
        Return posterior approximation from a FitResult.

        Parameters
        ----------
        model : PsychometricModel
            Model that produced ``fit_result``.
        data : TrialData
            Data it was fit to.
        fit_result : FitResult
            Maximum-likelihood fit.
        bounds : ParameterBounds | None
            Prior box; defaults to the model's bounds.

        Returns
        -------
        BayesianFitResult
            ``success`` is False (and the evidence NaN) when the Hessian is
            not positive definite.
        """
        bounds = bounds if bounds is not None else model.bounds
        objective = NegativeLogLikelihood(model, data, bounds)
        theta = jnp.asarray(bounds.check(fit_result.params))

        hessian = np.asarray(jax.hessian(objective.loss_fn)(theta), dtype=float)
        hessian = 0.5 * (hessian + hessian.T)

        d = model.n_params
        log_prior = -float(np.sum(np.log(bounds.ub - bounds.lb)))
        sign, logdet = np.linalg.slogdet(hessian)
        positive_definite = bool(
            sign > 0 and np.all(np.linalg.eigvalsh(hessian) > 0)
        )

        if positive_definite:
            cov = np.linalg.inv(hessian)
            lml = (
                -fit_result.nll
                + log_prior
                + 0.5 * d * math.log(2.0 * math.pi)
                - 0.5 * logdet
            )
        else:
            warnings.warn(
                f"Hessian of {model.name} is not positive definite at the optimum; "
                "Laplace evidence is undefined",
                ConvergenceWarning,
                stacklevel=2,
            )
            cov = np.full((d, d), np.nan)
            lml = math.nan

        return BayesianFitResult(
            log_marginal_likelihood=lml,
            log_marginal_likelihood_sd=0.0,
            posterior_mean=np.asarray(theta),
            posterior_cov=cov,
            model_name=model.name,
            n_params=d,
            n_trials=len(data),
            success=positive_definite,
            method="laplace",
            extra={"hessian": hessian},
        )
