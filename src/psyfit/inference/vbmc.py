"""
vbmc.py
-------

Variational Bayesian Monte Carlo (VBMC) via ``pyvbmc``.

Fits a variational posterior to log p(D | theta) + log p(theta) with a
uniform prior on the hard box, and returns the ELBO as an estimate of the
log marginal likelihood. Model evidences of different models can then be
compared directly, without the AIC/BIC penalties.

References
----------
Acerbi, L. (2018). Variational Bayesian Monte Carlo. NeurIPS 31.
"""

from __future__ import annotations

from typing import Any

import jax
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds
from psyfit.utils.rng import ensure_key

from .objective import NegativeLogLikelihood
from .result import BayesianFitResult


class VBMCInference:
    """
    Approximate Bayesian inference with VBMC.

    Parameters
    ----------
    options : dict | None
        pyvbmc options; ``display`` defaults to "off".
    **kwargs
        Merged into ``options``.

    Notes
    -----
    VBMC requires plausible bounds strictly inside the hard bounds.
    """

    def __init__(self, options: dict | None = None, **kwargs) -> None:
        self.options = {"display": "off", **(options or {}), **kwargs}

    def fit(
        self,
        model: PsychometricModel,
        data: TrialData,
        bounds: ParameterBounds | None = None,
        x0: Any | None = None,
        key: jax.Array | int | None = None,
    ) -> BayesianFitResult:
        """
        Run VBMC on ``model`` and ``data``.

        Parameters
        ----------
        model : PsychometricModel
        data : TrialData
        bounds : ParameterBounds | None
            Prior box and plausible box; defaults to the model's bounds.
        x0 : array-like | None
            Starting point; drawn from the plausible box if None.
        key : jax.Array | int | None
            PRNG key for the starting point.

        Returns
        -------
        BayesianFitResult
            ELBO, its standard deviation, posterior moments and the
            variational posterior (``extra["vp"]``).

        Raises
        ------
        ValueError
            If plausible bounds touch the hard bounds.
        """
        from pyvbmc import VBMC

        bounds = bounds if bounds is not None else model.bounds
        if np.any(bounds.plb <= bounds.lb) or np.any(bounds.pub >= bounds.ub):
            raise ValueError(
                "VBMC requires lb < plb and pub < ub for every parameter"
            )

        objective = NegativeLogLikelihood(model, data, bounds)
        log_prior = -float(np.sum(np.log(bounds.ub - bounds.lb)))

        def log_joint(theta):
            return -objective(np.ravel(theta)) + log_prior

        if x0 is None:
            x0 = model.init_params(ensure_key(key), bounds)
        x0 = bounds.check(x0)

        vbmc = VBMC(
            log_joint,
            x0[None, :],
            bounds.lb[None, :],
            bounds.ub[None, :],
            bounds.plb[None, :],
            bounds.pub[None, :],
            options=dict(self.options),
        )
        vp, results = vbmc.optimize()
        post_mean, post_cov = vp.moments(cov_flag=True)

        return BayesianFitResult(
            log_marginal_likelihood=float(results["elbo"]),
            log_marginal_likelihood_sd=float(results["elbo_sd"]),
            posterior_mean=np.ravel(post_mean),
            posterior_cov=np.asarray(post_cov),
            model_name=model.name,
            n_params=model.n_params,
            n_trials=len(data),
            success=bool(results.get("success_flag", True)),
            method="vbmc",
            extra={"vp": vp, "results": results},
        )
