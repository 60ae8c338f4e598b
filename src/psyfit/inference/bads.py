"""
bads.py
-------

Bayesian Adaptive Direct Search (BADS) fitter via ``pybads``.

BADS alternates a Gaussian-process surrogate search with mesh polling. It
uses both boxes: the hard bounds constrain the search, the plausible bounds
set its initial scale.

References
----------
Acerbi, L. & Ma, W. J. (2017). Practical Bayesian Optimization for Model
Fitting with Bayesian Adaptive Direct Search. NeurIPS 30.
"""

from __future__ import annotations

import numpy as np

from psyfit.model.bounds import ParameterBounds

from .base import Fitter, OptimizeOutcome
from .objective import NegativeLogLikelihood


class BADSFitter(Fitter):
    """
    BADS optimizer.

    Parameters
    ----------
    options : dict | None
        pybads options. Defaults: ``display="off"`` and
        ``uncertainty_handling=False`` (the likelihood is deterministic).
    **kwargs
        Merged into ``options``.

    Examples
    --------
    >>> fitter = BADSFitter(display="iter")
    >>> result = fitter.fit(StationaryPsychometric(), data, key=seed(1))
    """

    name = "bads"

    def __init__(self, options: dict | None = None, **kwargs) -> None:
        self.options = {
            "display": "off",
            "uncertainty_handling": False,
            **(options or {}),
            **kwargs,
        }

    def minimize(
        self,
        objective: NegativeLogLikelihood,
        x0: np.ndarray,
        bounds: ParameterBounds,
    ) -> OptimizeOutcome:
        from pybads import BADS

        bads = BADS(
            objective,
            np.asarray(x0, dtype=float),
            bounds.lb,
            bounds.ub,
            bounds.plb,
            bounds.pub,
            options=dict(self.options),
        )
        optimize_result = bads.optimize()
        return OptimizeOutcome(
            x=np.ravel(np.asarray(optimize_result["x"], dtype=float)),
            fun=float(optimize_result["fval"]),
            converged=bool(optimize_result.get("success", True)),
            message=str(optimize_result.get("message", "")),
            n_evals=int(optimize_result.get("func_count", objective.n_evals)),
        )
