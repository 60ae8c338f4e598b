"""
scipy_optimizer.py
------------------

Bounded local optimizers from scipy.optimize.

- NelderMeadFitter : derivative-free simplex search with bounds (the
  counterpart of MATLAB's fminsearchbnd).
- LBFGSBFitter : bounded quasi-Newton using exact JAX gradients (the
  counterpart of fmincon).

Connections
-----------
- Minimize NegativeLogLikelihood; gradients come from its jitted
  value_and_grad.
- Fitter.fit wraps the outcome into a FitResult.
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import minimize

from psyfit.model.bounds import ParameterBounds

from .base import Fitter, OptimizeOutcome
from .objective import NegativeLogLikelihood


class ScipyFitter(Fitter):
    """
    Generic wrapper around ``scipy.optimize.minimize`` with box bounds.

    Parameters
    ----------
    method : str
        Any bounded scipy method ("Nelder-Mead", "L-BFGS-B", "Powell", "TNC").
    max_iter : int | None
        Iteration budget; None keeps scipy's default.
    options : dict | None
        Extra options forwarded to scipy.
    use_gradient : bool
        Pass the JAX gradient as ``jac``.
    """

    def __init__(
        self,
        method: str = "Nelder-Mead",
        max_iter: int | None = None,
        options: dict | None = None,
        use_gradient: bool = False,
    ) -> None:
        self.method = method
        self.name = method
        self.max_iter = max_iter
        self.options = dict(options or {})
        self.use_gradient = use_gradient

    def _options(self) -> dict:
        opts = dict(self.options)
        if self.max_iter is not None:
            opts.setdefault("maxiter", int(self.max_iter))
        return opts

    def minimize(
        self,
        objective: NegativeLogLikelihood,
        x0: np.ndarray,
        bounds: ParameterBounds,
    ) -> OptimizeOutcome:
        fun = objective.value_and_grad if self.use_gradient else objective
        res = minimize(
            fun,
            np.asarray(x0, dtype=float),
            method=self.method,
            jac=self.use_gradient or None,
            bounds=list(zip(bounds.lb, bounds.ub)),
            options=self._options(),
        )
        return OptimizeOutcome(
            x=np.asarray(res.x, dtype=float),
            fun=float(res.fun),
            converged=bool(res.success),
            message=str(res.message),
            n_evals=int(getattr(res, "nfev", objective.n_evals)),
        )


class NelderMeadFitter(ScipyFitter):
    """
    Bounded Nelder-Mead simplex search.

    Parameters
    ----------
    max_iter : int | None
        Iteration budget (scipy default: 200 * n_params).
    xatol, fatol : float, default=1e-4
        Absolute tolerances on parameters and NLL, as in fminsearch.
    adaptive : bool, default=False
        Dimension-adapted simplex parameters.
    """

    def __init__(
        self,
        max_iter: int | None = None,
        xatol: float = 1e-4,
        fatol: float = 1e-4,
        adaptive: bool = False,
    ) -> None:
        super().__init__(
            method="Nelder-Mead",
            max_iter=max_iter,
            options={"xatol": xatol, "fatol": fatol, "adaptive": adaptive},
        )
        self.name = "nelder-mead"


class LBFGSBFitter(ScipyFitter):
    """
    L-BFGS-B with gradients from JAX autodiff.

    Parameters
    ----------
    max_iter : int | None
        Iteration budget.
    ftol, gtol : float
        Relative function and projected-gradient tolerances.
    """

    def __init__(
        self,
        max_iter: int | None = None,
        ftol: float = 1e-10,
        gtol: float = 1e-6,
    ) -> None:
        super().__init__(
            method="L-BFGS-B",
            max_iter=max_iter,
            options={"ftol": ftol, "gtol": gtol},
            use_gradient=True,
        )
        self.name = "l-bfgs-b"
