"""
inference
=========

Fitting engines for psychometric models.

This subpackage provides different strategies for fitting model parameters
to data and returning result records.

Maximum likelihood
------------------
- NelderMeadFitter : bounded simplex search (scipy).
- LBFGSBFitter : bounded quasi-Newton with JAX gradients (scipy).
- ProjectedGradientFitter : projected gradient descent with Optax.
- BADSFitter : Bayesian Adaptive Direct Search (pybads).
- MultiStartFitter : best of several random restarts.

Approximate Bayesian inference
------------------------------
- LaplaceApproximation : Gaussian around the MLE, Laplace evidence.
- VBMCInference : variational posterior and ELBO (pyvbmc).
"""

from .bads import BADSFitter
from .base import Fitter, OptimizeOutcome
from .laplace import LaplaceApproximation
from .multistart import MultiStartFitter
from .objective import NegativeLogLikelihood
from .optax_optimizer import ProjectedGradientFitter
from .result import BayesianFitResult, FitResult
from .scipy_optimizer import LBFGSBFitter, NelderMeadFitter, ScipyFitter
from .vbmc import VBMCInference

# Registry for string-based fitter selection
FITTERS = {
    "nelder-mead": NelderMeadFitter,
    "l-bfgs-b": LBFGSBFitter,
    "optax": ProjectedGradientFitter,
    "bads": BADSFitter,
}


def get_fitter(name: str, **config) -> Fitter:
    """
    Instantiate a fitter from its registry key.

    Raises
    ------
    ValueError
        If ``name`` is not a registered fitter.
    """
    if name not in FITTERS:
        available = ", ".join(FITTERS.keys())
        raise ValueError(f"Unknown inference: '{name}'. Available: {available}")
    return FITTERS[name](**config)


__all__ = [
    "Fitter",
    "OptimizeOutcome",
    "NegativeLogLikelihood",
    "FitResult",
    "BayesianFitResult",
    "ScipyFitter",
    "NelderMeadFitter",
    "LBFGSBFitter",
    "ProjectedGradientFitter",
    "BADSFitter",
    "MultiStartFitter",
    "LaplaceApproximation",
    "VBMCInference",
    "FITTERS",
    "get_fitter",
]
