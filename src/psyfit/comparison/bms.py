"""
bms.py
------

Group Bayesian model selection (BMS).

Input is a subjects x models matrix of log model evidence, or of a proxy on
the same scale (rescaled AIC / BIC). Output is population-level inference on
which model generated each subject:

- alpha : posterior Dirichlet counts over model frequencies
- expected_frequencies : E[r_k] = alpha_k / sum(alpha)
- exceedance_probabilities : P(r_k > r_j for all j != k)
- protected_exceedance_probabilities : exceedance corrected for the
  possibility that all models are equally frequent
- bor : Bayesian omnibus risk, posterior probability of that null

psyfit does not implement the selection statistics. Any callable following
the GroupBMS protocol can be plugged into ``group_bms``; the default backend,
VariationalGroupBMS, wraps ``groupBMC`` (a Python port of VBA_groupBMC).

References
----------
Stephan, K. E., Penny, W. D., Daunizeau, J., Moran, R. J. & Friston, K. J.
(2009). Bayesian model selection for group studies. NeuroImage 46.
Rigoux, L., Stephan, K. E., Friston, K. J. & Daunizeau, J. (2014). Bayesian
model selection for group studies - revisited. NeuroImage 84.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

import numpy as np
from groupBMC.groupBMC import GroupBMC
from scipy.special import expit


@dataclass(frozen=True)
class GroupBMSResult:
    """
    Population-level model selection results.

    Attributes
    ----------
    alpha : np.ndarray, shape (n_models,)
    expected_frequencies : np.ndarray, shape (n_models,)
    exceedance_probabilities : np.ndarray, shape (n_models,)
    protected_exceedance_probabilities : np.ndarray, shape (n_models,)
    bor : float
    attributions : np.ndarray, shape (n_subjects, n_models)
        Posterior probability that each subject was generated by each model.
    free_energy : float
        Variational free energy of the full (random-effects) model.
    null_free_energy : float
        Free energy of the null (equal frequencies) model.
    model_names : tuple[str, ...]
    """

    alpha: np.ndarray
    expected_frequencies: np.ndarray
    exceedance_probabilities: np.ndarray
    protected_exceedance_probabilities: np.ndarray
    bor: float
    attributions: np.ndarray
    free_energy: float = float("nan")
    null_free_energy: float = float("nan")
    model_names: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, dict[str, float]]:
        """Per-model summary keyed by model name (or index)."""
        names = self.model_names or tuple(str(i) for i in range(len(self.alpha)))
        return {
            name: {
                "alpha": float(self.alpha[i]),
                "expected_frequency": float(self.expected_frequencies[i]),
                "exceedance_probability": float(self.exceedance_probabilities[i]),
                "protected_exceedance_probability": float(
                    self.protected_exceedance_probabilities[i]
                ),
            }
            for i, name in enumerate(names)
        }


@runtime_checkable
class GroupBMS(Protocol):
    """Protocol for group BMS backends: evidence matrix in, results out."""

    def __call__(self, evidence: np.ndarray) -> GroupBMSResult: ...


class VariationalGroupBMS:
    """
    Variational Bayesian group model selection, backed by ``groupBMC``.

    Parameters
    ----------
    alpha0 : sequence of float | None
        Prior Dirichlet counts. None keeps the groupBMC default of 1/K per
        model, which is also the null-model prior in the omnibus risk.
    max_iter : int, default=32
        Maximum VB iterations.
    tol : float, default=1e-4
        Stop when the change in free energy falls below ``tol``.

    Examples
    --------
    >>> bms = VariationalGroupBMS()
    >>> result = bms(aic_rescaled)  # shape (n_subjects, n_models)
    >>> result.protected_exceedance_probabilities
    """

    def __init__(
        self,
        alpha0: Sequence[float] | None = None,
        max_iter: int = 32,
        tol: float = 1e-4,
    ) -> None:
        self.alpha0 = None if alpha0 is None else np.asarray(alpha0, dtype=float)
        self.max_iter = int(max_iter)
        self.tol = float(tol)

    def __call__(self, evidence: np.ndarray) -> GroupBMSResult:
        """
        Run group BMS on a subjects x models evidence matrix.

        Raises
        ------
        ValueError
            If the matrix is not 2-D, is empty, has fewer than two models,
            or has non-finite entries.
        """
        lme = np.asarray(evidence, dtype=float)
        if lme.ndim != 2 or lme.shape[0] < 1 or lme.shape[1] < 2:
            raise ValueError(
                "evidence must be a (subjects, models) matrix with at least "
                f"one subject and two models, got {lme.shape}"
            )
        if not np.all(np.isfinite(lme)):
            raise ValueError("evidence must be finite")
        n_models = lme.shape[1]
        if self.alpha0 is not None and self.alpha0.shape != (n_models,):
            raise ValueError(
                f"alpha0 has shape {self.alpha0.shape}, expected ({n_models},)"
            )

        # groupBMC works on models x subjects
        fit = GroupBMC(
            lme.T, α_0=self.alpha0, max_iter=self.max_iter, tolerance=self.tol
        )
        out = fit.get_result()
        f1, f0 = float(fit.F1()), float(fit.F0())

        return GroupBMSResult(
            alpha=np.asarray(fit.α, dtype=float).ravel(),
            expected_frequencies=np.asarray(out.frequency_mean, dtype=float),
            exceedance_probabilities=np.asarray(
                out.exceedance_probability, dtype=float
            ),
            protected_exceedance_probabilities=np.asarray(
                out.protected_exceedance_probability, dtype=float
            ),
            bor=float(expit(f0 - f1)),
            attributions=np.asarray(out.attribution, dtype=float).T,
            free_energy=f1,
            null_free_energy=f0,
        )


def group_bms(
    evidence: np.ndarray,
    backend: GroupBMS | None = None,
    model_names: Sequence[str] | None = None,
) -> GroupBMSResult:
    """
    Group Bayesian model selection.

    Parameters
    ----------
    evidence : np.ndarray, shape (n_subjects, n_models)
        Log evidence or rescaled AIC/BIC.
    backend : GroupBMS | None
        Implementation to use; defaults to VariationalGroupBMS().
    model_names : sequence of str | None
        Attached to the result for reporting.

    Returns
    -------
    GroupBMSResult
    """
    backend = backend if backend is not None else VariationalGroupBMS()
    result = backend(np.asarray(evidence, dtype=float))
    if model_names is not None:
        names = tuple(model_names)
        if len(names) != len(result.alpha):
            raise ValueError(
                f"got {len(names)} model names for {len(result.alpha)} models"
            )
        result = replace(result, model_names=names)
    return result
