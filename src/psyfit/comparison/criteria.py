"""
criteria.py
-----------

Information criteria for model comparison.

For a fit with negative log-likelihood NLL, k parameters and n trials:

    LL             = -NLL
    AIC            = -2 LL + 2 k
    BIC            = -2 LL + k log n
    rescaled AIC   = LL - k
    rescaled BIC   = LL - (k / 2) log n

Lower AIC/BIC is better. The rescaled criteria live on the log model
evidence scale, where higher is better; they are the inputs to group
Bayesian model selection. Do not mix the two conventions.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from psyfit.inference.result import FitResult

CRITERIA = ("aic", "bic", "aic_rescaled", "bic_rescaled", "log_likelihood")
LOWER_IS_BETTER = {"aic": True, "bic": True}


@dataclass(frozen=True)
class ComparisonRecord:
    """Information criteria of one model on one dataset."""

    log_likelihood: float
    aic: float
    bic: float
    aic_rescaled: float
    bic_rescaled: float
    n_params: int
    n_trials: int


def information_criteria(nll: float, k: int, n: int) -> ComparisonRecord:
    """
    Compute LL, AIC, BIC and their rescaled versions.

    Parameters
    ----------
    nll : float
        Negative log-likelihood at the optimum.
    k : int
        Number of free parameters.
    n : int
        Number of trials.

    Returns
    -------
    ComparisonRecord

    Examples
    --------
    >>> rec = information_criteria(nll=50.0, k=3, n=100)
    >>> rec.aic, round(rec.bic, 4)
    (106.0, 113.8155)
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    ll = -float(nll)
    log_n = math.log(n)
    return ComparisonRecord(
        log_likelihood=ll,
        aic=-2.0 * ll + 2.0 * k,
        bic=-2.0 * ll + k * log_n,
        aic_rescaled=ll - k,
        bic_rescaled=ll - k / 2.0 * log_n,
        n_params=int(k),
        n_trials=int(n),
    )


def compare_models(results: Mapping[str, FitResult]) -> dict[str, ComparisonRecord]:
    """
    Information criteria for several fits of the same dataset.

    Parameters
    ----------
    results : Mapping[str, FitResult]
        Fit results keyed by model name.

    Returns
    -------
    dict[str, ComparisonRecord]
        Same keys, same order.

    Raises
    ------
    ValueError
        If the fits were made on datasets of different sizes.
    """
    sizes = {r.n_trials for r in results.values()}
    if len(sizes) > 1:
        raise ValueError(f"fits use different sample sizes: {sorted(sizes)}")
    return {name: r.criteria() for name, r in results.items()}


def best_model(records: Mapping[str, ComparisonRecord], criterion: str = "aic") -> str:
    """
    Name of the best-supported model under ``criterion``.

    AIC/BIC are minimized; rescaled criteria and LL are maximized.
    """
    if criterion not in CRITERIA:
        raise ValueError(
            f"Unknown criterion: '{criterion}'. Available: {', '.join(CRITERIA)}"
        )
    values = {name: getattr(rec, criterion) for name, rec in records.items()}
    if LOWER_IS_BETTER.get(criterion, False):
        return min(values, key=values.get)
    return max(values, key=values.get)


def evidence_matrix(
    nll: np.ndarray,
    k: Sequence[int],
    n: int | Sequence[int],
    criterion: str = "aic",
) -> np.ndarray:
    """
    Subjects x models matrix of rescaled criteria.

    Parameters
    ----------
    nll : np.ndarray, shape (n_subjects, n_models)
        Negative log-likelihoods.
    k : sequence of int, length n_models
        Parameter counts per model.
    n : int or sequence of int, length n_subjects
        Trials per subject.
    criterion : {"aic", "bic"}
        Which rescaled criterion to return.

    Returns
    -------
    np.ndarray, shape (n_subjects, n_models)
        LL - k (AIC) or LL - (k/2) log n (BIC).
    """
    nll = np.atleast_2d(np.asarray(nll, dtype=float))
    k = np.asarray(k, dtype=float)
    if k.shape != (nll.shape[1],):
        raise ValueError(f"k has shape {k.shape}, expected ({nll.shape[1]},)")
    n = np.broadcast_to(np.asarray(n, dtype=float), (nll.shape[0],))
    ll = -nll
    if criterion == "aic":
        return ll - k[None, :]
    if criterion == "bic":
        return ll - 0.5 * k[None, :] * np.log(n)[:, None]
    raise ValueError(f"Unknown criterion: '{criterion}'. Available: aic, bic")
