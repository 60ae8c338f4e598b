"""
recovery.py
-----------

Model recovery: fit every simulated subject under every candidate model.

Each (subject, candidate) fit is warm-started from the subject's generating
parameters mapped into the candidate's parameter space (see
``psyfit.model.convert_params``). The resulting NLL matrix feeds the
rescaled AIC / BIC matrices and group Bayesian model selection.

All PRNG keys are split before any fit runs, so the outcome does not depend
on ``n_jobs``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import jax
import jax.random as jr
import numpy as np
from joblib import Parallel, delayed

from psyfit.comparison.bms import GroupBMS, GroupBMSResult, group_bms
from psyfit.comparison.criteria import evidence_matrix
from psyfit.inference import Fitter, get_fitter
from psyfit.inference.result import FitResult
from psyfit.model.base import PsychometricModel
from psyfit.model.psychometric import convert_params
from psyfit.utils.rng import ensure_key

from .population import SimulatedSubject


@dataclass(frozen=True)
class ModelRecoveryResult:
    """
    Fits of a simulated population under a set of candidate models.

    Attributes
    ----------
    nll : np.ndarray, shape (n_subjects, n_models)
    n_params : np.ndarray, shape (n_models,)
    n_trials : np.ndarray, shape (n_subjects,)
    model_names : tuple[str, ...]
        Candidate labels, column order.
    true_labels : tuple[str, ...]
        Generating label of each subject, row order.
    fits : list[list[FitResult]]
        fits[i][j] is subject i under candidate j.
    """

    nll: np.ndarray
    n_params: np.ndarray
    n_trials: np.ndarray
    model_names: tuple[str, ...]
    true_labels: tuple[str, ...]
    fits: list[list[FitResult]] = field(default_factory=list, compare=False, repr=False)

    @property
    def aic_rescaled(self) -> np.ndarray:
        """LL - k, subjects x models."""
        return evidence_matrix(self.nll, self.n_params, self.n_trials, "aic")

    @property
    def bic_rescaled(self) -> np.ndarray:
        """LL - (k/2) log n, subjects x models."""
        return evidence_matrix(self.nll, self.n_params, self.n_trials, "bic")

    def selected(self, criterion: str = "aic") -> tuple[str, ...]:
        """Best candidate per subject under a rescaled criterion."""
        evidence = evidence_matrix(self.nll, self.n_params, self.n_trials, criterion)
        return tuple(self.model_names[j] for j in np.argmax(evidence, axis=1))

    def accuracy(self, criterion: str = "aic") -> float:
        """Fraction of subjects whose generating model is selected."""
        picks = self.selected(criterion)
        hits = [p == t for p, t in zip(picks, self.true_labels)]
        return float(np.mean(hits)) if hits else float("nan")

    def group_bms(
        self, criterion: str = "aic", backend: GroupBMS | None = None
    ) -> GroupBMSResult:
        """Group BMS on the rescaled AIC or BIC matrix."""
        evidence = evidence_matrix(self.nll, self.n_params, self.n_trials, criterion)
        return group_bms(evidence, backend=backend, model_names=self.model_names)


def _fit_one(
    fitter: Fitter,
    subject: SimulatedSubject,
    candidate: PsychometricModel,
    key: jax.Array,
) -> FitResult:
    x0 = convert_params(subject.true_params, subject.model, candidate)
    x0 = candidate.bounds.clip(x0)
    return fitter.fit(candidate, subject.data, x0=x0, key=key)


def run_model_recovery(
    population: Sequence[SimulatedSubject],
    candidates: Mapping[str, PsychometricModel],
    fitter: Fitter | str = "nelder-mead",
    n_jobs: int = 1,
    key: jax.Array | int | None = None,
    fitter_config: dict | None = None,
) -> ModelRecoveryResult:
    """
    Fit every subject under every candidate model.

    Parameters
    ----------
    population : sequence of SimulatedSubject
    candidates : Mapping[str, PsychometricModel]
        Candidate models keyed by label (column order of the result).
    fitter : Fitter | str, default="nelder-mead"
        Fitter instance or registry key.
    n_jobs : int, default=1
        joblib workers (threads); -1 uses all cores.
    key : jax.Array | int | None
        PRNG key passed to fitters that draw random numbers.
    fitter_config : dict | None
        Keyword arguments for a string ``fitter``.

    Returns
    -------
    ModelRecoveryResult
    """
    if not candidates:
        raise ValueError("at least one candidate model is required")
    if isinstance(fitter, str):
        fitter = get_fitter(fitter, **(fitter_config or {}))
    elif fitter_config is not None:
        raise ValueError("Cannot pass fitter_config with Fitter instance")

    names = tuple(candidates.keys())
    models = tuple(candidates.values())
    n_subjects, n_models = len(population), len(models)

    keys = jr.split(ensure_key(key), max(n_subjects * n_models, 1))
    jobs = [
        delayed(_fit_one)(fitter, subject, models[j], keys[i * n_models + j])
        for i, subject in enumerate(population)
        for j in range(n_models)
    ]
    flat = Parallel(n_jobs=n_jobs, prefer="threads")(jobs)
    fits = [flat[i * n_models : (i + 1) * n_models] for i in range(n_subjects)]

    nll = np.array([[f.nll for f in row] for row in fits], dtype=float)
    return ModelRecoveryResult(
        nll=nll.reshape(n_subjects, n_models),
        n_params=np.array([m.n_params for m in models]),
        n_trials=np.array([len(s.data) for s in population]),
        model_names=names,
        true_labels=tuple(s.label for s in population),
        fits=fits,
    )
