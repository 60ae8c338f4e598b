"""
diagnostics.py
--------------

Human-readable reports for fits, model comparisons and group BMS.

Provides tools for:
- Parameter summaries of a maximum-likelihood fit (log-spreads also shown
  on the natural scale)
- Information-criteria tables
- Group Bayesian model selection summaries

Examples
--------
>>> from psyfit.utils.diagnostics import print_fit_summary
>>> result = model.fit(data)
>>> print_fit_summary(model, result)
stationary fit (n = 500, k = 3)
  NLL: 212.417
  mu:        1.982
  log_sigma: 1.604   (sigma = 4.973)
  lapse:     0.031
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from psyfit.comparison.bms import GroupBMSResult
    from psyfit.comparison.criteria import ComparisonRecord
    from psyfit.inference.result import FitResult
    from psyfit.model.base import PsychometricModel


def fit_summary(model: PsychometricModel, result: FitResult) -> dict[str, float]:
    """
    Fitted parameters keyed by name.

    Parameters named ``log_*`` are also reported exponentiated under the
    name without the prefix.

    Returns
    -------
    dict[str, float]
    """
    summary: dict[str, float] = {}
    for name, value in zip(model.param_names, result.params):
        summary[name] = float(value)
        if name.startswith("log_"):
            summary[name[len("log_") :]] = math.exp(float(value))
    return summary


def print_fit_summary(model: PsychometricModel, result: FitResult) -> None:
    """Print a maximum-likelihood fit."""
    print(f"{result.model_name} fit (n = {result.n_trials}, k = {result.n_params})")
    print(f"  NLL: {result.nll:.3f}")
    if not result.converged:
        print(f"  WARNING: not converged ({result.message})")

    width = max(len(name) for name in model.param_names) + 1
    for name, value in zip(model.param_names, result.params):
        line = f"  {name + ':':<{width}} {float(value):.3f}"
        if name.startswith("log_"):
            line += f"   ({name[len('log_') :]} = {math.exp(float(value)):.3f})"
        print(line)


def print_comparison_table(records: Mapping[str, ComparisonRecord]) -> None:
    """
    Print LL, AIC, BIC and rescaled criteria, one row per model.

    Examples
    --------
    >>> print_comparison_table(compare_models({"stationary": r1, "nonstationary": r2}))
    model               LL       AIC       BIC   AIC_res   BIC_res
    stationary     -212.42    430.83    443.48   -215.42   -221.74
    nonstationary  -211.90    431.80    448.66   -215.90   -224.33
    """
    width = max([len("model")] + [len(name) for name in records]) + 2
    header = f"{'model':<{width}}" + "".join(
        f"{col:>10}" for col in ("LL", "AIC", "BIC", "AIC_res", "BIC_res")
    )
    print(header)
    for name, rec in records.items():
        values = (
            rec.log_likelihood,
            rec.aic,
            rec.bic,
            rec.aic_rescaled,
            rec.bic_rescaled,
        )
        print(f"{name:<{width}}" + "".join(f"{v:>10.2f}" for v in values))


def print_bms_summary(result: GroupBMSResult) -> None:
    """Print alpha, expected frequencies, xp and pxp per model, then BOR."""
    print("Group Bayesian model selection:\n")
    for name, stats in result.as_dict().items():
        print(f"{name}:")
        print(f"  alpha: {stats['alpha']:.3f}")
        print(f"  E[r]:  {stats['expected_frequency']:.3f}")
        print(f"  xp:    {stats['exceedance_probability']:.3f}")
        print(f"  pxp:   {stats['protected_exceedance_probability']:.3f}")
    print(f"\nBOR: {result.bor:.4f}")
