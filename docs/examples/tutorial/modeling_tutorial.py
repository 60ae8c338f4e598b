"""
Modeling tutorial: fit, compare and select psychometric models
--------------------------------------------------------------

This script walks through a complete model-comparison pipeline on
binary-choice (left / right) data:

1. Simulate one subject from a stationary psychometric function
   (or load a ``*_leftright.mat`` dataset with ``load_trials_mat``).
2. Fit the stationary model by maximum likelihood (Nelder-Mead with
   restarts, L-BFGS-B and BADS) and plot the fit.
3. Fit the non-stationary model, whose spread drifts from sigma1 to sigma2
   over the session, and compare both with AIC / BIC.
4. Simulate a population (16 stationary + 8 non-stationary subjects), fit
   every subject under both models, and run group Bayesian model selection
   on the rescaled criteria.
5. Fit both models in a Bayesian way (Laplace and VBMC) and compare their
   log marginal likelihoods.

For each trial, the models compute:
    p(right | x) = lambda / 2 + (1 - lambda) * Phi((x - mu) / sigma)

and the dataset likelihood is \Prod_t p(r_t | x_t, theta).

Note:
- Population parameters are drawn from a narrower box than the fitting
  plausible box: mu in [-5, 5], sigma in [1, 5], lapse in [0, 0.05].
- Model recovery fits are warm-started from the generating parameters, so
  this is a check of identifiability rather than of the optimizer.
- With 10000 trials per subject the recovery step takes a few minutes;
  lower N_TRIALS for a quick run. VBMC takes a minute or two per model.
"""

from __future__ import annotations

import dataclasses
import math
import os
import sys

import jax.random as jr
import matplotlib.pyplot as plt
import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../src")))
# --8<-- [start:imports]
from psyfit.comparison import compare_models
from psyfit.inference import (
    BADSFitter,
    LaplaceApproximation,
    LBFGSBFitter,
    MultiStartFitter,
    NelderMeadFitter,
    VBMCInference,
)
from psyfit.model import NonStationaryPsychometric, StationaryPsychometric
from psyfit.simulation import (
    PopulationConfig,
    run_model_recovery,
    simulate_mixed_population,
    simulate_subject,
)
from psyfit.utils import (
    print_bms_summary,
    print_comparison_table,
    print_fit_summary,
)

# --8<-- [end:imports]

PLOTS_DIR = os.path.join(os.path.dirname(__file__), "plots")
N_TRIALS = 10_000
N_SUBJECTS_STATIONARY = 16
N_SUBJECTS_NONSTATIONARY = 8


def generating_bounds(model):
    """Model bounds with the plausible box narrowed for simulation."""
    n_spreads = model.n_params - 2
    return dataclasses.replace(
        model.bounds,
        plb=[-5.0] + [math.log(1.0)] * n_spreads + [0.0],
        pub=[5.0] + [math.log(5.0)] * n_spreads + [0.05],
    )


def plot_fit(data, model, params, path):
    """Scatter the responses (jittered) and overlay the fitted curve."""
    stimuli, responses = data.to_numpy()
    jitter = 0.02 * np.asarray(jr.normal(jr.PRNGKey(0), stimuli.shape))
    grid = np.linspace(stimuli.min(), stimuli.max(), 301)

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.scatter(stimuli, responses - 1 + jitter, s=4, c="k", alpha=0.3)
    ax.plot(grid, model.predict(params, grid, regime_weights=np.zeros_like(grid)), lw=2)
    ax.set_xlabel("stimulus")
    ax.set_ylabel("p(right)")
    ax.set_title(f"{model.name} fit")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def main():
    os.makedirs(PLOTS_DIR, exist_ok=True)
    key = jr.PRNGKey(0)
    key, k_subject, k_fit, k_pop, k_vbmc = jr.split(key, 5)

    # ---------- 1. One subject ----------
    # --8<-- [start:data]
    stationary = StationaryPsychometric()
    subject = simulate_subject(
        stationary,
        k_subject,
        config=PopulationConfig(n_trials=500),
        params=[2.0, math.log(5.0), 0.03],
    )
    data = subject.data
    # --8<-- [end:data]

    # ---------- 2. Fit the stationary model ----------
    # --8<-- [start:fit]
    fitter = MultiStartFitter(NelderMeadFitter(), n_starts=5)
    fit_stat = fitter.fit(stationary, data, key=k_fit)
    print_fit_summary(stationary, fit_stat)
    # --8<-- [end:fit]
    plot_fit(data, stationary, fit_stat.params, os.path.join(PLOTS_DIR, "stationary_fit.png"))

    # Same problem with a gradient-based optimizer and with BADS
    # --8<-- [start:optimizers]
    x0 = stationary.init_params(k_fit)
    for local in (LBFGSBFitter(), BADSFitter()):
        print_fit_summary(stationary, local.fit(stationary, data, x0=x0))
    # --8<-- [end:optimizers]

    # ---------- 3. Non-stationary model and AIC / BIC ----------
    # --8<-- [start:compare]
    nonstationary = NonStationaryPsychometric(schedule="linear")
    fit_ns = fitter.fit(nonstationary, data, key=k_fit)
    print_fit_summary(nonstationary, fit_ns)
    print_comparison_table(
        compare_models({"stationary": fit_stat, "nonstationary": fit_ns})
    )
    # --8<-- [end:compare]

    # ---------- 4. Population and group BMS ----------
    # --8<-- [start:recovery]
    population = simulate_mixed_population(
        {
            "stationary": (
                stationary,
                generating_bounds(stationary),
                N_SUBJECTS_STATIONARY,
            ),
            "nonstationary": (
                nonstationary,
                generating_bounds(nonstationary),
                N_SUBJECTS_NONSTATIONARY,
            ),
        },
        key=k_pop,
        config=PopulationConfig(n_trials=N_TRIALS),
    )
    recovery = run_model_recovery(
        population,
        {"stationary": stationary, "nonstationary": nonstationary},
        fitter="nelder-mead",
        n_jobs=-1,
    )
    for criterion in ("aic", "bic"):
        print(f"\n--- rescaled {criterion.upper()} ---")
        print(f"per-subject accuracy: {recovery.accuracy(criterion):.2f}")
        print_bms_summary(recovery.group_bms(criterion))
    # --8<-- [end:recovery]

    # Evidence difference per subject, colored by the generating model
    diff = recovery.bic_rescaled[:, 0] - recovery.bic_rescaled[:, 1]
    colors = ["tab:blue" if t == "stationary" else "tab:orange" for t in recovery.true_labels]
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(np.arange(len(diff)), diff, color=colors)
    ax.axhline(0.0, color="k", lw=0.8)
    ax.set_xlabel("subject")
    ax.set_ylabel("BIC_res(stationary) - BIC_res(nonstationary)")
    fig.tight_layout()
    fig.savefig(os.path.join(PLOTS_DIR, "recovery_bic_difference.png"), dpi=150)
    plt.close(fig)

    # ---------- 5. Bayesian fits of the single subject ----------
    # --8<-- [start:bayesian]
    laplace = LaplaceApproximation()
    vbmc = VBMCInference()
    print("\nlog marginal likelihood (Laplace / VBMC ELBO):")
    for model, fit in ((stationary, fit_stat), (nonstationary, fit_ns)):
        approx = laplace.from_fit(model, data, fit)
        post = vbmc.fit(model, data, key=k_vbmc)
        print(
            f"  {model.name:<14s} {approx.log_marginal_likelihood:10.3f} "
            f"{post.log_marginal_likelihood:10.3f} "
            f"(+/- {post.log_marginal_likelihood_sd:.3f})"
        )
    # --8<-- [end:bayesian]


if __name__ == "__main__":
    main()
