"""
psyfit
======

Psychometric model fitting and model comparison.

This package fits lapse-corrected cumulative-Gaussian psychometric functions
to binary-choice data, compares a stationary model against a non-stationary
one whose spread changes across the session, and runs group Bayesian model
selection over simulated or real populations.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. Models (model/psychometric.py):
   - StationaryPsychometric: theta = (mu, ln sigma, lambda).
   - NonStationaryPsychometric: theta = (mu, ln sigma1, ln sigma2, lambda),
     mixing the two spreads with per-trial regime weights.
   - ParameterBounds: hard box [lb, ub] and plausible box [plb, pub].

2. Fitting (inference/):
   - NegativeLogLikelihood: explicit objective object (jitted NLL + gradient).
   - NelderMeadFitter, LBFGSBFitter, ProjectedGradientFitter, BADSFitter,
     MultiStartFitter: bounded maximum likelihood -> FitResult.
   - LaplaceApproximation, VBMCInference: approximate posterior and log
     marginal likelihood -> BayesianFitResult.

3. Comparison (comparison/):
   - information_criteria / compare_models: AIC, BIC, rescaled AIC / BIC.
   - group_bms: random-effects model selection (alpha, E[r], xp, pxp, BOR).

4. Simulation (simulation/):
   - simulate_population / simulate_mixed_population: synthetic subjects.
   - run_model_recovery: fit every subject under every candidate.

Unified import style
--------------------
Top-level:
  from psyfit import StationaryPsychometric, NonStationaryPsychometric, TrialData
  from psyfit import NelderMeadFitter, compare_models, group_bms

Subpackages:
  from psyfit.model import ParameterBounds, convert_params
  from psyfit.inference import FITTERS, get_fitter, LaplaceApproximation
  from psyfit.simulation import PopulationConfig, run_model_recovery
  from psyfit.utils import seed, split, print_fit_summary

Data flow
---------
- A TrialData object (psyfit.data) holds stimuli and responses in {1, 2}.
- model.fit(data, inference="nelder-mead") minimizes
      NLL(theta) = -sum_t log p(r_t | x_t, theta)
  inside the hard bounds and returns a FitResult.
- FitResult.criteria() gives the information criteria; the rescaled ones
  (log-evidence scale) of many subjects form the matrix fed to group_bms.

Precision
---------
JAX 64-bit mode is enabled on import; likelihood sums over 10^4 trials
need double precision.

----------------------------------------------------------------------
"""

import jax

jax.config.update("jax_enable_x64", True)

# Re-export subpackages for unified import style (e.g., psyfit.model, psyfit.inference)
from . import comparison as comparison  # noqa: E402
from . import data as data  # noqa: E402
from . import inference as inference  # noqa: E402
from . import model as model  # noqa: E402
from . import simulation as simulation  # noqa: E402
from . import utils as utils  # noqa: E402

# Comparison
from .comparison import (  # noqa: E402
    GroupBMSResult,
    VariationalGroupBMS,
    compare_models,
    group_bms,
    information_criteria,
)

# Data
from .data import TrialData, load_trials_csv, load_trials_mat  # noqa: E402
from .errors import (  # noqa: E402
    ConvergenceWarning,
    DimensionMismatchError,
    InvalidParameterDomainError,
    PsyfitError,
)

# Inference
from .inference import (  # noqa: E402
    BADSFitter,
    FitResult,
    LaplaceApproximation,
    LBFGSBFitter,
    MultiStartFitter,
    NegativeLogLikelihood,
    NelderMeadFitter,
    ProjectedGradientFitter,
    VBMCInference,
)

# Models
from .model import (  # noqa: E402
    NonStationaryPsychometric,
    ParameterBounds,
    StationaryPsychometric,
)

# Simulation
from .simulation import (  # noqa: E402
    PopulationConfig,
    run_model_recovery,
    simulate_mixed_population,
    simulate_population,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "StationaryPsychometric",
    "NonStationaryPsychometric",
    "ParameterBounds",
    # Data
    "TrialData",
    "load_trials_csv",
    "load_trials_mat",
    # Inference
    "NegativeLogLikelihood",
    "FitResult",
    "NelderMeadFitter",
    "LBFGSBFitter",
    "ProjectedGradientFitter",
    "BADSFitter",
    "MultiStartFitter",
    "LaplaceApproximation",
    "VBMCInference",
    # Comparison
    "information_criteria",
    "compare_models",
    "group_bms",
    "GroupBMSResult",
    "VariationalGroupBMS",
    # Simulation
    "PopulationConfig",
    "simulate_population",
    "simulate_mixed_population",
    "run_model_recovery",
    # Errors
    "PsyfitError",
    "InvalidParameterDomainError",
    "DimensionMismatchError",
    "ConvergenceWarning",
    # Subpackages
    "model",
    "inference",
    "comparison",
    "simulation",
    "utils",
    "data",
]
