"""
multistart.py
-------------

Multiple random restarts around a local fitter.

Local optimizers only find a local optimum. MultiStartFitter reruns a
fitter from several starting points drawn uniformly in the plausible box
(one independent PRNG subkey per start) and keeps the lowest NLL.
"""

from __future__ import annotations

from typing import Any

import jax
import numpy as np

from psyfit.data.dataset import TrialData
from psyfit.model.base import PsychometricModel
from psyfit.model.bounds import ParameterBounds
from psyfit.utils.rng import ensure_key, split

from .base import Fitter, OptimizeOutcome
from .objective import NegativeLogLikelihood
from .result import FitResult


class MultiStartFitter(Fitter):
    """
    Best-of-N wrapper around another fitter.

    Parameters
    ----------
    fitter : Fitter | str, default="nelder-mead"
        Local fitter (instance or registry key).
    n_starts : int, default=5
        Number of runs. A user-supplied x0 is used for the first run.
    fitter_config : dict | None
        Keyword arguments when ``fitter`` is a string.

    Attributes
    ----------
    runs : list[FitResult]
        All runs of the last fit(), in start order.
    """

    def __init__(
        self,
        fitter: Fitter | str = "nelder-mead",
        n_starts: int = 5,
        fitter_config: dict | None = None,
    ) -> None:
        if n_starts < 1:
            raise ValueError(f"n_starts must be positive, got {n_starts}")
        if isinstance(fitter, str):
            from psyfit.inference import get_fitter

            fitter = get_fitter(fitter, **(fitter_config or {}))
        elif fitter_config is not None:
            raise ValueError("Cannot pass fitter_config with Fitter instance")
        self.fitter = fitter
        self.n_starts = int(n_starts)
        self.name = f"multistart({fitter.name})"
        self.runs: list[FitResult] = []

    def minimize(
        self,
        objective: NegativeLogLikelihood,
        x0: np.ndarray,
        bounds: ParameterBounds,
    ) -> OptimizeOutcome:
        """Single run of the wrapped fitter."""
        return self.fitter.minimize(objective, x0, bounds)

    def fit(
        self,
        model: PsychometricModel,
        data: TrialData,
        bounds: ParameterBounds | None = None,
        x0: Any | None = None,
        key: jax.Array | int | None = None,
    ) -> FitResult:
        """
        Fit from ``n_starts`` starting points and return the best run.

        Returns
        -------
        FitResult
            Run with the lowest NLL (first one on ties).
        """
        bounds = bounds if bounds is not None else model.bounds
        keys = split(ensure_key(key), self.n_starts)
        runs = []
        for i in range(self.n_starts):
            start = x0 if (i == 0 and x0 is not None) else None
            runs.append(
                self.fitter.fit(model, data, bounds=bounds, x0=start, key=keys[i])
            )
        # one fitter may serve several threads; publish the finished list only
        self.runs = runs
        return min(runs, key=lambda r: r.nll)
