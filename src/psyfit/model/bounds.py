"""
bounds.py
---------

Box constraints for parameter vectors.

Every parameter vector travels with two nested boxes:
- hard bounds [lb, ub]: the admissible domain, enforced by fitters.
- plausible bounds [plb, pub]: a tighter sub-box used only to draw
  starting points (and by BADS / VBMC to scale their search).
"""

from __future__ import annotations

from dataclasses import dataclass, field

import jax
import jax.random as jr
import numpy as np

from psyfit.errors import DimensionMismatchError, InvalidParameterDomainError


@dataclass(frozen=True)
class ParameterBounds:
    """
    Hard and plausible bounds for a parameter vector.

    Attributes
    ----------
    lb, ub : np.ndarray
        Hard lower / upper bounds.
    plb, pub : np.ndarray
        Plausible lower / upper bounds, lb <= plb <= pub <= ub.
    names : tuple[str, ...]
        Parameter names, used in error messages and printed summaries.

    Examples
    --------
    >>> bounds = ParameterBounds(
    ...     lb=[-30, np.log(0.1), 0],
    ...     ub=[30, np.log(60), 1],
    ...     plb=[-10, np.log(1), 0.01],
    ...     pub=[10, np.log(10), 0.1],
    ...     names=("mu", "log_sigma", "lapse"),
    ... )
    """

    lb: np.ndarray
    ub: np.ndarray
    plb: np.ndarray
    pub: np.ndarray
    names: tuple[str, ...] = field(default=())

    def __post_init__(self):
        """Convert to float arrays and validate ordering."""
        arrays = {}
        for name in ("lb", "ub", "plb", "pub"):
            arr = np.atleast_1d(np.asarray(getattr(self, name), dtype=float))
            if arr.ndim != 1:
                raise ValueError(f"{name} must be 1-D, got shape {arr.shape}")
            arrays[name] = arr
            object.__setattr__(self, name, arr)

        dims = {name: arr.shape[0] for name, arr in arrays.items()}
        if len(set(dims.values())) != 1:
            raise DimensionMismatchError(f"bounds have inconsistent lengths: {dims}")

        names = tuple(self.names) or tuple(f"x{i}" for i in range(dims["lb"]))
        if len(names) != dims["lb"]:
            raise DimensionMismatchError(
                f"got {len(names)} names for {dims['lb']} parameters"
            )
        object.__setattr__(self, "names", names)

        lb, ub, plb, pub = arrays["lb"], arrays["ub"], arrays["plb"], arrays["pub"]
        if np.any(np.isnan(lb)) or np.any(np.isnan(ub)):
            raise ValueError("bounds must not contain NaN")
        if not (np.all(lb <= plb) and np.all(plb <= pub) and np.all(pub <= ub)):
            raise ValueError("bounds must satisfy lb <= plb <= pub <= ub")
        if not (np.all(np.isfinite(plb)) and np.all(np.isfinite(pub))):
            raise ValueError("plausible bounds must be finite")

    @property
    def dim(self) -> int:
        """Number of parameters."""
        return int(self.lb.shape[0])

    def _as_vector(self, params) -> np.ndarray:
        x = np.asarray(params, dtype=float)
        if x.ndim != 1 or x.shape[0] != self.dim:
            raise DimensionMismatchError(
                f"expected {self.dim} parameters {self.names}, got shape {x.shape}"
            )
        return x

    def contains(self, params) -> bool:
        """True if lb <= params <= ub component-wise."""
        x = self._as_vector(params)
        return bool(np.all(x >= self.lb) and np.all(x <= self.ub))

    def check(self, params) -> np.ndarray:
        """
        Return ``params`` as an array, raising if outside [lb, ub].

        Raises
        ------
        DimensionMismatchError
            Wrong number of parameters.
        InvalidParameterDomainError
            Any component outside the hard bounds (or NaN).
        """
        x = self._as_vector(params)
        outside = ~((x >= self.lb) & (x <= self.ub))
        if np.any(outside):
            details = ", ".join(
                f"{self.names[i]}={x[i]:.6g} not in [{self.lb[i]:.6g}, {self.ub[i]:.6g}]"
                for i in np.flatnonzero(outside)
            )
            raise InvalidParameterDomainError(f"parameters out of bounds: {details}")
        return x

    def clip(self, params) -> np.ndarray:
        """Project ``params`` onto [lb, ub]."""
        return np.clip(self._as_vector(params), self.lb, self.ub)

    def sample_plausible(self, key: jax.Array, num: int | None = None) -> np.ndarray:
        """
        Draw starting points uniformly from the plausible box.

        Parameters
        ----------
        key : jax.Array
            PRNG key.
        num : int | None
            Number of points. None returns a single vector of shape (dim,).

        Returns
        -------
        np.ndarray
            Shape (dim,) or (num, dim).
        """
        shape = (self.dim,) if num is None else (num, self.dim)
        u = np.asarray(jr.uniform(key, shape, dtype=float))
        return self.plb + u * (self.pub - self.plb)
