"""
errors.py
---------

Exception and warning types raised by psyfit.

- InvalidParameterDomainError : parameters outside the hard bounds.
- DimensionMismatchError : parameter vector of the wrong length.
- ConvergenceWarning : optimizer stopped without meeting its criterion.

Degenerate likelihoods (a trial with probability exactly 0) are not errors:
the objective returns +inf and the optimizer carries on.
"""

from __future__ import annotations


class PsyfitError(Exception):
    """Base class for psyfit errors."""


class InvalidParameterDomainError(PsyfitError, ValueError):
    """Parameter vector lies outside the admissible box [lb, ub]."""


class DimensionMismatchError(PsyfitError, ValueError):
    """Parameter vector length disagrees with the model."""


class ConvergenceWarning(UserWarning):
    """Optimizer terminated without converging."""
