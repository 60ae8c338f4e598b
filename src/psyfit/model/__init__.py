"""
psyfit.model
============

Model-layer API: everything model-related in one place.

Includes
--------
- ParameterBounds (hard and plausible boxes)
- PsychometricModel (abstract base)
- StationaryPsychometric, NonStationaryPsychometric

All likelihood code uses JAX arrays (jax.numpy as jnp) so objectives can be
jitted and differentiated.

Typical usage
-------------
    from psyfit.model import StationaryPsychometric, NonStationaryPsychometric
"""

from .base import PsychometricModel
from .bounds import ParameterBounds
from .psychometric import (
    SCHEDULES,
    NonStationaryPsychometric,
    StationaryPsychometric,
    convert_params,
)

# Registry for string-based model selection
MODELS = {
    "stationary": StationaryPsychometric,
    "nonstationary": NonStationaryPsychometric,
}

__all__ = [
    "ParameterBounds",
    "PsychometricModel",
    "StationaryPsychometric",
    "NonStationaryPsychometric",
    "convert_params",
    "SCHEDULES",
    "MODELS",
]
