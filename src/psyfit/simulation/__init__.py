"""
simulation
==========

Synthetic data for model recovery studies.

- simulate_subject / simulate_population / simulate_mixed_population
- run_model_recovery : fit every subject under every candidate model
"""

from .population import (
    PopulationConfig,
    SimulatedSubject,
    simulate_mixed_population,
    simulate_population,
    simulate_subject,
)
from .recovery import ModelRecoveryResult, run_model_recovery

__all__ = [
    "PopulationConfig",
    "SimulatedSubject",
    "simulate_subject",
    "simulate_population",
    "simulate_mixed_population",
    "ModelRecoveryResult",
    "run_model_recovery",
]
