"""
psyfit.data
===========

submodule for handling psychophysics trial data.

Includes:
- dataset: TrialData container
- io: CSV and .mat loaders
"""

from .dataset import RESPONSE_NEGATIVE, RESPONSE_POSITIVE, TrialData
from .io import load_trials_csv, load_trials_mat, save_trials_csv

__all__ = [
    "TrialData",
    "RESPONSE_NEGATIVE",
    "RESPONSE_POSITIVE",
    "load_trials_csv",
    "load_trials_mat",
    "save_trials_csv",
]
