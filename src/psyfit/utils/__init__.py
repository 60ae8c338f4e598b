"""
utils
=====

Shared utility functions and helpers for psyfit.

This subpackage provides:
- diagnostics : printed summaries of fits, comparisons and group BMS.
- rng : random number handling for reproducibility.
"""

from .diagnostics import (
    fit_summary,
    print_bms_summary,
    print_comparison_table,
    print_fit_summary,
)
from .rng import ensure_key, seed, split

__all__ = [
    # diagnostics
    "fit_summary",
    "print_fit_summary",
    "print_comparison_table",
    "print_bms_summary",
    # rng
    "seed",
    "split",
    "ensure_key",
]
