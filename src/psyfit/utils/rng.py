"""
rng.py
------

Random number utilities for psyfit.

All stochastic components (plausible-box initialization, population
simulation, multi-start fitting) take an explicit JAX PRNG key. Nothing in
the package seeds or reads global random state.

Examples
--------
>>> from psyfit.utils.rng import seed, split
>>> key = seed(0)
>>> k1, k2 = split(key)
"""

from __future__ import annotations

import jax
import jax.random as jr
import numpy as np


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    jax.Array
        Stacked array of ``num`` independent keys.
    """
    return jr.split(key, num=num)


def ensure_key(key: jax.Array | int | None) -> jax.Array:
    """Accept a PRNG key or an integer seed (None -> seed 0)."""
    if key is None:
        return seed(0)
    if isinstance(key, (int, np.integer)):
        return seed(int(key))
    return key

