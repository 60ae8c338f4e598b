"""
io.py
-----

I/O utilities for saving and loading psyfit data.

Supports:
- CSV for human-readable trial logs (columns ``stimulus,response``)
- MATLAB .mat files in the layout of Acerbi, Dokka et al. (2018)
  heading-discrimination datasets (``*_causalinf_leftright.mat``)

Notes
-----
- Data is returned as TrialData (NumPy arrays).
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Union

import numpy as np
import scipy.io

from .dataset import TrialData

PathLike = Union[str, Path]


def save_trials_csv(data: TrialData, path: PathLike) -> None:
    """
    Save TrialData to a CSV file.

    Parameters
    ----------
    data : TrialData
    path : str or Path
    """
    stimuli, responses = data.to_numpy()
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["stimulus", "response"])
        for s, r in zip(stimuli, responses):
            writer.writerow([repr(float(s)), int(r)])


def load_trials_csv(path: PathLike) -> TrialData:
    """
    Load TrialData from a CSV file written by save_trials_csv.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    TrialData
    """
    stimuli, responses = [], []
    with open(path) as f:
        reader = csv.DictReader(f)
        for row in reader:
            stimuli.append(float(row["stimulus"]))
            responses.append(int(row["response"]))
    return TrialData(np.asarray(stimuli), np.asarray(responses, dtype=int))


def load_trials_mat(
    path: PathLike,
    variable: str = "comp_dataset",
    session: int = 1,
    stimulus_column: int = 1,
    response_column: int = 4,
) -> TrialData:
    """
    Load one session of a heading-discrimination dataset from a .mat file.

    The matrix stored under ``variable`` has one row per trial. Its first
    column is the session type (1 = vestibular-only); stimulus and response
    columns are zero-based indices into the row.

    Parameters
    ----------
    path : str or Path
        Path to the .mat file.
    variable : str, default="comp_dataset"
        Name of the trial matrix inside the file.
    session : int, default=1
        Session type to keep.
    stimulus_column, response_column : int
        Column indices of the stimulus (degrees) and response (1 or 2).

    Returns
    -------
    TrialData

    Raises
    ------
    KeyError
        If ``variable`` is not in the file.
    """
    contents = scipy.io.loadmat(path)
    if variable not in contents:
        raise KeyError(f"variable '{variable}' not found in {path}")
    table = np.asarray(contents[variable], dtype=float)
    rows = table[table[:, 0] == session]
    return TrialData(rows[:, stimulus_column], rows[:, response_column].astype(int))
