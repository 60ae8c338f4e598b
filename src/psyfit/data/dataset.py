"""
dataset.py
-----------

Core data container for psyfit.

defines:
- TrialData: ordered sequence of (stimulus, response) trials

Notes
-----
- Responses are categories 1 ("left", negative) and 2 ("right", positive),
  the two-column convention of the heading-discrimination datasets.
- Data is stored in NumPy arrays. Convert to jax.numpy (jnp) only inside
  likelihood evaluation.
- Trial order matters only for the non-stationary model, whose regime
  weights follow trial index.
"""

from __future__ import annotations

import numpy as np

RESPONSE_NEGATIVE = 1
RESPONSE_POSITIVE = 2


def _validate_responses(responses: np.ndarray) -> None:
    bad = ~np.isin(responses, (RESPONSE_NEGATIVE, RESPONSE_POSITIVE))
    if np.any(bad):
        raise ValueError(
            f"responses must be 1 or 2, got {np.unique(responses[bad]).tolist()}"
        )


class TrialData:
    """
    Container for binary-choice psychophysics trials.

    Attributes
    ----------
    stimuli : np.ndarray, shape (n_trials,)
        Stimulus values (e.g. heading direction in degrees).
    responses : np.ndarray, shape (n_trials,)
        Response categories in {1, 2}.
    """

    def __init__(
        self,
        stimuli: np.ndarray | None = None,
        responses: np.ndarray | None = None,
    ) -> None:
        stimuli = np.zeros(0) if stimuli is None else np.asarray(stimuli, dtype=float)
        responses = (
            np.zeros(0, dtype=int)
            if responses is None
            else np.asarray(responses).astype(int)
        )
        if stimuli.ndim != 1 or responses.ndim != 1:
            raise ValueError("stimuli and responses must be 1-D arrays")
        if stimuli.shape != responses.shape:
            raise ValueError(
                f"stimuli and responses differ in length: "
                f"{stimuli.shape[0]} vs {responses.shape[0]}"
            )
        _validate_responses(responses)
        self.stimuli = stimuli
        self.responses = responses

    def add_trial(self, stimulus: float, resp: int) -> None:
        """
        append a single trial.

        Parameters
        ----------
        stimulus : float
            Stimulus value
        resp : int
            Response category (1 or 2)
        """
        _validate_responses(np.asarray([resp]))
        self.stimuli = np.append(self.stimuli, float(stimulus))
        self.responses = np.append(self.responses, int(resp))

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Return stimuli, responses as numpy arrays.

        Returns
        -------
        stimuli : np.ndarray
        responses : np.ndarray
        """
        return np.array(self.stimuli), np.array(self.responses)

    @property
    def trials(self) -> list[tuple[float, int]]:
        """List of (stimulus, response) tuples."""
        return [(float(s), int(r)) for s, r in zip(self.stimuli, self.responses)]

    @property
    def positive(self) -> np.ndarray:
        """Boolean mask of positive (category 2) responses."""
        return self.responses == RESPONSE_POSITIVE

    @property
    def n_positive(self) -> int:
        """Number of positive responses."""
        return int(np.sum(self.positive))

    def __len__(self) -> int:
        """Return number of trials."""
        return int(self.stimuli.shape[0])

    def __repr__(self) -> str:
        return f"TrialData(n_trials={len(self)}, n_positive={self.n_positive})"

    @classmethod
    def from_arrays(cls, X, y) -> TrialData:
        """
        Construct TrialData from arrays.

        Parameters
        ----------
        X : array, shape (n_trials,) or (n_trials, 2)
            Stimuli. A two-column table is read as (stimulus, response)
            and ``y`` must then be None.
        y : array, shape (n_trials,) or None
            Responses

        Examples
        --------
        >>> data = TrialData.from_arrays([-10.0, 0.0, 10.0], [1, 2, 2])
        >>> table = np.array([[-10.0, 1], [10.0, 2]])
        >>> data = TrialData.from_arrays(table, None)
        """
        X = np.asarray(X, dtype=float)
        if X.ndim == 2 and X.shape[1] == 2 and y is None:
            return cls(X[:, 0], X[:, 1])
        if X.ndim == 1 and y is not None:
            return cls(X, np.asarray(y))
        raise ValueError(
            "X must be shape (n_trials,) with responses y, "
            "or a (n_trials, 2) table with y=None"
        )

    def merge(self, other: TrialData) -> None:
        """
        Merge another dataset into this one (in-place).

        Parameters
        ----------
        other : TrialData
            Dataset to append
        """
        self.stimuli = np.concatenate([self.stimuli, other.stimuli])
        self.responses = np.concatenate([self.responses, other.responses])

    def tail(self, n: int) -> TrialData:
        """Return last n trials as a new TrialData."""
        start = max(len(self) - int(n), 0)
        return TrialData(self.stimuli[start:], self.responses[start:])

    def copy(self) -> TrialData:
        """Create a deep copy of this dataset."""
        return TrialData(self.stimuli.copy(), self.responses.copy())
