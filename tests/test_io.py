"""
test_io.py
----------

Tests for CSV and .mat trial loaders.
"""

import numpy as np
import pytest
import scipy.io

from psyfit.data import load_trials_csv, load_trials_mat, save_trials_csv


class TestCSV:
    def test_save_then_load(self, tmp_path, tiny_dataset):
        path = tmp_path / "trials.csv"
        save_trials_csv(tiny_dataset, path)

        header = path.read_text().splitlines()[0]
        assert header == "stimulus,response"

        loaded = load_trials_csv(path)
        np.testing.assert_array_equal(loaded.stimuli, tiny_dataset.stimuli)
        np.testing.assert_array_equal(loaded.responses, tiny_dataset.responses)

    def test_invalid_response_in_file(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("stimulus,response\n1.5,2\n-1.0,0\n")
        with pytest.raises(ValueError):
            load_trials_csv(path)


class TestMat:
    @pytest.fixture
    def mat_file(self, tmp_path):
        """Trial matrix with two session types (stimulus in column 2, response in 5)."""
        table = np.array(
            [
                [1, -10.0, 0, 0, 1],
                [1, 5.0, 0, 0, 2],
                [2, 7.0, 0, 0, 2],
                [1, 12.5, 0, 0, 2],
            ]
        )
        path = tmp_path / "S1_causalinf_leftright.mat"
        scipy.io.savemat(path, {"comp_dataset": table})
        return path

    def test_load_session(self, mat_file):
        data = load_trials_mat(mat_file)
        np.testing.assert_array_equal(data.stimuli, [-10.0, 5.0, 12.5])
        np.testing.assert_array_equal(data.responses, [1, 2, 2])

    def test_load_other_session(self, mat_file):
        data = load_trials_mat(mat_file, session=2)
        assert len(data) == 1
        assert data.stimuli[0] == 7.0

    def test_missing_variable(self, mat_file):
        with pytest.raises(KeyError, match="data"):
            load_trials_mat(mat_file, variable="data")
