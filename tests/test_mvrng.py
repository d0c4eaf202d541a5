import math

import numpy as np
import pytest

from hypsel.mvrng import MultiVariateRNG


def test_default_central_value_is_ones():
    rng = MultiVariateRNG(1, [[1.0, 0.0], [0.0, 2.0]])
    assert list(rng.cv) == [1.0, 1.0]


def test_central_value_size_mismatch():
    with pytest.raises(ValueError):
        MultiVariateRNG(1, [[1.0, 0.0], [0.0, 1.0]], [1.0, 2.0, 3.0])


def test_non_square_covariance():
    with pytest.raises(ValueError):
        MultiVariateRNG(1, [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])


def test_eval_gauss_dimension_mismatch():
    rng = MultiVariateRNG(1, [[1.0]], [0.0])
    with pytest.raises(ValueError):
        rng.eval_gauss([0.0, 1.0])


def test_eval_gauss_peak_value():
    rng = MultiVariateRNG(1, [[1.0]], [0.0])
    assert rng.eval_gauss([0.0]) == pytest.approx(1 / math.sqrt(2 * 3.1416))


def test_eval_gauss_symmetric_and_peaked():
    rng = MultiVariateRNG(3, [[2.0, 0.5], [0.5, 1.0]], [1.0, -1.0])
    plus = rng.eval_gauss([1.7, -0.6])
    minus = rng.eval_gauss([0.3, -1.4])
    assert plus == pytest.approx(minus)
    assert rng.eval_gauss([1.0, -1.0]) > plus


def test_same_seed_reproducible():
    cov = [[1.0, 0.2], [0.2, 0.5]]
    a = MultiVariateRNG(42, cov, [0.0, 1.0])
    b = MultiVariateRNG(42, cov, [0.0, 1.0])
    assert [a.parameter_set() for _ in range(5)] == [b.parameter_set() for _ in range(5)]


def test_samples_within_four_sigma_box():
    rng = MultiVariateRNG(7, [[4.0, 0.0], [0.0, 0.25]], [10.0, -2.0])
    for _ in range(200):
        x, y = rng.parameter_set()
        assert 10.0 - 8.0 <= x <= 10.0 + 8.0
        assert -2.0 - 2.0 <= y <= -2.0 + 2.0


def test_sample_moments():
    rng = MultiVariateRNG(11, [[0.25]], [3.0])
    samples = np.array([rng.parameter_set()[0] for _ in range(3000)])
    assert samples.mean() == pytest.approx(3.0, abs=0.05)
    assert samples.std() == pytest.approx(0.5, abs=0.05)