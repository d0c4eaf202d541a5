import math

import numpy as np
import pytest

from hypsel.statistics import (
    LikelihoodScan,
    likelihood_ratio,
    make_smeared_poisson,
    nllr2,
    smeared_poisson,
)

OBSERVED = [0, 1, 2, 3]
VALUES = [0.5, 1.0, 1.5]
TABLE = [
    [0.6, 0.3, 0.1],
    [0.3, 0.4, 0.2],
    [0.08, 0.2, 0.4],
    [0.02, 0.1, 0.3],
]


@pytest.fixture
def scan():
    s = LikelihoodScan(2)
    s.load_likelihood_map(OBSERVED, VALUES, TABLE, 1)
    return s


def test_smeared_poisson_zero_mean_is_certain_zero():
    assert smeared_poisson([0.0], [1.0], [1.0], 0) == 1.0
    assert smeared_poisson([0.0], [1.0], [1.0], 3) == 0.0


def test_smeared_poisson_zero_smearing_gives_zero():
    assert smeared_poisson([1.0, 2.0], [0.0, 0.0], [1.0, 1.0], 2) == 0.0


def test_smeared_poisson_mismatched_lengths():
    with pytest.raises(ValueError):
        smeared_poisson([1.0, 2.0], [1.0], [1.0, 1.0], 0)


def test_make_smeared_poisson_normalised():
    centers = np.linspace(2.5, 7.5, 6)
    contents = np.full(6, 1.0 / 6)
    widths = np.ones(6)
    pmf = make_smeared_poisson(centers, contents, widths, 8.0, 40)
    assert len(pmf) == 41
    assert pmf.sum() == pytest.approx(1.0, abs=1e-9)
    assert np.all(pmf >= 0)


def test_make_smeared_poisson_length_from_upper_edge():
    pmf = make_smeared_poisson([5.0], [1.0], [1.0], 10.0)
    assert len(pmf) == 12


def test_likelihood_ratio_best_scale_is_one():
    assert likelihood_ratio(OBSERVED, VALUES, TABLE, 0, 0.5) == pytest.approx(1.0)
    assert likelihood_ratio(OBSERVED, VALUES, TABLE, 2, 1.5) == pytest.approx(1.0)


def test_likelihood_ratio_below_one_elsewhere():
    ratio = likelihood_ratio(OBSERVED, VALUES, TABLE, 0, 1.5)
    assert 0.0 < ratio < 1.0


def test_likelihood_ratio_beyond_range_is_zero():
    assert likelihood_ratio(OBSERVED, VALUES, TABLE, 7, 1.0) == 0.0


def test_likelihood_ratio_shape_mismatch():
    with pytest.raises(ValueError):
        likelihood_ratio(OBSERVED, VALUES, [[1.0]], 0, 1.0)


def test_nllr2_at_maximum_is_zero():
    assert nllr2(OBSERVED, VALUES, TABLE, 1, 1.0) == pytest.approx(0.0)


def test_nllr2_consistent_with_ratio():
    ratio = likelihood_ratio(OBSERVED, VALUES, TABLE, 3, 0.5)
    assert nllr2(OBSERVED, VALUES, TABLE, 3, 0.5) == pytest.approx(-2 * math.log(ratio))


def test_nllr2_zero_ratio_is_infinite():
    table = [[1.0, 0.0], [0.0, 1.0]]
    assert nllr2([0, 1], [1.0, 2.0], table, 0, 2.0) == math.inf


def test_load_sets_range_and_scales(scan):
    assert scan.min == 0
    assert scan.max == 3
    assert scan.bin_scales == [[1.0, 0.5], [1.0, 1.0], [1.0, 1.5]]
    assert scan.likelihoods[2][3] == 0.3


def test_load_rejects_bad_parameter():
    with pytest.raises(IndexError):
        LikelihoodScan(2).load_likelihood_map(OBSERVED, VALUES, TABLE, 5)


def test_max_likelihood(scan):
    assert scan.max_likelihood(0) == ([1.0, 0.5], 0.6)
    assert scan.max_likelihood(3) == ([1.0, 1.5], 0.3)


def test_max_likelihood_without_positive_value(scan):
    with pytest.raises(ValueError):
        scan.max_likelihood(10)


def test_likelihood_ratio_map_max_is_one(scan):
    ratios = scan.likelihood_ratio_map()
    for n in range(4):
        assert max(r[n] for r in ratios) == pytest.approx(1.0)
    assert ratios[1][1] == pytest.approx(0.4 / 0.4)


def test_ml_fit(scan):
    assert scan.ml_fit(1) == [(0, 0.5), (1, 1.0), (2, 1.5), (3, 1.5)]


def test_confidence_interval_single_set():
    s = LikelihoodScan(1)
    s.load_likelihood_map([0, 1, 2, 3], [1.0], [[0.1], [0.6], [0.25], [0.05]], 0)
    assert s.confidence_interval(0.9, 0, 0) == (0, 2)


def test_confidence_interval_contains_mode(scan):
    lower, upper = scan.confidence_interval(0.5, 1, 2)
    assert lower <= 2 <= upper


def test_confidence_interval_unreachable_level(scan):
    with pytest.raises(ValueError):
        scan.confidence_interval(1.5, 1, 0)


def test_confidence_belt_matches_intervals(scan):
    low, high = scan.confidence_belt(0.8, 1)
    assert len(low) == len(high) == 3
    for i, ((lo, y_lo), (hi, y_hi)) in enumerate(zip(low, high)):
        assert (lo, hi) == scan.confidence_interval(0.8, 1, i)
        assert y_lo == y_hi == VALUES[i]
        assert lo <= hi