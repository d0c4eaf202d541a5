import numpy as np
import pytest

from hypsel.sideband import BinnedCounts, FitResult, SidebandFitter


def test_default_errors_are_poisson():
    h = BinnedCounts([4.0, 9.0, 0.0])
    assert list(h.errors) == [2.0, 3.0, 0.0]


def test_mismatched_errors_rejected():
    with pytest.raises(ValueError):
        BinnedCounts([1.0, 2.0], [0.1])


def test_fit_without_data_raises():
    fitter = SidebandFitter()
    fitter.add_varied_histograms([BinnedCounts([1.0, 2.0])])
    with pytest.raises(ValueError):
        fitter.fit()


def test_fit_without_varied_raises():
    fitter = SidebandFitter()
    fitter.add_data_histogram(BinnedCounts([1.0, 2.0]))
    with pytest.raises(ValueError):
        fitter.fit()


def test_bin_count_mismatch_raises():
    fitter = SidebandFitter()
    fitter.add_histograms([], [BinnedCounts([1.0, 2.0, 3.0])], BinnedCounts([1.0, 2.0]))
    with pytest.raises(ValueError):
        fitter.fit()


def test_single_scale_recovered():
    err = [0.1, 0.1, 0.1]
    fixed = BinnedCounts([1.0, 2.0, 3.0], err)
    varied = BinnedCounts([4.5, 9.0, 13.5], err)
    data = BinnedCounts([10.0, 20.0, 30.0], err)
    fitter = SidebandFitter()
    fitter.add_histograms([fixed], [varied], data)
    result = fitter.fit()
    assert isinstance(result, FitResult)
    assert result.values[0] == pytest.approx(2.0, abs=1e-3)
    assert result.covariance.shape == (1, 1)
    assert result.covariance[0, 0] > 0


def test_two_scales_recovered_and_covariance_symmetric():
    err = [0.01] * 4
    v1 = BinnedCounts([1.0, 1.0, 0.0, 0.0], err)
    v2 = BinnedCounts([0.0, 0.0, 1.0, 1.0], err)
    data = BinnedCounts([3.0, 3.0, 0.5, 0.5], err)
    fitter = SidebandFitter()
    fitter.add_varied_histograms([v1, v2])
    fitter.add_data_histogram(data)
    result = fitter.fit()
    assert result.values == pytest.approx([3.0, 0.5], abs=1e-3)
    cov = result.covariance
    assert np.allclose(cov, cov.T)
    assert np.all(np.diag(cov) > 0)


def test_inputs_are_copied():
    err = [0.1, 0.1]
    varied = BinnedCounts([1.0, 2.0], err)
    data = BinnedCounts([3.0, 6.0], err)
    fitter = SidebandFitter()
    fitter.add_varied_histograms([varied])
    fitter.add_data_histogram(data)
    varied.contents[:] = 100.0
    data.contents[:] = 0.0
    assert fitter.fit().values[0] == pytest.approx(3.0, abs=1e-3)


def test_clear_forgets_everything():
    fitter = SidebandFitter()
    fitter.add_histograms([BinnedCounts([1.0, 1.0])], [BinnedCounts([1.0, 2.0])], BinnedCounts([2.0, 3.0]))
    fitter.clear()
    with pytest.raises(ValueError):
        fitter.fit()