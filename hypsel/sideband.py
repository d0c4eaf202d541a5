"""Fits of scale factors to sideband data."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
from scipy.optimize import minimize

_MAX_ITERATIONS = 100
_START_VALUE = 1.0


@dataclass
class BinnedCounts:
    """Bin contents and their errors; errors default to the square root of the contents."""

    contents: np.ndarray
    errors: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.contents = np.array(self.contents, dtype=float)
        if self.errors is None:
            self.errors = np.sqrt(np.clip(self.contents, 0.0, None))
        else:
            self.errors = np.array(self.errors, dtype=float)
        if self.contents.shape != self.errors.shape or self.contents.ndim != 1:
            raise ValueError("contents and errors must be one-dimensional and of equal length")

    @property
    def n_bins(self) -> int:
        return len(self.contents)

    def copy(self) -> BinnedCounts:
        return BinnedCounts(self.contents.copy(), self.errors.copy())


@dataclass
class FitResult:
    """Fitted scale factors and their covariance matrix."""

    values: list[float] = field(default_factory=list)
    covariance: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))


def _hessian(f: Callable[[np.ndarray], float], x: np.ndarray) -> np.ndarray:
    n = len(x)
    h = 1e-4 * np.maximum(1.0, np.abs(x))
    f0 = f(x)
    hess = np.zeros((n, n))
    for i in range(n):
        ei = np.zeros(n)
        ei[i] = h[i]
        hess[i, i] = (f(x + ei) - 2 * f0 + f(x - ei)) / h[i] ** 2
        for j in range(i + 1, n):
            ej = np.zeros(n)
            ej[j] = h[j]
            value = (f(x + ei + ej) - f(x + ei - ej) - f(x - ei + ej) + f(x - ei - ej)) / (4 * h[i] * h[j])
            hess[i, j] = hess[j, i] = value
    return hess


class SidebandFitter:
    """Finds the scale factors on varied templates that best describe the data."""

    def __init__(self) -> None:
        self._fixed: list[BinnedCounts] = []
        self._varied: list[BinnedCounts] = []
        self._data: BinnedCounts | None = None

    def add_histograms(
        self,
        fixed: Iterable[BinnedCounts],
        varied: Iterable[BinnedCounts],
        data: BinnedCounts,
    ) -> None:
        """Add fixed templates, varied templates and the data in one call."""
        self.add_fixed_histograms(fixed)
        self.add_varied_histograms(varied)
        self.add_data_histogram(data)

    def add_fixed_histograms(self, fixed: Iterable[BinnedCounts]) -> None:
        """Add templates kept at their nominal normalisation."""
        self._fixed.extend(h.copy() for h in fixed)

    def add_varied_histograms(self, varied: Iterable[BinnedCounts]) -> None:
        """Add templates whose normalisation is fitted."""
        self._varied.extend(h.copy() for h in varied)

    def add_data_histogram(self, data: BinnedCounts) -> None:
        """Set the data to fit."""
        self._data = data.copy()

    def fit(self) -> FitResult:
        """Minimise the chi-square per degree of freedom over the scale factors."""
        if self._data is None:
            raise ValueError("SidebandFitter: data histogram not loaded")
        if not self._varied:
            raise ValueError("SidebandFitter: no histograms set to be varied in fit")

        data = self._data
        nbins = data.n_bins
        if any(h.n_bins != nbins for h in self._fixed + self._varied):
            raise ValueError("SidebandFitter: histograms have different numbers of bins")
        ndof = nbins - 1
        if ndof < 1:
            raise ValueError("SidebandFitter: at least two bins are needed")

        fixed_contents = sum((h.contents for h in self._fixed), np.zeros(nbins))
        fixed_err2 = sum((h.errors**2 for h in self._fixed), np.zeros(nbins))
        varied_contents = np.array([h.contents for h in self._varied])
        varied_err2 = np.array([h.errors**2 for h in self._varied])
        base_var = data.errors**2 + fixed_err2
        residual = data.contents - fixed_contents

        def chi2(scales: Sequence[float]) -> float:
            c = np.asarray(scales, dtype=float)
            variance = base_var + (varied_err2 * c[:, None] ** 2).sum(axis=0)
            diff = residual - c @ varied_contents
            with np.errstate(divide="ignore", invalid="ignore"):
                return float(np.sum(diff**2 / variance)) / ndof

        start = np.full(len(self._varied), _START_VALUE)
        result = minimize(chi2, start, method="BFGS", options={"maxiter": _MAX_ITERATIONS})
        best = np.asarray(result.x, dtype=float)
        # Covariance for a chi-square with error definition one
        covariance = 2.0 * np.linalg.pinv(_hessian(chi2, best))
        return FitResult(values=[float(v) for v in best], covariance=covariance)

    def clear(self) -> None:
        """Forget all templates and the data."""
        self._fixed.clear()
        self._varied.clear()
        self._data = None