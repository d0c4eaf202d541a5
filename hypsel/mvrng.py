"""Random parameter sets drawn from a multivariate Gaussian."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

MAX_CALLS = 200_000

# The normalisation uses this value of 2*pi; kept so densities match the tuned inputs.
_TWO_PI = 2 * 3.1416


class MultiVariateRNG:
    """Draws parameter vectors from a Gaussian by rejection sampling."""

    def __init__(
        self,
        seed: int,
        cov: Sequence[Sequence[float]] | np.ndarray,
        cv: Sequence[float] | None = None,
    ) -> None:
        matrix = np.array(cov, dtype=float, ndmin=2)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError("covariance matrix must be square")
        n = matrix.shape[0]

        self.seed = seed
        self.cov = matrix
        self.determinant = float(np.linalg.det(matrix))
        self.cov_inv = np.linalg.inv(matrix)

        if cv is None or len(cv) == 0:
            self.cv = np.ones(n)
        elif len(cv) != n:
            raise ValueError("Central value vector and covariance matrix have different sizes")
        else:
            self.cv = np.array(cv, dtype=float)

        with np.errstate(invalid="ignore"):
            self._denominator = float(np.sqrt(_TWO_PI**n * self.determinant))
            self._half_width = 4 * np.sqrt(np.diag(matrix))
        self._rng = np.random.default_rng(seed)

    def parameter_set(self) -> list[float]:
        """Return one random parameter vector distributed as the Gaussian."""
        low = self.cv - self._half_width
        high = self.cv + self._half_width
        ceiling = 1.0 / self._denominator
        for _ in range(MAX_CALLS):
            values = self._rng.uniform(low, high)
            density = self.eval_gauss(values)
            if self._rng.uniform(0.0, ceiling) < density:
                return [float(v) for v in values]
        raise RuntimeError(f"MultiVariateRNG.parameter_set: call limit of {MAX_CALLS} reached")

    def eval_gauss(self, x: Sequence[float]) -> float:
        """Return the Gaussian density at x."""
        point = np.asarray(x, dtype=float)
        if point.shape != self.cv.shape:
            raise ValueError("MultiVariateRNG.eval_gauss: vector dimension mismatch")
        diff = point - self.cv
        exponent = float(diff @ self.cov_inv @ diff)
        return float(np.exp(-0.5 * exponent) / self._denominator)